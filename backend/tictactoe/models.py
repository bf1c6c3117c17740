import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from tictactoe.errors import MoveRejected, RejectReason
from tictactoe.services.games.evaluator import evaluate_draw, evaluate_win

if TYPE_CHECKING:
    from tictactoe.services.games.variants import GameVariant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Player:
    index: int
    symbol: str
    color: str
    name: str

    def to_dict(self):
        return {
            'id': self.index,
            'symbol': self.symbol,
            'color': self.color,
            'name': self.name,
        }


@dataclass
class GameSession:
    """The authoritative state of one game.

    ``scores`` holds one win tally per player followed by the draw counter.
    Mutated only through ``apply_move``, ``reset`` and ``reset_scores``.
    """

    id: int
    variant: 'GameVariant'
    board: List[Optional[int]] = field(default_factory=list)
    current_player_index: int = 0
    active: bool = True
    winner: Optional[int] = None
    is_draw: bool = False
    scores: List[int] = field(default_factory=list)

    @classmethod
    def new(cls, session_id: int, variant: 'GameVariant', scores: Optional[List[int]] = None) -> 'GameSession':
        if scores is None or len(scores) != variant.players + 1:
            scores = [0] * (variant.players + 1)
        return cls(
            id=session_id,
            variant=variant,
            board=[None] * variant.cell_count,
            scores=list(scores),
        )

    def apply_move(self, cell_index: int):
        """Place the current player's mark and settle the outcome.

        Raises MoveRejected without touching any state when the move is illegal.
        Returns the snapshot of the resulting state.
        """
        if not self.active:
            raise MoveRejected(RejectReason.GAME_NOT_ACTIVE, 'Game is not active')
        if not 0 <= cell_index < len(self.board):
            raise MoveRejected(
                RejectReason.INDEX_OUT_OF_RANGE,
                f'Cell index must be in 0..{len(self.board) - 1}',
            )
        if self.board[cell_index] is not None:
            raise MoveRejected(RejectReason.CELL_OCCUPIED, f'Cell {cell_index} is already taken')

        player = self.current_player_index
        self.board[cell_index] = player

        winner = evaluate_win(self.board, self.variant.win_lines)
        if winner is not None:
            self.winner = winner
            self.active = False
            self.scores[winner] += 1
            logger.info(f"[win] session={self.id} player={winner}")
        elif evaluate_draw(self.board):
            self.is_draw = True
            self.active = False
            self.scores[-1] += 1
            logger.info(f"[draw] session={self.id}")
        else:
            self.current_player_index = (player + 1) % self.variant.players
        return self.to_dict()

    def reset(self):
        """Start a new game on the same session; scores carry over."""
        self.board = [None] * self.variant.cell_count
        self.current_player_index = 0
        self.active = True
        self.winner = None
        self.is_draw = False
        return self.to_dict()

    def reset_scores(self):
        self.scores = [0] * (self.variant.players + 1)
        return self.to_dict()

    def copy(self) -> 'GameSession':
        # variant is immutable and shared; only the mutable state is copied
        return GameSession(
            id=self.id,
            variant=self.variant,
            board=list(self.board),
            current_player_index=self.current_player_index,
            active=self.active,
            winner=self.winner,
            is_draw=self.is_draw,
            scores=list(self.scores),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'board': list(self.board),
            'currentPlayerIndex': self.current_player_index,
            'active': self.active,
            'winner': self.winner,
            'isDraw': self.is_draw,
            'scores': list(self.scores),
            'variant': self.variant.name,
            'boardSize': self.variant.board_size,
            'winLength': self.variant.win_length,
            'players': [p.to_dict() for p in self.variant.roster],
        }
