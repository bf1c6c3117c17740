from dataclasses import dataclass, field
from typing import Dict, Tuple

from tictactoe.models import Player
from .evaluator import WinLine, compute_win_lines


DEFAULT_ROSTER: Tuple[Player, ...] = (
    Player(index=0, symbol='X', color='#EF4444', name='Player 1'),  # Red
    Player(index=1, symbol='O', color='#3B82F6', name='Player 2'),  # Blue
    Player(index=2, symbol='△', color='#10B981', name='Player 3'),  # Green
    Player(index=3, symbol='□', color='#F59E0B', name='Player 4'),  # Amber
)
EXTRA_PLAYER_COLOR = '#6B7280'


def build_roster(players: int) -> Tuple[Player, ...]:
    """First ``players`` entries of the default roster, numbered beyond four."""
    roster = list(DEFAULT_ROSTER[:players])
    for index in range(len(roster), players):
        roster.append(Player(index=index, symbol=str(index + 1), color=EXTRA_PLAYER_COLOR, name=f'Player {index + 1}'))
    return tuple(roster)


@dataclass(frozen=True)
class GameVariant:
    """A session type: board side, win-line length and roster size.

    Win lines are computed once here and shared by every session of the variant.
    """

    name: str
    board_size: int
    win_length: int
    players: int
    win_lines: Tuple[WinLine, ...] = field(init=False, repr=False, compare=False)
    roster: Tuple[Player, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.players < 2:
            raise ValueError(f"variant {self.name!r} needs at least 2 players, got {self.players}")
        object.__setattr__(self, 'win_lines', compute_win_lines(self.board_size, self.win_length))
        object.__setattr__(self, 'roster', build_roster(self.players))

    @property
    def cell_count(self) -> int:
        return self.board_size * self.board_size

    def to_dict(self):
        return {
            'name': self.name,
            'boardSize': self.board_size,
            'winLength': self.win_length,
            'players': [p.to_dict() for p in self.roster],
            'winLineCount': len(self.win_lines),
        }


CLASSIC = GameVariant(name='classic', board_size=3, win_length=3, players=3)
GRAND = GameVariant(name='grand', board_size=5, win_length=5, players=4)


def load_variants(config) -> Dict[str, GameVariant]:
    """Built-in variants plus an optional "custom" one read from app config."""
    variants = {CLASSIC.name: CLASSIC, GRAND.name: GRAND}
    board_size = config.get('BOARD_SIZE')
    if not board_size and (config.get('WIN_LENGTH') or config.get('PLAYER_COUNT')):
        raise ValueError('WIN_LENGTH and PLAYER_COUNT need BOARD_SIZE to define the custom variant')
    if board_size:
        variants['custom'] = GameVariant(
            name='custom',
            board_size=int(board_size),
            win_length=int(config.get('WIN_LENGTH') or board_size),
            players=int(config.get('PLAYER_COUNT') or 2),
        )
    default = config.get('DEFAULT_VARIANT') or CLASSIC.name
    if default not in variants:
        raise ValueError(f"DEFAULT_VARIANT {default!r} is not one of {sorted(variants)}")
    return variants
