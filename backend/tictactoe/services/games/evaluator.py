"""Win and draw detection over a board snapshot.

A board is a flat sequence of ``board_size * board_size`` cells, each either
``None`` or the ordinal of the player holding it. Nothing here keeps state.
"""

from typing import List, Optional, Sequence, Tuple

WinLine = Tuple[int, ...]
Board = Sequence[Optional[int]]


def compute_win_lines(board_size: int, win_length: int) -> Tuple[WinLine, ...]:
    """Enumerate every winning alignment for the given board dimensions.

    Order is rows, then columns, then down-right diagonals, then down-left
    diagonals. When ``win_length == board_size`` this is exactly the rows,
    the columns and the two main diagonals.
    """
    if board_size < 1 or not 1 <= win_length <= board_size:
        raise ValueError(f"win_length must be in 1..{board_size}, got {win_length}")

    span = board_size - win_length + 1
    lines: List[WinLine] = []
    for row in range(board_size):
        for col in range(span):
            start = row * board_size + col
            lines.append(tuple(start + k for k in range(win_length)))
    for col in range(board_size):
        for row in range(span):
            start = row * board_size + col
            lines.append(tuple(start + k * board_size for k in range(win_length)))
    for row in range(span):
        for col in range(span):
            start = row * board_size + col
            lines.append(tuple(start + k * (board_size + 1) for k in range(win_length)))
    for row in range(span):
        for col in range(win_length - 1, board_size):
            start = row * board_size + col
            lines.append(tuple(start + k * (board_size - 1) for k in range(win_length)))
    return tuple(lines)


def evaluate_win(board: Board, win_lines: Sequence[WinLine]) -> Optional[int]:
    """Return the ordinal holding every cell of the first complete line, or None."""
    for line in win_lines:
        first = board[line[0]]
        if first is None:
            continue
        if all(board[index] == first for index in line[1:]):
            return first
    return None


def evaluate_draw(board: Board) -> bool:
    return all(cell is not None for cell in board)
