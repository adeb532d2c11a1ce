"""Plain-text rendering of boards and sessions."""

from merge2048.core.state import SessionState
from merge2048.core.tile import Board


def render_board(board: Board) -> str:
    """
    Format a board as tab-separated rows, empty cells shown as ``.``.

    Parameters
    ----------
    board : Board
        The board to format.

    Returns
    -------
    str
        One line per row.
    """
    return '\n'.join(' \t'.join(str(tile.value) if tile.value else '.' for tile in row) for row in board.rows())


def render_state(state: SessionState) -> str:
    """Format a session as a header line followed by the board."""
    header = f'score={state.score} moves={state.moves} status={state.status.value}'
    return f'{header}\n{render_board(state.board)}'
