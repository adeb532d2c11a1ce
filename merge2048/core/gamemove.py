"""
Move directions and terminal-state detection for the 2048 game.
"""

from enum import Enum

from numpy import asarray, ndarray, rot90

from merge2048.core.config import WIN_TILE
from merge2048.core.tile import Board


class Direction(Enum):
    """Move directions, numbered like the action codes ``0: left, 1: up, 2: right, 3: down``."""

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3


def _as_values(board: Board | ndarray) -> ndarray:
    if isinstance(board, Board):
        return board.values()
    return asarray(board)


def _can_move_left(state: ndarray) -> bool:
    near, far = state[:, :-1], state[:, 1:]
    slides = (near == 0) & (far != 0)
    merges = (near != 0) & (near == far)
    return bool(slides.any() or merges.any())


def legal_actions_mask(board: Board | ndarray) -> tuple[bool, bool, bool, bool]:
    """
    Get a boolean mask for all four directions.

    Each direction is checked on a rotated copy of the values so that it becomes a move toward column 0.

    Parameters
    ----------
    board : Board | ndarray
        The game board or its 2-D value array.

    Returns
    -------
    tuple[bool, bool, bool, bool]
        Mask for (left, up, right, down) where True means the move changes the board.
    """
    state = _as_values(board)
    # ##>: rot90 by the action code turns up, right and down into left.
    return tuple(_can_move_left(rot90(state, k=direction.value)) for direction in Direction)


def legal_directions(board: Board | ndarray) -> list[Direction]:
    """
    Determine the directions that would change the board.

    Parameters
    ----------
    board : Board | ndarray
        The game board or its 2-D value array.

    Returns
    -------
    list[Direction]
        Legal directions, in action-code order.
    """
    mask = legal_actions_mask(board)
    return [direction for direction in Direction if mask[direction.value]]


def is_won(board: Board | ndarray, target: int = WIN_TILE) -> bool:
    """
    Check whether any tile has reached the target value.

    Parameters
    ----------
    board : Board | ndarray
        The game board or its 2-D value array.
    target : int, optional
        Winning tile value (default is 2048).

    Returns
    -------
    bool
        True if some cell holds exactly ``target``.
    """
    return bool((_as_values(board) == target).any())


def is_lost(board: Board | ndarray) -> bool:
    """
    Check whether no move is possible anymore.

    Parameters
    ----------
    board : Board | ndarray
        The game board or its 2-D value array.

    Returns
    -------
    bool
        True if the board is full and no horizontally or vertically adjacent cells are equal.
    """
    state = _as_values(board)
    if (state == 0).any():
        return False
    # ##>: On a full board only merges remain, so no legal direction means no adjacent pair.
    return not any(legal_actions_mask(state))
