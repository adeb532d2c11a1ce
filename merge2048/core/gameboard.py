"""
Board engine for the 2048 game: whole-board moves and random tile spawning.
"""

from dataclasses import dataclass
from typing import Callable

from numpy.random import PCG64DXSM, Generator, default_rng

from merge2048.core.config import TILE_SPAWN_PROBS
from merge2048.core.gameline import LineResult, merge, slide
from merge2048.core.gamemove import Direction
from merge2048.core.tile import Board, Tile, new_identity

# ##>: Module-level generator, used unless the caller supplies one.
_GENERATOR = default_rng(PCG64DXSM())


@dataclass
class MoveResult:
    """
    Outcome of a directional move.

    Attributes
    ----------
    direction : Direction
        The applied direction.
    slid : bool
        Whether the slide phase moved any tile.
    merged : bool
        Whether the merge phase combined any tiles.
    score : int
        Sum of the values produced by merges.
    after_slide : Board
        Snapshot of the board between the slide and merge phases.
    after_merge : Board
        Snapshot of the board once the move is complete.
    """

    direction: Direction
    slid: bool
    merged: bool
    score: int
    after_slide: Board
    after_merge: Board

    @property
    def changed(self) -> bool:
        """True if the move altered the board."""
        return self.slid or self.merged


def board_lines(board: Board, direction: Direction) -> list[list[Tile]]:
    """
    Decompose the board into lines oriented toward the move direction.

    Parameters
    ----------
    board : Board
        The game board.
    direction : Direction
        The move direction.

    Returns
    -------
    list[list[Tile]]
        References to the board cells, one list per row (left, right) or column (up, down). Lines for
        right and down are reversed so that index 0 is always the cell tiles move toward.
    """
    lines = board.rows() if direction in (Direction.LEFT, Direction.RIGHT) else board.columns()
    if direction in (Direction.RIGHT, Direction.DOWN):
        lines = [line[::-1] for line in lines]
    return lines


def _transform(board: Board, direction: Direction, transform: Callable[[list[Tile]], LineResult]) -> tuple[bool, int]:
    changed, score = False, 0
    for cells in board_lines(board, direction):
        result = transform(cells)
        if result.changed:
            # ##: Cells are references in move order, so writing back undoes any reversal.
            for cell, tile in zip(cells, result.line):
                cell.assign(tile)
            changed = True
        score += result.score
    return changed, score


def apply_move(board: Board, direction: Direction) -> MoveResult:
    """
    Slide then merge every line of the board in the given direction.

    Parameters
    ----------
    board : Board
        The game board. **Modified in-place.**
    direction : Direction
        The move direction.

    Returns
    -------
    MoveResult
        Phase flags, merge score and a snapshot after each phase.

    Notes
    -----
    - Sliding and merging are two passes so a presentation layer can reveal them separately.
    - Cell positions never change; identities and values move between cells.
    - No tile is spawned here.
    """
    slid, _ = _transform(board, direction, slide)
    after_slide = board.snapshot()
    merged, score = _transform(board, direction, merge)
    return MoveResult(direction, slid, merged, score, after_slide, board.snapshot())


def preview_move(board: Board, direction: Direction) -> MoveResult:
    """
    Compute the result of a move without touching the board.

    Parameters
    ----------
    board : Board
        The game board. Not modified.
    direction : Direction
        The move direction.

    Returns
    -------
    MoveResult
        What ``apply_move`` would return.
    """
    return apply_move(board.snapshot(), direction)


def spawn_random_tile(
    board: Board, rng: Generator | None = None, probabilities: dict[int, float] | None = None
) -> Tile | None:
    """
    Place a new tile in a random empty cell.

    Parameters
    ----------
    board : Board
        The game board. **Modified in-place.**
    rng : Generator, optional
        Random number generator, the module-level one by default.
    probabilities : dict[int, float], optional
        Probability of each tile value, 80% for 2 and 20% for 4 by default.

    Returns
    -------
    Tile | None
        The cell that received the tile, or None if the board had no empty cell.

    Notes
    -----
    - The cell is chosen uniformly among empty cells and gets a fresh identity.
    """
    rng = rng if rng is not None else _GENERATOR
    probabilities = probabilities or TILE_SPAWN_PROBS

    # ##: Nothing to do on a full board.
    empty_cells = board.empty_cells()
    if not empty_cells:
        return None

    cell = empty_cells[int(rng.integers(len(empty_cells)))]
    cell.value = int(rng.choice(list(probabilities), p=list(probabilities.values())))
    cell.id = new_identity()
    return cell
