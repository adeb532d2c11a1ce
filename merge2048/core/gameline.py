"""
Line transforms for the 2048 game: sliding and merging a single row or column.

Every line is oriented so that movement goes toward index 0. Reversal for right and down moves is the
caller's responsibility.
"""

from typing import NamedTuple, Sequence

from merge2048.core.tile import Tile, new_identity


class LineResult(NamedTuple):
    """
    Outcome of a line transform.

    Attributes
    ----------
    line : list[Tile]
        The transformed line, same length as the input.
    score : int
        Sum of the values produced by merges.
    changed : bool
        Whether any position holds a different value than in the input.
    """

    line: list[Tile]
    score: int
    changed: bool


def _differs(before: Sequence[Tile], after: Sequence[Tile]) -> bool:
    return any(old.value != new.value for old, new in zip(before, after))


def _compact(tiles: list[Tile], length: int) -> list[Tile]:
    packed = [tile for tile in tiles if not tile.empty]
    return packed + [Tile() for _ in range(length - len(packed))]


def slide(line: Sequence[Tile]) -> LineResult:
    """
    Pack the non-empty tiles of a line toward index 0.

    Parameters
    ----------
    line : Sequence[Tile]
        One row or column. Not modified.

    Returns
    -------
    LineResult
        The slid line with a zero score.

    Notes
    -----
    - Relative order of tiles is preserved and no value changes.
    - Returned tiles are copies; their coordinates are meaningless until written back into a board.
    """
    result = _compact([tile.copy() for tile in line], len(line))
    return LineResult(result, 0, _differs(line, result))


def merge(line: Sequence[Tile]) -> LineResult:
    """
    Merge adjacent equal tiles of an already slid line.

    Parameters
    ----------
    line : Sequence[Tile]
        One row or column with no gap between non-empty tiles. Not modified.

    Returns
    -------
    LineResult
        The merged line, padded with empty tiles, and the merge score.

    Notes
    -----
    - The scan goes from index 0 upward. A merged tile doubles, gets a fresh identity and empties its
      right neighbour, so no tile takes part in two merges in the same pass: ``[2, 2, 2, 0]`` gives
      ``[4, 2, 0, 0]``.
    - The score is the sum of the doubled values.
    """
    result = [tile.copy() for tile in line]
    score = 0

    for i in range(len(result) - 1):
        left, right = result[i], result[i + 1]
        if left.value != 0 and left.value == right.value:
            left.value *= 2
            left.id = new_identity()
            right.clear()
            score += left.value

    result = _compact(result, len(line))
    return LineResult(result, score, _differs(line, result))


def slide_and_merge(line: Sequence[Tile]) -> LineResult:
    """
    Slide then merge a line in one call.

    Parameters
    ----------
    line : Sequence[Tile]
        One row or column. Not modified.

    Returns
    -------
    LineResult
        The final line, merge score and whether it differs from the input.
    """
    slid = slide(line)
    merged = merge(slid.line)
    return LineResult(merged.line, merged.score, _differs(line, merged.line))
