"""
Tile and board data model for the 2048 game.

A board is a dense square grid of ``Tile`` objects. Every coordinate always holds exactly one tile;
moves transfer identities and values between cells while positions stay fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Sequence
from uuid import uuid4

from numpy import array, int64, ndarray


def new_identity() -> str:
    """Return a fresh opaque tile identity."""
    return uuid4().hex


@dataclass
class Tile:
    """
    Content of a single cell.

    Attributes
    ----------
    id : str | None
        Opaque identity, present only while the tile is non-empty.
    value : int
        Tile value, ``0`` for an empty cell, otherwise a power of two.
    x : int
        Column index.
    y : int
        Row index.
    """

    id: str | None = None
    value: int = 0
    x: int = 0
    y: int = 0

    @property
    def empty(self) -> bool:
        """True if the cell holds no tile."""
        return self.value == 0

    @property
    def position(self) -> tuple[int, int]:
        """Return the ``(column, row)`` coordinates of the cell."""
        return self.x, self.y

    def clear(self) -> None:
        """Empty the cell."""
        self.id = None
        self.value = 0

    def assign(self, other: Tile) -> None:
        """Copy identity and value from another tile, keeping this cell's position."""
        self.id = other.id
        self.value = other.value

    def copy(self) -> Tile:
        """Return a detached copy of the tile."""
        return replace(self)


class Board:
    """
    Dense ``size x size`` grid of tiles.

    Cells are stored row-major: ``board[row][column]``. A tile at ``board[y][x]`` always reports
    ``tile.x == x`` and ``tile.y == y``.
    """

    def __init__(self, cells: list[list[Tile]]):
        size = len(cells)
        if size < 2 or any(len(row) != size for row in cells):
            raise ValueError(f'Board must be a square grid of size >= 2, got {[len(row) for row in cells]}')
        seen = set()
        for y, row in enumerate(cells):
            for x, tile in enumerate(row):
                if tile.position != (x, y):
                    raise ValueError(f'Tile at ({x}, {y}) reports position {tile.position}')
                if (tile.id is None) != (tile.value == 0):
                    raise ValueError(f'Tile at ({x}, {y}) has inconsistent identity {tile.id!r} for value {tile.value}')
                if tile.id is not None:
                    if tile.id in seen:
                        raise ValueError(f'Tile at ({x}, {y}) repeats identity {tile.id!r}')
                    seen.add(tile.id)
        self._cells = cells

    @classmethod
    def empty(cls, size: int = 4) -> Board:
        """
        Create a board with no tiles.

        Parameters
        ----------
        size : int, optional
            Side length of the grid (default is 4).

        Returns
        -------
        Board
            A board whose every cell is empty.
        """
        if size < 2:
            raise ValueError(f'Board size must be >= 2, got {size}')
        return cls([[Tile(x=x, y=y) for x in range(size)] for y in range(size)])

    @classmethod
    def from_values(cls, values: Sequence[Sequence[int]] | ndarray) -> Board:
        """
        Build a board from a grid of values, giving every non-zero cell a fresh identity.

        Parameters
        ----------
        values : Sequence[Sequence[int]] | ndarray
            Row-major square grid of tile values.

        Returns
        -------
        Board
            The corresponding board.
        """
        cells = [
            [Tile(id=new_identity() if value else None, value=int(value), x=x, y=y) for x, value in enumerate(row)]
            for y, row in enumerate(values)
        ]
        return cls(cells)

    @property
    def size(self) -> int:
        """Side length of the grid."""
        return len(self._cells)

    def __getitem__(self, row: int) -> list[Tile]:
        return self._cells[row]

    def __iter__(self) -> Iterator[Tile]:
        for row in self._cells:
            yield from row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f'Board({self.values().tolist()})'

    def rows(self) -> list[list[Tile]]:
        """Return the cells grouped by row, top to bottom."""
        return [list(row) for row in self._cells]

    def columns(self) -> list[list[Tile]]:
        """Return the cells grouped by column, left to right."""
        return [[row[x] for row in self._cells] for x in range(self.size)]

    def values(self) -> ndarray:
        """
        Return the tile values as a 2-D array.

        Returns
        -------
        ndarray
            A ``(size, size)`` ``int64`` array, row-major.
        """
        return array([[tile.value for tile in row] for row in self._cells], dtype=int64)

    def empty_cells(self) -> list[Tile]:
        """Return the cells currently holding no tile."""
        return [tile for tile in self if tile.empty]

    def snapshot(self) -> Board:
        """Return a deep copy of the board."""
        return Board([[tile.copy() for tile in row] for row in self._cells])
