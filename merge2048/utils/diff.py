"""
Compare two board snapshots by tile identity, for renderers that animate tiles across turns.
"""

from dataclasses import dataclass, field

from merge2048.core.tile import Board, Tile


@dataclass
class SnapshotDiff:
    """
    Tile-level difference between two boards.

    Attributes
    ----------
    created : list[Tile]
        Tiles whose identity is new: spawned or produced by a merge.
    moved : list[tuple[Tile, Tile]]
        ``(before, after)`` pairs of tiles that kept their identity but changed cell.
    kept : list[Tile]
        Tiles that kept both identity and cell.
    removed : list[Tile]
        Tiles whose identity disappeared: consumed by a merge.
    """

    created: list[Tile] = field(default_factory=list)
    moved: list[tuple[Tile, Tile]] = field(default_factory=list)
    kept: list[Tile] = field(default_factory=list)
    removed: list[Tile] = field(default_factory=list)

    @property
    def unchanged(self) -> bool:
        """True if nothing needs to be redrawn."""
        return not (self.created or self.moved or self.removed)


def diff_snapshots(before: Board, after: Board) -> SnapshotDiff:
    """
    Match the tiles of two boards by identity.

    Parameters
    ----------
    before : Board
        Earlier snapshot.
    after : Board
        Later snapshot.

    Returns
    -------
    SnapshotDiff
        Created, moved, kept and removed tiles.
    """
    old = {tile.id: tile for tile in before if not tile.empty}
    diff = SnapshotDiff()

    for tile in after:
        if tile.empty:
            continue
        previous = old.pop(tile.id, None)
        if previous is None:
            diff.created.append(tile)
        elif previous.position != tile.position:
            diff.moved.append((previous, tile))
        else:
            diff.kept.append(tile)

    diff.removed.extend(old.values())
    return diff
