"""
Game configuration.
"""

from dataclasses import dataclass, field

# ##>: Default tile spawn probabilities (80% for 2, 20% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.8, 4: 0.2}

WIN_TILE = 2048
STORAGE_KEY = 'game-state'


@dataclass
class GameConfig:
    """
    Parameters of a game session.

    Attributes
    ----------
    size : int
        Side length of the square board.
    target : int
        Tile value that wins the game.
    start_tiles : int
        Number of tiles spawned by a new game.
    spawn_probs : dict[int, float]
        Probability of each spawned tile value.
    storage_key : str
        Key under which the session is persisted.
    seed : int | None
        Seed of the random generator, ``None`` for a non-reproducible game.
    """

    size: int = 4
    target: int = WIN_TILE
    start_tiles: int = 2
    spawn_probs: dict[int, float] = field(default_factory=lambda: dict(TILE_SPAWN_PROBS))
    storage_key: str = STORAGE_KEY
    seed: int | None = None

    def validate(self) -> 'GameConfig':
        """
        Check the configuration for consistency.

        Returns
        -------
        GameConfig
            The configuration itself, to allow chaining.

        Raises
        ------
        ValueError
            If any parameter is out of range.
        """
        if self.size < 2:
            raise ValueError(f'size must be >= 2, got {self.size}')
        if self.target < 2 or self.target & (self.target - 1):
            raise ValueError(f'target must be a power of two >= 2, got {self.target}')
        if not 0 <= self.start_tiles <= self.size**2:
            raise ValueError(f'start_tiles must be in [0, {self.size ** 2}], got {self.start_tiles}')
        if not self.spawn_probs or any(value < 2 or value & (value - 1) for value in self.spawn_probs):
            raise ValueError(f'spawn values must be powers of two >= 2, got {list(self.spawn_probs)}')
        if abs(sum(self.spawn_probs.values()) - 1.0) > 1e-9:
            raise ValueError(f'spawn probabilities must sum to 1, got {sum(self.spawn_probs.values())}')
        if not self.storage_key:
            raise ValueError('storage_key must not be empty')
        return self
