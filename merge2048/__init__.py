# -*- coding: utf-8 -*-
"""
Rule engine of the 2048 sliding-tile puzzle, with game sessions and persistence.
"""

from .core import Board, Direction, GameConfig, Tile
from .core.state import SessionState, SessionStatus
from .envs import GameSession, TurnResult

__all__ = [
    "Board",
    "Tile",
    "Direction",
    "GameConfig",
    "SessionState",
    "SessionStatus",
    "GameSession",
    "TurnResult",
]
