# -*- coding: utf-8 -*-
"""
Rule engine of the 2048 game.

It includes the tile and board data model, line transforms for sliding and merging, whole-board moves,
random tile spawning and terminal-state detection.
"""

from .config import GameConfig
from .gameboard import MoveResult, apply_move, board_lines, preview_move, spawn_random_tile
from .gameline import LineResult, merge, slide, slide_and_merge
from .gamemove import Direction, is_lost, is_won, legal_actions_mask, legal_directions
from .tile import Board, Tile, new_identity

__all__ = [
    "Board",
    "Tile",
    "new_identity",
    "GameConfig",
    "LineResult",
    "slide",
    "merge",
    "slide_and_merge",
    "Direction",
    "MoveResult",
    "apply_move",
    "preview_move",
    "board_lines",
    "spawn_random_tile",
    "is_won",
    "is_lost",
    "legal_actions_mask",
    "legal_directions",
]
