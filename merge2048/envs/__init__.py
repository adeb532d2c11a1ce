# -*- coding: utf-8 -*-
"""
Game session of the 2048 game.

This module provides the `GameSession` class, which owns the board, score and move counter and processes one
directional input at a time, plus helpers turning raw input into move directions.
"""

from .controls import direction_from_swipe, parse_direction
from .session import GameSession, TurnResult

__all__ = ["GameSession", "TurnResult", "parse_direction", "direction_from_swipe"]
