# -*- coding: utf-8 -*-
"""
This module provides utilities for presenting game boards.

It includes an identity-keyed comparison of board snapshots for renderers that animate tiles, plain-text
rendering, and a `WindowBoard` class drawing a session with Matplotlib.
"""

from .diff import SnapshotDiff, diff_snapshots
from .text import render_board, render_state

__all__ = ["SnapshotDiff", "diff_snapshots", "render_board", "render_state"]
