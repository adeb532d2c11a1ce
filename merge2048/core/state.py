"""
Session state of a 2048 game.
"""

from dataclasses import dataclass
from enum import Enum

from merge2048.core.tile import Board


class SessionStatus(str, Enum):
    """Lifecycle of a game session."""

    IDLE = 'idle'
    IN_PROGRESS = 'in_progress'
    WON = 'won'
    LOST = 'lost'


@dataclass
class SessionState:
    """
    Everything needed to display, persist or resume a game.

    Attributes
    ----------
    board : Board
        Current board.
    score : int
        Sum of all merged tile values since the game started.
    moves : int
        Number of turns that changed the board.
    status : SessionStatus
        Current lifecycle state.
    """

    board: Board
    score: int = 0
    moves: int = 0
    status: SessionStatus = SessionStatus.IDLE

    @property
    def finished(self) -> bool:
        """True once the game is won or lost."""
        return self.status in (SessionStatus.WON, SessionStatus.LOST)

    def snapshot(self) -> 'SessionState':
        """Return a copy that later moves will not affect."""
        return SessionState(self.board.snapshot(), self.score, self.moves, self.status)
