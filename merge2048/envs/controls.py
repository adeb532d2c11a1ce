"""
Translate raw input tokens into move directions.
"""

from typing import Any

from merge2048.core.gamemove import Direction

# ##: Minimum drag distance, in pixels, to register a swipe.
SWIPE_THRESHOLD = 25

KEYS = {
    'left': Direction.LEFT,
    'up': Direction.UP,
    'right': Direction.RIGHT,
    'down': Direction.DOWN,
    'arrowleft': Direction.LEFT,
    'arrowup': Direction.UP,
    'arrowright': Direction.RIGHT,
    'arrowdown': Direction.DOWN,
    'a': Direction.LEFT,
    'w': Direction.UP,
    'd': Direction.RIGHT,
    's': Direction.DOWN,
}


def parse_direction(token: Any) -> Direction | None:
    """
    Map an input token to a direction.

    Parameters
    ----------
    token : Any
        A ``Direction``, a key name (``"left"``, ``"ArrowLeft"``, ``"a"``...) or an action code
        (0: left, 1: up, 2: right, 3: down).

    Returns
    -------
    Direction | None
        The direction, or None if the token is not a move.
    """
    if isinstance(token, Direction):
        return token
    if isinstance(token, str):
        return KEYS.get(token.strip().lower())
    if isinstance(token, int) and not isinstance(token, bool) and 0 <= token < len(Direction):
        return Direction(token)
    return None


def direction_from_swipe(dx: float, dy: float, threshold: float = SWIPE_THRESHOLD) -> Direction | None:
    """
    Map a drag gesture to a direction along its dominant axis.

    Parameters
    ----------
    dx : float
        Horizontal displacement, positive to the right.
    dy : float
        Vertical displacement, positive downward.
    threshold : float, optional
        Minimum displacement on either axis (default is 25).

    Returns
    -------
    Direction | None
        The swipe direction, or None if the drag is too short.
    """
    if abs(dx) < threshold and abs(dy) < threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP
