"""
JSON encoding of game sessions and their persistence in a key-value store.
"""

import json
from typing import Any

from merge2048.core.config import STORAGE_KEY
from merge2048.core.state import SessionState, SessionStatus
from merge2048.core.tile import Board, Tile
from merge2048.storage.store import KeyValueStore


# ##>: Bound on the sum of all tiles. Merges keep the sum, so every tile keeps fitting the int64 board arrays.
MAX_BOARD_TOTAL = 2**62


class InvalidStateError(ValueError):
    """Raised when stored data cannot be turned back into a session state."""


def encode_state(state: SessionState) -> str:
    """
    Serialize a session state to JSON.

    Parameters
    ----------
    state : SessionState
        The state to serialize.

    Returns
    -------
    str
        JSON document holding the board cells, score, move count and status.
    """
    document = {
        'board': [
            [{'id': tile.id, 'value': tile.value, 'x': tile.x, 'y': tile.y} for tile in row]
            for row in state.board.rows()
        ],
        'score': state.score,
        'moves': state.moves,
        'status': state.status.value,
    }
    return json.dumps(document)


def _counter(document: dict[str, Any], name: str) -> int:
    value = document.get(name)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise InvalidStateError(f'{name} must be a non-negative integer, got {value!r}')
    return value


def _tile(cell: Any, x: int, y: int) -> Tile:
    if not isinstance(cell, dict):
        raise InvalidStateError(f'Cell ({x}, {y}) must be an object, got {cell!r}')

    value, identity = cell.get('value'), cell.get('id')
    if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value == 1 or value > MAX_BOARD_TOTAL or value & (value - 1):
        raise InvalidStateError(f'Cell ({x}, {y}) holds an invalid value {value!r}')
    if identity is not None and not isinstance(identity, str):
        raise InvalidStateError(f'Cell ({x}, {y}) holds an invalid identity {identity!r}')
    if (cell.get('x'), cell.get('y')) != (x, y):
        raise InvalidStateError(f'Cell ({x}, {y}) reports position ({cell.get("x")}, {cell.get("y")})')
    return Tile(id=identity, value=value, x=x, y=y)


def decode_state(payload: str | bytes) -> SessionState:
    """
    Rebuild a session state from JSON.

    Parameters
    ----------
    payload : str | bytes
        Document produced by ``encode_state``.

    Returns
    -------
    SessionState
        The decoded state.

    Raises
    ------
    InvalidStateError
        If the document is not valid JSON or does not describe a consistent game.
    """
    try:
        document = json.loads(payload)
    except (TypeError, RecursionError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise InvalidStateError(f'Stored state is not valid JSON: {error}') from error
    if not isinstance(document, dict):
        raise InvalidStateError(f'Stored state must be an object, got {type(document).__name__}')

    rows = document.get('board')
    if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
        raise InvalidStateError('Stored board must be a list of rows')
    cells = [[_tile(cell, x, y) for x, cell in enumerate(row)] for y, row in enumerate(rows)]
    total = sum(tile.value for row in cells for tile in row)
    if total > MAX_BOARD_TOTAL:
        raise InvalidStateError(f'Stored board total {total} exceeds {MAX_BOARD_TOTAL}')

    try:
        board = Board(cells)
        status = SessionStatus(document.get('status'))
    except ValueError as error:
        raise InvalidStateError(str(error)) from error

    return SessionState(board, _counter(document, 'score'), _counter(document, 'moves'), status)


def save_state(store: KeyValueStore, state: SessionState, key: str = STORAGE_KEY) -> None:
    """
    Persist a session state under a fixed key.

    Parameters
    ----------
    store : KeyValueStore
        Destination store.
    state : SessionState
        State to persist.
    key : str, optional
        Storage key (default is ``"game-state"``).
    """
    store.set(key, encode_state(state))


def load_state(store: KeyValueStore, key: str = STORAGE_KEY) -> SessionState | None:
    """
    Restore a session state.

    Parameters
    ----------
    store : KeyValueStore
        Source store.
    key : str, optional
        Storage key (default is ``"game-state"``).

    Returns
    -------
    SessionState | None
        The stored state, or None if nothing was saved.

    Raises
    ------
    InvalidStateError
        If the stored document is malformed.
    """
    try:
        payload = store.get(key)
    except UnicodeDecodeError as error:
        raise InvalidStateError(f'Stored state under {key!r} is not valid text: {error}') from error
    if not payload:
        return None
    return decode_state(payload)
