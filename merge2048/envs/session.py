"""Game session orchestrating one 2048 turn at a time."""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable

from numpy.random import default_rng

from merge2048.core.config import GameConfig
from merge2048.core.gameboard import MoveResult, apply_move, spawn_random_tile
from merge2048.core.gamemove import Direction, is_lost, is_won, legal_directions
from merge2048.core.state import SessionState, SessionStatus
from merge2048.core.tile import Board, Tile
from merge2048.envs.controls import parse_direction
from merge2048.storage import InvalidStateError, KeyValueStore, load_state, save_state

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """
    Outcome of an accepted turn.

    Attributes
    ----------
    move : MoveResult
        Result of the board engine, with the intermediate slide snapshot.
    spawned : Tile | None
        Copy of the tile spawned after the move, None if the board did not change.
    state : SessionState
        Snapshot of the session once the turn is complete.
    """

    move: MoveResult
    spawned: Tile | None
    state: SessionState

    @property
    def changed(self) -> bool:
        """True if the turn altered the board."""
        return self.move.changed

    @property
    def score(self) -> int:
        """Points gained during the turn."""
        return self.move.score


Listener = Callable[[TurnResult], None]


class GameSession:
    """
    One game of 2048.

    The session owns the board, score and move counter. All mutations go through ``new_game``,
    ``resume`` and ``move``; at most one move is processed at a time.
    """

    def __init__(self, config: GameConfig | None = None, store: KeyValueStore | None = None):
        """
        Create an idle session.

        Parameters
        ----------
        config : GameConfig, optional
            Game parameters, the defaults if omitted.
        store : KeyValueStore, optional
            Where the session is saved after each turn. Nothing is persisted if omitted.
        """
        self.config = (config or GameConfig()).validate()
        self._store = store
        self._rng = default_rng(self.config.seed)
        self._state = SessionState(Board.empty(self.config.size))
        self._lock = Lock()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        """Live session state. Treat as read-only."""
        return self._state

    @property
    def board(self) -> Board:
        """Current board."""
        return self._state.board

    @property
    def status(self) -> SessionStatus:
        """Current lifecycle state."""
        return self._state.status

    @property
    def score(self) -> int:
        """Current score."""
        return self._state.score

    @property
    def moves(self) -> int:
        """Number of turns that changed the board."""
        return self._state.moves

    @property
    def won(self) -> bool:
        """True once the target tile was reached."""
        return self._state.status is SessionStatus.WON

    @property
    def lost(self) -> bool:
        """True once no move is possible."""
        return self._state.status is SessionStatus.LOST

    @property
    def busy(self) -> bool:
        """True while a move is being processed."""
        return self._lock.locked()

    @property
    def legal_moves(self) -> list[Direction]:
        """Directions that would change the board."""
        return legal_directions(self._state.board)

    def snapshot(self) -> SessionState:
        """Return a copy of the state for rendering or persistence."""
        return self._state.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback for accepted turns.

        Parameters
        ----------
        listener : Callable[[TurnResult], None]
            Called once per accepted turn, after spawn and terminal check. Moves requested from inside
            the callback are ignored.

        Returns
        -------
        Callable[[], None]
            Function removing the listener.
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def new_game(self, seed: int | None = None) -> SessionState:
        """
        Start a new game: empty board, starting tiles, zero score and move count.

        Parameters
        ----------
        seed : int, optional
            Reseed the random generator for a reproducible game.

        Returns
        -------
        SessionState
            The new live state.
        """
        if seed is not None:
            self._rng = default_rng(seed)

        board = Board.empty(self.config.size)
        for _ in range(self.config.start_tiles):
            spawn_random_tile(board, rng=self._rng, probabilities=self.config.spawn_probs)

        self._state = SessionState(board, status=SessionStatus.IN_PROGRESS)
        self._update_status()
        self._save()
        logger.info('New %dx%d game started', self.config.size, self.config.size)
        return self._state

    def resume(self) -> SessionState:
        """
        Restore the saved game, or start a new one if there is none.

        Returns
        -------
        SessionState
            The live state.

        Notes
        -----
        - A malformed save is reported, discarded and replaced by a new game.
        - A save whose board size differs from the configuration is replaced by a new game.
        """
        if self._store is None:
            return self.new_game()

        key = self.config.storage_key
        try:
            state = load_state(self._store, key)
        except InvalidStateError as error:
            logger.warning('Discarding corrupt saved game under %r: %s', key, error)
            self._store.delete(key)
            state = None

        if state is None or state.status is SessionStatus.IDLE:
            return self.new_game()
        if state.board.size != self.config.size:
            logger.info('Saved board size %d does not match %d, starting a new game', state.board.size, self.config.size)
            return self.new_game()

        self._state = state
        logger.info('Resumed game: score=%d moves=%d status=%s', state.score, state.moves, state.status.value)
        return self._state

    def move(self, token: Any) -> TurnResult | None:
        """
        Process one directional input.

        Parameters
        ----------
        token : Any
            A ``Direction`` or any token understood by ``parse_direction``.

        Returns
        -------
        TurnResult | None
            The turn outcome, or None if the input was ignored (unknown token, game not in progress,
            or another move in flight).

        Notes
        -----
        - A move that changes nothing spawns no tile and leaves the counters untouched.
        - Otherwise exactly one tile is spawned, the score grows by the merge score, the move counter
          is incremented and the session is saved.
        - Terminal checks run after every accepted move; winning takes priority over losing.
        """
        direction = parse_direction(token)
        if direction is None:
            logger.debug('Ignoring unknown input %r', token)
            return None

        if not self._lock.acquire(blocking=False):
            logger.debug('Ignoring %s: a move is already in flight', direction.name)
            return None
        try:
            if self._state.status is not SessionStatus.IN_PROGRESS:
                logger.debug('Ignoring %s: session is %s', direction.name, self._state.status.value)
                return None
            return self._play(direction)
        finally:
            self._lock.release()

    def _play(self, direction: Direction) -> TurnResult:
        state = self._state
        previous_status = state.status

        # ##: Slide and merge.
        result = apply_move(state.board, direction)

        # ##: Spawn and count only when the board changed.
        spawned = None
        if result.changed:
            tile = spawn_random_tile(state.board, rng=self._rng, probabilities=self.config.spawn_probs)
            spawned = tile.copy() if tile is not None else None
            state.score += result.score
            state.moves += 1

        self._update_status()
        if result.changed or state.status is not previous_status:
            self._save()

        turn = TurnResult(result, spawned, state.snapshot())
        for listener in list(self._listeners):
            listener(turn)
        return turn

    def _update_status(self) -> None:
        board = self._state.board
        if is_won(board, self.config.target):
            self._state.status = SessionStatus.WON
            logger.info('Game won: score=%d moves=%d', self._state.score, self._state.moves)
        elif is_lost(board):
            self._state.status = SessionStatus.LOST
            logger.info('Game lost: score=%d moves=%d', self._state.score, self._state.moves)

    def _save(self) -> None:
        if self._store is not None:
            save_state(self._store, self._state, self.config.storage_key)
