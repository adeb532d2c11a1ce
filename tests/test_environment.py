"""
Tests for the game session.

Tests cover the session lifecycle, turn processing, terminal transitions, input filtering, mutual exclusion
of moves and persistence through a store.
"""

import json
import os
from tempfile import TemporaryDirectory
from unittest import TestCase, main

import numpy as np

from merge2048.core.config import GameConfig
from merge2048.core.gamemove import Direction
from merge2048.core.state import SessionStatus
from merge2048.core.tile import Board
from merge2048.envs.session import GameSession
from merge2048.storage import FileStore, MemoryStore, load_state, save_state


class TestSessionLifecycle(TestCase):
    """Test creation and new game."""

    def test_idle_until_new_game(self):
        """A fresh session is idle and ignores moves."""
        session = GameSession()

        self.assertIs(session.status, SessionStatus.IDLE)
        self.assertIsNone(session.move(Direction.LEFT))

    def test_new_game(self):
        """New game spawns two tiles with zero score and moves."""
        session = GameSession()
        state = session.new_game(seed=42)

        values = state.board.values()
        self.assertEqual(np.count_nonzero(values), 2)
        self.assertTrue(np.all(np.isin(values[values != 0], [2, 4])))
        self.assertEqual(state.score, 0)
        self.assertEqual(state.moves, 0)
        self.assertIs(state.status, SessionStatus.IN_PROGRESS)

    def test_new_game_reproducible(self):
        """Same seed gives the same starting board."""
        first = GameSession(GameConfig(seed=3)).new_game().board.values()
        second = GameSession(GameConfig(seed=3)).new_game().board.values()
        np.testing.assert_array_equal(first, second)

    def test_invalid_config(self):
        """Inconsistent configurations are rejected."""
        for config in (
            GameConfig(size=1),
            GameConfig(target=100),
            GameConfig(start_tiles=17),
            GameConfig(spawn_probs={2: 0.5, 4: 0.2}),
            GameConfig(spawn_probs={3: 1.0}),
            GameConfig(storage_key=''),
        ):
            with self.assertRaises(ValueError):
                GameSession(config)


class TestTurn(TestCase):
    """Test the processing of a directional input."""

    def setUp(self):
        """Start a seeded game."""
        self.session = GameSession(GameConfig(seed=0))
        self.session.new_game()

    def test_full_scenario(self):
        """A merging move scores, spawns into an empty cell and counts one move."""
        self.session.state.board = Board.from_values([[2, 0, 2, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        turn = self.session.move(Direction.LEFT)

        self.assertTrue(turn.changed)
        self.assertEqual(turn.score, 4)
        np.testing.assert_array_equal(turn.move.after_merge.values()[0], [4, 0, 0, 0])

        # ##>: The spawned tile lands in one of the 15 cells left empty by the move.
        self.assertNotEqual(turn.spawned.position, (0, 0))
        self.assertIn(turn.spawned.value, (2, 4))
        values = self.session.board.values()
        self.assertEqual(np.count_nonzero(values), 2)
        self.assertEqual(values[0, 0], 4)

        self.assertEqual(self.session.score, 4)
        self.assertEqual(self.session.moves, 1)
        self.assertIs(self.session.status, SessionStatus.IN_PROGRESS)

    def test_no_op_move(self):
        """A move that changes nothing spawns nothing and counts nothing."""
        self.session.state.board = Board.from_values([[2, 4, 8, 16], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        before = self.session.board.snapshot()
        turn = self.session.move(Direction.LEFT)

        self.assertFalse(turn.changed)
        self.assertIsNone(turn.spawned)
        self.assertEqual(self.session.board, before)
        self.assertEqual(self.session.moves, 0)
        self.assertEqual(self.session.score, 0)

    def test_score_accumulates(self):
        """Scores of successive turns add up."""
        self.session.state.board = Board.from_values([[2, 2, 4, 4], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        first = self.session.move(Direction.LEFT)
        self.assertEqual(first.score, 12)
        self.assertEqual(self.session.score, 12)

        second = self.session.move(Direction.LEFT)
        self.assertEqual(self.session.score, 12 + second.score)

    def test_turn_state_is_snapshot(self):
        """The state reported by a turn is not affected by later turns."""
        self.session.state.board = Board.from_values([[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        turn = self.session.move(Direction.RIGHT)
        reported = turn.state.board.values()

        self.session.move(Direction.LEFT)
        np.testing.assert_array_equal(turn.state.board.values(), reported)
        self.assertEqual(turn.state.moves, 1)

    def test_invalid_tokens_ignored(self):
        """Unknown tokens are ignored without state change."""
        before = self.session.snapshot()
        for token in ('jump', 7, -1, True, None, 2.0):
            self.assertIsNone(self.session.move(token))

        self.assertEqual(self.session.board, before.board)
        self.assertEqual(self.session.moves, 0)

    def test_key_tokens(self):
        """Key names are accepted as directions."""
        self.session.state.board = Board.from_values([[0, 0, 0, 2], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        turn = self.session.move('ArrowLeft')

        self.assertIs(turn.move.direction, Direction.LEFT)
        self.assertEqual(self.session.board[0][0].value, 2)

    def test_legal_moves(self):
        """Legal moves reflect the current board."""
        self.session.state.board = Board.from_values([[2, 4, 8, 16], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(self.session.legal_moves, [Direction.DOWN])


class TestTerminalTransitions(TestCase):
    """Test won and lost transitions."""

    def test_win(self):
        """Reaching the target wins and further moves are ignored."""
        session = GameSession(GameConfig(seed=1))
        session.new_game()
        session.state.board = Board.from_values([[1024, 1024, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        turn = session.move(Direction.LEFT)
        self.assertIs(turn.state.status, SessionStatus.WON)
        self.assertTrue(session.won)
        self.assertFalse(session.lost)

        before = session.snapshot()
        self.assertIsNone(session.move(Direction.RIGHT))
        self.assertEqual(session.board, before.board)
        self.assertEqual(session.moves, 1)

    def test_loss(self):
        """Filling the last cell without any pair loses."""
        session = GameSession(GameConfig(size=2, seed=1))
        session.new_game()
        session.state.board = Board.from_values([[8, 0], [16, 32]])

        # ##>: Left changes nothing; right frees the top-left cell, whose neighbours are 8 and 16.
        self.assertFalse(session.move(Direction.LEFT).changed)
        self.assertFalse(session.lost)

        turn = session.move(Direction.RIGHT)
        self.assertTrue(turn.changed)
        self.assertIs(session.status, SessionStatus.LOST)
        self.assertIsNone(session.move(Direction.UP))

    def test_win_has_priority(self):
        """A board both won and lost counts as won."""
        session = GameSession(GameConfig(size=2, target=8, seed=1))
        session.new_game()
        session.state.board = Board.from_values([[4, 4], [16, 32]])

        session.move(Direction.LEFT)
        self.assertIs(session.status, SessionStatus.WON)

    def test_restart_after_terminal(self):
        """New game leaves a terminal state."""
        session = GameSession(GameConfig(size=2, target=8, seed=1))
        session.new_game()
        session.state.board = Board.from_values([[4, 4], [16, 32]])
        session.move(Direction.LEFT)

        state = session.new_game()
        self.assertIs(state.status, SessionStatus.IN_PROGRESS)
        self.assertEqual(state.score, 0)
        self.assertEqual(state.moves, 0)


class TestMutualExclusion(TestCase):
    """Test that at most one move is in flight."""

    def test_reentrant_move_rejected(self):
        """A move requested while a turn is being delivered is ignored."""
        session = GameSession(GameConfig(seed=4))
        session.new_game()
        session.state.board = Board.from_values([[0, 0, 0, 2], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        nested = []

        def listener(turn):
            nested.append((session.busy, session.move(Direction.RIGHT)))

        session.subscribe(listener)
        session.move(Direction.LEFT)

        self.assertEqual(nested, [(True, None)])
        self.assertEqual(session.moves, 1)
        self.assertFalse(session.busy)

    def test_unsubscribe(self):
        """Removed listeners are no longer called."""
        session = GameSession(GameConfig(seed=4))
        session.new_game()
        calls = []
        unsubscribe = session.subscribe(calls.append)
        unsubscribe()

        for direction in Direction:
            session.move(direction)
        self.assertEqual(calls, [])


class TestSessionPersistence(TestCase):
    """Test saving and resuming through a store."""

    def test_saved_after_changed_turn(self):
        """The store holds the state after each board-changing turn."""
        store = MemoryStore()
        session = GameSession(GameConfig(seed=5), store=store)
        session.new_game()
        session.state.board = Board.from_values([[2, 0, 2, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        session.move(Direction.LEFT)

        saved = load_state(store)
        self.assertEqual(saved.board, session.board)
        self.assertEqual(saved.score, 4)
        self.assertEqual(saved.moves, 1)

    def test_resume(self):
        """A saved game is restored as is."""
        store = MemoryStore()
        original = GameSession(GameConfig(seed=6), store=store)
        original.new_game()
        original.move(Direction.LEFT)
        original.move(Direction.UP)

        resumed = GameSession(store=store)
        state = resumed.resume()
        self.assertEqual(state.board, original.board)
        self.assertEqual(state.score, original.score)
        self.assertEqual(state.moves, original.moves)

    def test_resume_without_save(self):
        """Resuming with an empty store starts a new game."""
        store = MemoryStore()
        state = GameSession(store=store).resume()

        self.assertIs(state.status, SessionStatus.IN_PROGRESS)
        self.assertEqual(np.count_nonzero(state.board.values()), 2)
        self.assertIsNotNone(load_state(store))

    def test_resume_without_store(self):
        """Resuming without a store starts a new game."""
        state = GameSession().resume()
        self.assertIs(state.status, SessionStatus.IN_PROGRESS)

    def test_resume_corrupt_save(self):
        """A malformed save is reported and replaced by a new game."""
        for payload in ('{not json', '[]', '[' * 100000, '{"board": [[{"id": null, "value": 3, "x": 0, "y": 0}]]}'):
            store = MemoryStore()
            store.set('game-state', payload)

            with self.assertLogs('merge2048.envs.session', level='WARNING'):
                state = GameSession(store=store).resume()

            self.assertIs(state.status, SessionStatus.IN_PROGRESS)
            self.assertEqual(state.moves, 0)
            self.assertEqual(load_state(store).board, state.board)

    def test_resume_undecodable_file(self):
        """A save file holding bytes that are not text is reported and replaced by a new game."""
        with TemporaryDirectory() as directory:
            with open(os.path.join(directory, 'game-state.json'), 'wb') as file:
                file.write(b'\xff\xfe\x00garbage')
            store = FileStore(directory)

            with self.assertLogs('merge2048.envs.session', level='WARNING'):
                state = GameSession(store=store).resume()

            self.assertIs(state.status, SessionStatus.IN_PROGRESS)
            self.assertEqual(load_state(store).board, state.board)

    def test_resume_oversized_values(self):
        """A save whose tiles overflow the board array is reported and replaced by a new game."""
        store = MemoryStore()
        session = GameSession(GameConfig(size=2, seed=4), store=store)
        session.new_game()
        document = json.loads(store.get('game-state'))
        for row in document['board']:
            for cell in row:
                if cell['value']:
                    cell['value'] = 2**70
        store.set('game-state', json.dumps(document))

        with self.assertLogs('merge2048.envs.session', level='WARNING'):
            state = GameSession(GameConfig(size=2), store=store).resume()

        self.assertIs(state.status, SessionStatus.IN_PROGRESS)
        self.assertTrue(int(state.board.values().max()) <= 4)


    def test_resume_other_size(self):
        """A save for another board size is replaced by a new game."""
        store = MemoryStore()
        other = GameSession(GameConfig(size=3, seed=2), store=store)
        other.new_game()

        state = GameSession(GameConfig(size=4), store=store).resume()
        self.assertEqual(state.board.size, 4)

    def test_resume_finished_game(self):
        """A finished game resumes finished."""
        store = MemoryStore()
        session = GameSession(GameConfig(size=2, target=8, seed=1), store=store)
        session.new_game()
        session.state.board = Board.from_values([[4, 4], [16, 32]])
        session.move(Direction.LEFT)

        resumed = GameSession(GameConfig(size=2, target=8), store=store)
        resumed.resume()
        self.assertTrue(resumed.won)
        self.assertIsNone(resumed.move(Direction.RIGHT))

    def test_idle_save_ignored(self):
        """An idle save is treated as absent."""
        store = MemoryStore()
        idle = GameSession(store=store)
        save_state(store, idle.state)

        state = GameSession(store=store).resume()
        self.assertIs(state.status, SessionStatus.IN_PROGRESS)


if __name__ == '__main__':
    main()
