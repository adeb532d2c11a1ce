# -*- coding: utf-8 -*-
"""
Play 2048 Game
"""
import logging
from typing import Any

from merge2048.core import GameConfig
from merge2048.envs import GameSession, TurnResult, parse_direction
from merge2048.storage import FileStore
from merge2048.utils.windows import WindowBoard

logger = logging.getLogger(__name__)


def redraw(window: WindowBoard, session: GameSession):
    """
    Redraw the game board.

    Parameters
    ----------
    window: WindowBoard
        Class to draw the game board

    session: GameSession
        Game to draw
    """
    window.show_state(session.snapshot())


def reset(session: GameSession, window: WindowBoard):
    """
    Start a new game and redraw the game board.

    Parameters
    ----------
    session: GameSession
        The game session

    window: WindowBoard
        Class to draw the game board
    """
    # ##: Reset the game.
    session.new_game()

    # ##: Redraw the game board.
    redraw(window, session)


def on_turn(window: WindowBoard, turn: TurnResult):
    """
    Show the outcome of an accepted turn.

    Parameters
    ----------
    window: WindowBoard
        Class to draw the game board

    turn: TurnResult
        Outcome of the turn
    """
    if turn.changed:
        logger.info("%s: +%d", turn.move.direction.name, turn.score)
    window.show_state(turn.state)
    if turn.state.finished:
        logger.info("%s score=%d moves=%d", turn.state.status.value, turn.state.score, turn.state.moves)


def key_handler(session: GameSession, window: WindowBoard, event: Any):
    """
    Handle the keyboard.

    Parameters
    ----------
    session: GameSession
        The game session

    window: WindowBoard
        Class to draw the game board

    event: Any
        event to handle
    """
    if event.key == "escape":
        window.close()
        return None

    if event.key == "backspace":
        reset(session, window)
        return None

    # ##: Unknown keys and moves while the game is over are ignored by the session.
    direction = parse_direction(event.key)
    if direction is not None:
        session.move(direction)
    return None


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--size", type=int, default=4)
    parser.add_argument("--target", type=int, default=2048)
    parser.add_argument("--store", type=str, default=".merge2048")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    game = GameSession(GameConfig(size=args.size, target=args.target, seed=args.seed), store=FileStore(args.store))
    game.resume()

    window_board = WindowBoard(title="2048 Game", size=game.config.size)
    window_board.register_key_handler(lambda event: key_handler(game, window_board, event))
    game.subscribe(lambda turn: on_turn(window_board, turn))

    redraw(window_board, game)

    # Blocking event loop
    window_board.show(block=True)
