"""
Tests for the Matplotlib window, drawn off-screen.
"""

import warnings
from unittest import TestCase, main

import matplotlib

matplotlib.use("Agg")

from matplotlib import pyplot as plt  # noqa: E402

from merge2048.core.state import SessionState, SessionStatus  # noqa: E402
from merge2048.core.tile import Board  # noqa: E402
from merge2048.utils.windows import WindowBoard  # noqa: E402


class TestWindowBoard(TestCase):
    """Test the drawing of a session state."""

    def setUp(self):
        """Open an off-screen window."""
        self.window = WindowBoard(title="2048 Game", size=2)

    def tearDown(self):
        """Close the window."""
        self.window.close()

    def test_show_state(self):
        """Cells show their values, empty cells nothing, and the header the status."""
        state = SessionState(Board.from_values([[2, 0], [8192, 16]]), score=20, moves=4, status=SessionStatus.WON)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            self.window.show_state(state)

        self.assertEqual([text.get_text() for text in self.window.textes], ["2", "", "8192", "16"])
        self.assertEqual(self.window.fig._suptitle.get_text(), "You Won!    Score: 20    Moves: 4")

    def test_colors(self):
        """Known values have their own color, larger ones share one."""
        self.assertEqual(self.window.color(2048), WindowBoard.COLORS[2048])
        self.assertEqual(self.window.color(65536), WindowBoard.BEYOND)

    def test_control_keys_released(self):
        """Game keys no longer trigger the Matplotlib save and history shortcuts."""
        self.assertNotIn("s", plt.rcParams["keymap.save"])
        self.assertNotIn("left", plt.rcParams["keymap.back"])
        self.assertNotIn("backspace", plt.rcParams["keymap.back"])
        self.assertNotIn("right", plt.rcParams["keymap.forward"])
        self.assertIn("ctrl+s", plt.rcParams["keymap.save"])

    def test_close(self):
        """Closing flags the window."""
        self.window.close()
        self.assertTrue(self.window.closed)


if __name__ == "__main__":
    main()
