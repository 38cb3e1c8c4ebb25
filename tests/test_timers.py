"""
Test cases for tick-driven named timers.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_arcade.timers import Timers


class TestTimers(unittest.TestCase):

    def setUp(self):
        self.timers = Timers()
        self.fired = []

    def cb(self, name):
        return lambda: self.fired.append(name)

    def test_fires_when_due(self):
        self.timers.start("countdown", 0.0, 3.0, self.cb("countdown"))
        self.assertEqual(self.timers.advance(2.9), [])
        self.assertEqual(self.timers.advance(3.0), ["countdown"])
        self.assertEqual(self.fired, ["countdown"])
        self.assertEqual(len(self.timers), 0)

    def test_restart_cancels_previous(self):
        """Starting a pending timer again replaces it: it fires once, at the new time."""
        self.timers.start("feedback", 0.0, 1.0, self.cb("first"))
        self.timers.start("feedback", 0.5, 1.0, self.cb("second"))
        self.timers.advance(1.2)
        self.assertEqual(self.fired, [])
        self.timers.advance(1.5)
        self.timers.advance(5.0)
        self.assertEqual(self.fired, ["second"])

    def test_cancel(self):
        self.timers.start("round", 0.0, 1.0, self.cb("round"))
        self.assertTrue(self.timers.cancel("round"))
        self.assertFalse(self.timers.cancel("round"))
        self.timers.advance(2.0)
        self.assertEqual(self.fired, [])

    def test_earliest_first(self):
        self.timers.start("b", 0.0, 2.0, self.cb("b"))
        self.timers.start("a", 0.0, 1.0, self.cb("a"))
        self.assertEqual(self.timers.advance(3.0), ["a", "b"])

    def test_callback_cancelling_a_later_timer(self):
        self.timers.start("a", 0.0, 1.0, lambda: self.timers.cancel_all())
        self.timers.start("b", 0.0, 2.0, self.cb("b"))
        self.assertEqual(self.timers.advance(3.0), ["a"])
        self.assertEqual(self.fired, [])

    def test_remaining(self):
        self.timers.start("round", 10.0, 15.0, self.cb("round"))
        self.assertEqual(self.timers.remaining("round", 12.0), 13.0)
        self.assertEqual(self.timers.remaining("round", 30.0), 0.0)
        self.assertIsNone(self.timers.remaining("other", 12.0))
        self.assertTrue(self.timers.active("round"))


if __name__ == "__main__":
    unittest.main()
