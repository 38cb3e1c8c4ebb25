"""
Test cases for the hold-to-confirm state machine.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_arcade.hold import HoldState, HoldToConfirm
from gesture_arcade.types import Confirmed


class TestHoldToConfirm(unittest.TestCase):
    """Test confirmation timing with unit ticks."""

    def setUp(self):
        self.hold = HoldToConfirm(required=3)

    def feed(self, values):
        return [self.hold.update(value) for value in values]

    def test_fires_on_threshold_tick(self):
        """[None, 5, 5, 5] confirms on the 4th tick and not before."""
        results = self.feed([None, 5, 5, 5])
        self.assertEqual(results, [None, None, None, Confirmed(5)])

    def test_fires_once_per_sustained_run(self):
        results = self.feed([5] * 10)
        self.assertEqual(sum(r is not None for r in results), 1)
        self.assertEqual(results[2], Confirmed(5))

    def test_release_and_reform_confirms_again(self):
        results = self.feed([5, 5, 5, None, 5, 5, 5])
        self.assertEqual([r for r in results if r is not None], [Confirmed(5), Confirmed(5)])

    def test_deviation_resets(self):
        """Held for required - 1 ticks, then a different value: nothing fires, progress restarts."""
        results = self.feed([5, 5, 4])
        self.assertEqual(results, [None, None, None])
        self.assertEqual(self.hold.candidate, 4)
        self.assertEqual(self.hold.elapsed, 1)
        self.assertEqual(self.feed([4, 4]), [None, Confirmed(4)])

    def test_none_resets_to_idle(self):
        self.feed([5, 5, None])
        self.assertIs(self.hold.state, HoldState.IDLE)
        self.assertEqual(self.hold.elapsed, 0)
        self.assertIsNone(self.hold.candidate)

    def test_different_value_after_confirm(self):
        """Switching straight to another value starts a new hold."""
        results = self.feed([5, 5, 5, 2, 2, 2])
        self.assertEqual([r for r in results if r is not None], [Confirmed(5), Confirmed(2)])

    def test_progress(self):
        self.assertEqual(self.hold.progress, 0.0)
        self.hold.update(1)
        self.assertAlmostEqual(self.hold.progress, 1 / 3)
        self.hold.update(1)
        self.assertAlmostEqual(self.hold.progress, 2 / 3)

    def test_reset_forgets_latch(self):
        self.feed([5, 5, 5])
        self.hold.reset()
        self.assertEqual(self.feed([5, 5, 5])[-1], Confirmed(5))

    def test_boolean_domain(self):
        hold = HoldToConfirm(required=2)
        self.assertIsNone(hold.update(True))
        self.assertEqual(hold.update(True), Confirmed(True))


class TestTimedHold(unittest.TestCase):
    """Test holds measured in seconds with variable tick durations."""

    def test_seconds(self):
        hold = HoldToConfirm(required=3.0)
        results = [hold.update(2, dt) for dt in (0.1,) * 29]
        self.assertTrue(all(r is None for r in results))
        self.assertEqual(hold.update(2, 0.1), Confirmed(2))

    def test_custom_equality(self):
        hold = HoldToConfirm(required=2, equals=lambda a, b: round(a) == round(b))
        self.assertIsNone(hold.update(1.9))
        self.assertEqual(hold.update(2.1), Confirmed(1.9))


if __name__ == "__main__":
    unittest.main()
