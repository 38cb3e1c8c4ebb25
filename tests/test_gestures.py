"""
End-to-end tests of the per-game gesture pipeline with synthetic frames.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_arcade.classifier import GestureClassifier
from gesture_arcade.config import load_config
from gesture_arcade.gestures import GestureSession
from gesture_arcade.landmarks import INDEX_PIP, INDEX_TIP
from gesture_arcade.tracking import Role
from gesture_arcade.types import Confirmed, FingerCount, NoGesture, Pointing, TenFingers
from tests.synthetic import frame, hand_with, moved, pointing, shifted, ten_fingers


def index_extended(report):
    state = report.roles.get("primary")
    return True if state is not None and state.index else None


class TestScenario(unittest.TestCase):
    """Fingertip trace through classifier, resolver and hold together."""

    def test_extended_confirms_on_fourth_tick(self):
        """Tip y [0.8, 0.2, 0.2, 0.2, 0.2] vs PIP 0.5 with a 3-tick hold confirms at tick 4 only."""
        session = GestureSession(GestureClassifier(), hold_required=3, candidate=index_extended)
        base = moved(hand_with(0), INDEX_PIP, y=0.5)

        confirmed = []
        for tick, y in enumerate([0.8, 0.2, 0.2, 0.2, 0.2], start=1):
            report = session.process_frame(frame(moved(base, INDEX_TIP, y=y)), now=tick, dt=1.0)
            self.assertEqual(report.roles["primary"].index, tick >= 2)
            if report.confirmed is not None:
                confirmed.append((tick, report.confirmed))

        self.assertEqual(confirmed, [(4, Confirmed(True))])


class TestGestureSession(unittest.TestCase):
    """Test report contents and session state."""

    def setUp(self):
        self.cfg = load_config()
        self.session = GestureSession.from_config(self.cfg, roles=("primary",))

    def test_empty_frame(self):
        report = self.session.process_frame(frame(), now=0.0)
        self.assertEqual(report.hands, [])
        self.assertEqual(report.total_raised, 0)
        self.assertEqual(report.gesture, NoGesture())
        self.assertIsNone(report.cursors["primary"])
        self.assertIsNone(report.role_hands["primary"])
        self.assertIsNone(report.confirmed)

    def test_report_fields(self):
        hand = hand_with(3, "Right")
        report = self.session.process_frame(frame(hand), now=0.0)
        self.assertEqual(report.total_raised, 3)
        self.assertEqual(report.gesture, FingerCount(3))
        self.assertEqual(report.bindings, {"primary": "Right"})
        self.assertIs(report.role_hands["primary"], hand)
        self.assertEqual(report.role_gestures["primary"], FingerCount(3))

    def test_cursor_is_smoothed(self):
        hand = pointing("Right")
        first = self.session.process_frame(frame(hand), now=0.0).cursors["primary"]
        self.assertEqual(first, (hand.landmarks[INDEX_TIP].x, 0.5))
        second = self.session.process_frame(frame(shifted(hand, dx=0.1)), now=0.1).cursors["primary"]
        expected = hand.landmarks[INDEX_TIP].x + self.cfg.smoothing.alpha * 0.1
        self.assertAlmostEqual(second[0], expected)
        self.assertIsInstance(self.session.process_frame(frame(hand), now=0.2).role_gestures["primary"], Pointing)

    def test_cursor_reseeds_after_loss(self):
        hand = pointing("Right")
        self.session.process_frame(frame(hand), now=0.0)
        self.session.process_frame(frame(), now=0.1)
        moved_hand = shifted(hand, dx=0.2)
        cursor = self.session.process_frame(frame(moved_hand), now=0.2).cursors["primary"]
        self.assertAlmostEqual(cursor[0], moved_hand.landmarks[INDEX_TIP].x)

    def test_ten_fingers(self):
        report = self.session.process_frame(ten_fingers(), now=0.0)
        self.assertEqual(report.total_raised, 10)
        self.assertEqual(report.gesture, TenFingers())

    def test_hold_progress_in_seconds(self):
        session = GestureSession.from_config(
            self.cfg, hold_required=1.0,
            candidate=lambda r: r.total_raised if r.hands else None,
        )
        reports = [session.process_frame(frame(hand_with(2)), now=i * 0.25, dt=0.25) for i in range(4)]
        self.assertAlmostEqual(reports[1].hold_progress, 0.5)
        self.assertEqual(reports[1].hold_candidate, 2)
        self.assertEqual(reports[3].confirmed, Confirmed(2))

    def test_reset(self):
        session = GestureSession.from_config(
            self.cfg, roles=[Role("drawing", "Right")], hold_required=5,
            candidate=lambda r: r.total_raised,
        )
        session.process_frame(frame(pointing("Right")), now=0.0)
        session.reset()
        self.assertEqual(session.resolver.bindings, {"drawing": None})
        self.assertIsNone(session.smoothers.get("drawing"))
        self.assertEqual(session.hold.elapsed, 0)


if __name__ == "__main__":
    unittest.main()
