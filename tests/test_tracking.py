"""
Test cases for sticky hand tracking (role to handedness locks).
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_arcade.tracking import HandIdentityResolver, Role, opposite
from tests.synthetic import frame, hand_with, open_palm


def right(cx=0.3):
    return hand_with(1, "Right", cx)


def left(cx=0.7):
    return hand_with(2, "Left", cx)


class TestHandIdentityResolver(unittest.TestCase):
    """Test role binding across frames."""

    def setUp(self):
        self.resolver = HandIdentityResolver(["player"])

    def test_locks_first_labeled_hand(self):
        hands = self.resolver.resolve(frame(right(), left()))
        self.assertEqual(self.resolver.bindings["player"], "Right")
        self.assertEqual(hands["player"].handedness, "Right")

    def test_order_independence(self):
        """A role locked to Right follows the Right hand wherever it sits."""
        self.resolver.resolve(frame(right(), left()))
        for hands in ([left(), right()], [right(), left()], [left(), right()]):
            indices = self.resolver.resolve_indices(frame(*hands))
            self.assertEqual(hands[indices["player"]].handedness, "Right")

    def test_survives_temporary_loss(self):
        """Absent for 3 frames while another hand is visible, then back without re-locking."""
        self.resolver.resolve(frame(right(), left()))
        for _ in range(3):
            resolved = self.resolver.resolve(frame(left()))
            self.assertIsNone(resolved["player"])
            self.assertEqual(self.resolver.bindings["player"], "Right")
        resolved = self.resolver.resolve(frame(left(), right()))
        self.assertEqual(resolved["player"].handedness, "Right")

    def test_empty_frame_unlocks(self):
        self.resolver.resolve(frame(right()))
        self.resolver.resolve(frame())
        self.assertIsNone(self.resolver.bindings["player"])
        self.resolver.resolve(frame(left()))
        self.assertEqual(self.resolver.bindings["player"], "Left")

    def test_none_frame_unlocks(self):
        self.resolver.resolve(frame(right()))
        self.resolver.resolve(None)
        self.assertIsNone(self.resolver.bindings["player"])

    def test_unlabeled_hands_are_not_locked(self):
        resolved = self.resolver.resolve(frame(hand_with(3, None)))
        self.assertIsNone(resolved["player"])
        self.assertIsNone(self.resolver.bindings["player"])

    def test_reset(self):
        self.resolver.resolve(frame(right()))
        self.resolver.reset()
        self.assertEqual(self.resolver.bindings, {"player": None})


class TestMultipleRoles(unittest.TestCase):
    """Test roles with fixed target hands and ambiguous input."""

    def test_targeted_roles(self):
        resolver = HandIdentityResolver([Role("drawing", "Left"), Role("gesture", "Right")])
        resolved = resolver.resolve(frame(right(), left()))
        self.assertEqual(resolved["drawing"].handedness, "Left")
        self.assertEqual(resolved["gesture"].handedness, "Right")

    def test_target_waits_for_its_hand(self):
        resolver = HandIdentityResolver([Role("drawing", "Left")])
        self.assertIsNone(resolver.resolve(frame(right()))["drawing"])
        self.assertIsNone(resolver.bindings["drawing"])

    def test_free_roles_take_distinct_labels(self):
        resolver = HandIdentityResolver(["a", "b"])
        resolver.resolve(frame(right(), left()))
        self.assertEqual(resolver.bindings, {"a": "Right", "b": "Left"})

    def test_same_label_never_double_assigned(self):
        """Two hands labelled Right: each role gets at most one, the lock stays put."""
        resolver = HandIdentityResolver([Role("a", "Right"), Role("b", "Left")])
        resolver.resolve(frame(right()))
        indices = resolver.resolve_indices(frame(right(0.2), open_palm("Right", 0.6)))
        self.assertEqual(indices["a"], 0)
        self.assertIsNone(indices["b"])
        self.assertEqual(resolver.bindings, {"a": "Right", "b": None})

    def test_duplicate_role_names(self):
        with self.assertRaises(ValueError):
            HandIdentityResolver(["x", "x"])

    def test_opposite(self):
        self.assertEqual(opposite("Left"), "Right")
        self.assertEqual(opposite("Right"), "Left")


if __name__ == "__main__":
    unittest.main()
