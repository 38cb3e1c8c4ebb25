"""
Test cases for the gesture classifier with synthetic hands.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesture_arcade.classifier import AngleStrategy, GestureClassifier, VerticalStrategy
from gesture_arcade.config import load_config
from gesture_arcade.landmarks import INDEX_PIP, INDEX_TIP, MIDDLE_PIP, MIDDLE_TIP, THUMB_TIP
from gesture_arcade.types import (
    NEUTRAL_STATE, FingerCount, Hand, Landmark, NoGesture, Pinching, Pointing, TenFingers,
)
from tests.synthetic import (
    bent, frame, hand_with, make_hand, moved, open_palm, pinching, pointing, ten_fingers,
)


class TestFingerCounting(unittest.TestCase):
    """Test per-hand finger states with the default vertical strategy."""

    def setUp(self):
        self.classifier = GestureClassifier.from_config(load_config().classifier)

    def test_counts_zero_to_five(self):
        """Each synthetic count is recognized for both hands."""
        for handedness in ("Right", "Left"):
            for count in range(6):
                with self.subTest(handedness=handedness, count=count):
                    state = self.classifier.classify(hand_with(count, handedness))
                    self.assertEqual(state.raised, count)

    def test_thumb_follows_handedness(self):
        """A right-hand thumb pose read as a left hand is not extended."""
        right_thumb = make_hand((True, False, False, False, False), "Right")
        self.assertTrue(self.classifier.classify(right_thumb).thumb)
        as_left = Hand(landmarks=right_thumb.landmarks, handedness="Left")
        self.assertFalse(self.classifier.classify(as_left).thumb)

    def test_unknown_handedness_uses_index_base(self):
        """Without a label the thumb is judged against the index MCP."""
        self.assertTrue(self.classifier.classify(open_palm(None)).thumb)
        self.assertFalse(self.classifier.classify(hand_with(4, None)).thumb)

    def test_total_over_two_hands(self):
        """count_raised sums across hands and stays within 0..10."""
        result = frame(hand_with(3, "Right", cx=0.3), hand_with(4, "Left", cx=0.7))
        self.assertEqual(self.classifier.count_raised(result), 7)
        self.assertEqual(self.classifier.count_raised(ten_fingers()), 10)
        self.assertEqual(self.classifier.count_raised(frame()), 0)
        self.assertEqual(self.classifier.count_raised(None), 0)

    def test_pointing(self):
        """Index up with the other fingers curled is pointing."""
        state = self.classifier.classify(pointing())
        self.assertTrue(state.is_pointing)
        self.assertFalse(self.classifier.classify(hand_with(2)).is_pointing)
        self.assertEqual(state.action_point, (pointing().landmarks[INDEX_TIP].x, 0.5))

    def test_idempotent(self):
        """Classifying the same hand twice gives the same state."""
        hand = hand_with(3)
        self.assertEqual(self.classifier.classify(hand), self.classifier.classify(hand))


class TestMalformedInput(unittest.TestCase):
    """The classifier is total: bad input yields the neutral state."""

    def setUp(self):
        self.classifier = GestureClassifier()

    def test_undersized_hand(self):
        hand = Hand(landmarks=[Landmark(0.5, 0.5)] * 5, handedness="Right")
        self.assertEqual(self.classifier.classify(hand), NEUTRAL_STATE)

    def test_no_hand(self):
        self.assertEqual(self.classifier.classify(None), NEUTRAL_STATE)
        self.assertEqual(self.classifier.recognize(None), NoGesture())

    def test_empty_landmarks(self):
        self.assertEqual(self.classifier.classify(Hand(landmarks=[])), NEUTRAL_STATE)
        self.assertFalse(self.classifier.is_pinching([]))


class TestPinch(unittest.TestCase):
    """Test thumb-index pinch detection."""

    def setUp(self):
        self.classifier = GestureClassifier(pinch_threshold=0.05, pinch_use_depth=True)

    def _with_gap(self, gap: float) -> Hand:
        hand = pointing()
        tip = hand.landmarks[INDEX_TIP]
        return moved(hand, THUMB_TIP, x=tip.x + gap, y=tip.y, z=tip.z)

    def test_pinch_distance_sequence(self):
        """Gaps [0.12, 0.03, 0.02] against 0.05 pinch as [False, True, True]."""
        flags = [self.classifier.classify(self._with_gap(gap)).is_pinching for gap in (0.12, 0.03, 0.02)]
        self.assertEqual(flags, [False, True, True])

    def test_depth_separates_tips(self):
        """In 3D mode a large depth gap breaks the pinch."""
        hand = moved(self._with_gap(0.01), THUMB_TIP, z=0.2)
        self.assertFalse(self.classifier.classify(hand).is_pinching)
        flat = GestureClassifier(pinch_threshold=0.05, pinch_use_depth=False)
        self.assertTrue(flat.classify(hand).is_pinching)


class TestRecognize(unittest.TestCase):
    """Test the tagged gesture union."""

    def setUp(self):
        self.classifier = GestureClassifier()

    def test_pinch_beats_pointing(self):
        state = self.classifier.classify(pinching())
        self.assertTrue(state.is_pointing)
        self.assertIsInstance(self.classifier.recognize(state), Pinching)

    def test_pointing_and_counts(self):
        self.assertIsInstance(self.classifier.recognize(self.classifier.classify(pointing())), Pointing)
        self.assertEqual(self.classifier.recognize(self.classifier.classify(hand_with(3))), FingerCount(3))

    def test_ten_fingers_needs_two_hands(self):
        states = self.classifier.classify_frame(ten_fingers())
        self.assertEqual(self.classifier.recognize_frame(states), TenFingers())
        one = self.classifier.classify_frame(frame(open_palm()))
        self.assertEqual(self.classifier.recognize_frame(one), FingerCount(5))
        self.assertEqual(self.classifier.recognize_frame([]), NoGesture())

    def test_nine_fingers_policy(self):
        """Nine visible fingers only count as ten when configured to."""
        nine = frame(open_palm("Right", cx=0.3), hand_with(4, "Left", cx=0.7))
        strict = GestureClassifier()
        self.assertEqual(strict.recognize_frame(strict.classify_frame(nine)), FingerCount(9))
        tolerant = GestureClassifier(ten_fingers_min=9)
        self.assertEqual(tolerant.recognize_frame(tolerant.classify_frame(nine)), TenFingers())


class TestStrategies(unittest.TestCase):
    """Vertical and angle strategies agree on upright hands."""

    def test_angle_strategy_counts(self):
        angle = GestureClassifier(AngleStrategy())
        for count in range(6):
            with self.subTest(count=count):
                self.assertEqual(angle.classify(hand_with(count)).raised, count)

    def test_angle_strategy_is_rotation_invariant(self):
        """A pointing hand lying on its side still points with the angle strategy."""
        hand = pointing()
        # rotate 90 degrees about the wrist
        wrist = hand.landmarks[0]
        rotated = Hand(
            landmarks=[Landmark(wrist.x + (p.y - wrist.y), wrist.y - (p.x - wrist.x), p.z) for p in hand.landmarks],
            handedness="Right",
        )
        self.assertTrue(GestureClassifier(AngleStrategy()).classify(rotated).is_pointing)
        self.assertFalse(GestureClassifier(VerticalStrategy()).classify(rotated).is_pointing)

    def test_half_bent_finger_still_points(self):
        """A middle finger folded to 130 degrees is not extended, so the hand points."""
        hand = bent(pointing(), MIDDLE_PIP, MIDDLE_TIP, 130.0)
        state = GestureClassifier(AngleStrategy()).classify(hand)
        self.assertEqual(state.fingers[1:], (True, False, False, False))
        self.assertTrue(state.is_pointing)
        self.assertIsInstance(GestureClassifier.recognize(state), Pointing)

    def test_extension_scenario(self):
        """Tip y [0.8, 0.2, 0.2] against a PIP at 0.5 is extended from the 2nd sample."""
        classifier = GestureClassifier()
        base = moved(hand_with(0), INDEX_PIP, y=0.5)
        flags = [classifier.classify(moved(base, INDEX_TIP, y=y)).index for y in (0.8, 0.2, 0.2)]
        self.assertEqual(flags, [False, True, True])

    def test_bad_thumb_reference(self):
        with self.assertRaises(ValueError):
            VerticalStrategy("wrist")


if __name__ == "__main__":
    unittest.main()
