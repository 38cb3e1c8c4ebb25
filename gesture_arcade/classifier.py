"""
Gesture classifier: turns one hand's landmarks into discrete gesture features.

Two finger-extension strategies are available and one is picked per
deployment (``classifier.strategy`` in the config):

- ``VerticalStrategy`` compares fingertip and PIP heights. It assumes an
  upright hand and stops working once the hand is rotated past roughly 60
  degrees from vertical.
- ``AngleStrategy`` measures the interior angle at the PIP joint and is
  rotation invariant.

The thumb is judged on the x axis relative to a configurable reference joint
(vertical strategy) or by its IP joint angle (angle strategy).
"""
import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from .config import ClassifierConfig
from .landmarks import (
    FINGER_JOINTS,
    INDEX_MCP,
    INDEX_TIP,
    NUM_LANDMARKS,
    THUMB_IP,
    THUMB_MCP,
    THUMB_TIP,
    distance,
    joint_angle,
)
from .types import (
    NEUTRAL_STATE,
    FingerCount,
    FrameResult,
    Gesture,
    GestureState,
    Hand,
    Landmark,
    NoGesture,
    Pinching,
    Pointing,
    TenFingers,
)

logger = logging.getLogger(__name__)

THUMB_REFERENCE_JOINTS = {
    "mcp": THUMB_MCP,
    "ip": THUMB_IP,
    "index_mcp": INDEX_MCP,
}


class FingerStrategy(Protocol):
    """Decides whether individual fingers are extended."""

    def finger_extended(self, lm: Sequence[Landmark], mcp: int, pip: int, tip: int) -> bool:
        ...

    def thumb_extended(self, lm: Sequence[Landmark], handedness: Optional[str]) -> bool:
        ...


def _thumb_from_index_base(lm: Sequence[Landmark], reference: int) -> bool:
    """
    Handedness-free thumb test: the thumb is out when its tip sits further
    from the index MCP on the x axis than the thumb reference joint does.
    """
    base_x = lm[INDEX_MCP].x
    if reference == INDEX_MCP:
        reference = THUMB_MCP
    return abs(lm[THUMB_TIP].x - base_x) > abs(lm[reference].x - base_x)


class VerticalStrategy:
    """Tip-above-PIP test for fingers, mirrored x test for the thumb."""

    def __init__(self, thumb_reference: str = "mcp"):
        if thumb_reference not in THUMB_REFERENCE_JOINTS:
            raise ValueError(f"Unknown thumb reference joint: {thumb_reference!r}")
        self.thumb_reference = thumb_reference
        self._ref = THUMB_REFERENCE_JOINTS[thumb_reference]

    def finger_extended(self, lm, mcp, pip, tip):
        return lm[tip].y < lm[pip].y

    def thumb_extended(self, lm, handedness):
        # Mirrored camera: a right hand's thumb points towards smaller x.
        if handedness == "Right":
            return lm[THUMB_TIP].x < lm[self._ref].x
        if handedness == "Left":
            return lm[THUMB_TIP].x > lm[self._ref].x
        return _thumb_from_index_base(lm, self._ref)


class AngleStrategy:
    """Joint-angle test, independent of hand rotation and handedness."""

    def __init__(self, extended_deg: float = 160.0, thumb_deg: float = 150.0):
        self.extended_deg = extended_deg
        self.thumb_deg = thumb_deg

    def finger_extended(self, lm, mcp, pip, tip):
        return joint_angle(lm[mcp], lm[pip], lm[tip]) > self.extended_deg

    def thumb_extended(self, lm, handedness):
        return joint_angle(lm[THUMB_MCP], lm[THUMB_IP], lm[THUMB_TIP]) > self.thumb_deg


class GestureClassifier:
    """
    Pure per-hand classifier.

    ``classify`` never raises: a hand with fewer than 21 landmarks, or no
    hand at all, yields the neutral all-false state.
    """

    def __init__(self, strategy: Optional[FingerStrategy] = None,
                 pinch_threshold: float = 0.05, pinch_use_depth: bool = True,
                 ten_fingers_min: int = 10):
        self.strategy = strategy or VerticalStrategy()
        self.pinch_threshold = pinch_threshold
        self.pinch_use_depth = pinch_use_depth
        self.ten_fingers_min = ten_fingers_min

    @classmethod
    def from_config(cls, cfg: ClassifierConfig) -> "GestureClassifier":
        """Build the classifier selected by the ``classifier`` config section."""
        if cfg.strategy == "angle":
            strategy = AngleStrategy(cfg.extended_angle_deg)
        else:
            strategy = VerticalStrategy(cfg.thumb_reference)
        return cls(strategy, cfg.pinch_threshold, cfg.pinch_use_depth, cfg.ten_fingers_min)

    def classify(self, hand: Optional[Hand]) -> GestureState:
        """
        Classify a single hand.

        Args:
            hand: Detected hand (may be None)

        Returns:
            GestureState with finger states, pointing/pinching flags and the
            index fingertip as action point
        """
        lm = hand.landmarks if hand is not None else None
        if lm is None or len(lm) < NUM_LANDMARKS:
            return NEUTRAL_STATE

        strategy = self.strategy
        thumb = strategy.thumb_extended(lm, hand.handedness)
        index, middle, ring, pinky = (
            strategy.finger_extended(lm, mcp, pip, tip) for mcp, pip, tip in FINGER_JOINTS
        )

        return GestureState(
            thumb=thumb,
            index=index,
            middle=middle,
            ring=ring,
            pinky=pinky,
            is_pointing=index and not (middle or ring or pinky),
            is_pinching=self.is_pinching(lm),
            action_point=(lm[INDEX_TIP].x, lm[INDEX_TIP].y),
        )

    def is_pinching(self, lm: Sequence[Landmark]) -> bool:
        """Thumb tip and index tip closer than the pinch threshold."""
        if len(lm) < NUM_LANDMARKS:
            return False
        return distance(lm[THUMB_TIP], lm[INDEX_TIP], self.pinch_use_depth) < self.pinch_threshold

    def classify_frame(self, frame: Optional[FrameResult]) -> List[GestureState]:
        """Classify every hand of a frame, preserving frame order."""
        if frame is None:
            return []
        return [self.classify(hand) for hand in frame.hands]

    def count_raised(self, frame: Optional[FrameResult]) -> int:
        """Total raised fingers over all hands in the frame (0-10 for two hands)."""
        return sum(state.raised for state in self.classify_frame(frame))

    @staticmethod
    def recognize(state: Optional[GestureState]) -> Gesture:
        """Map one hand's state onto a tagged gesture. Pinch wins over pointing."""
        if state is None:
            return NoGesture()
        if state.is_pinching and state.action_point is not None:
            return Pinching(state.action_point)
        if state.is_pointing and state.action_point is not None:
            return Pointing(state.action_point)
        return FingerCount(state.raised)

    def recognize_frame(self, states: Iterable[GestureState]) -> Gesture:
        """
        Frame-level gesture: ``TenFingers`` when at least two hands show
        ``ten_fingers_min`` raised fingers in total, otherwise the total count.
        """
        states = list(states)
        if not states:
            return NoGesture()
        total = sum(state.raised for state in states)
        if len(states) >= 2 and total >= self.ten_fingers_min:
            return TenFingers()
        return FingerCount(total)
