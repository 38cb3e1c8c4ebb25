"""
Type definitions for the gesture arcade.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Literal, Optional, Protocol, Sequence, Tuple, TypeVar, Union, runtime_checkable

Handedness = Literal["Left", "Right"]
Point = Tuple[float, float]

T = TypeVar("T")


@dataclass(frozen=True)
class Landmark:
    """One tracked hand point: normalized x/y in [0..1] and relative depth z."""
    x: float
    y: float
    z: float = 0.0


@dataclass
class Hand:
    """A detected hand: 21 landmarks in anatomical order plus handedness."""
    landmarks: Sequence[Landmark]
    handedness: Optional[str] = None  # "Left", "Right" or None when unknown
    score: float = 1.0


@dataclass
class FrameResult:
    """All hands detected in one frame. Hand order is not stable between frames."""
    hands: List[Hand] = field(default_factory=list)
    timestamp_ms: int = 0

    @property
    def empty(self) -> bool:
        return not self.hands


@dataclass(frozen=True)
class GestureState:
    """Per-hand gesture features derived from one frame."""
    thumb: bool = False
    index: bool = False
    middle: bool = False
    ring: bool = False
    pinky: bool = False
    is_pointing: bool = False
    is_pinching: bool = False
    action_point: Optional[Point] = None  # index fingertip (x, y)

    @property
    def fingers(self) -> Tuple[bool, bool, bool, bool, bool]:
        return (self.thumb, self.index, self.middle, self.ring, self.pinky)

    @property
    def raised(self) -> int:
        """Number of extended fingers (0-5)."""
        return sum(self.fingers)


NEUTRAL_STATE = GestureState()


# Recognized gestures, consumed by games with isinstance dispatch.

@dataclass(frozen=True)
class NoGesture:
    """Nothing recognizable (no hand, or an unmapped pose)."""


@dataclass(frozen=True)
class FingerCount:
    """A plain raised-finger count."""
    count: int


@dataclass(frozen=True)
class Pointing:
    """Index extended, middle/ring/pinky not extended."""
    point: Point


@dataclass(frozen=True)
class Pinching:
    """Thumb tip touching index tip."""
    point: Point


@dataclass(frozen=True)
class TenFingers:
    """Both hands fully open (frame-level gesture)."""


Gesture = Union[NoGesture, FingerCount, Pointing, Pinching, TenFingers]


@dataclass(frozen=True)
class Confirmed(Generic[T]):
    """Emitted once when a candidate has been held for the required duration."""
    value: T


@dataclass
class TickReport:
    """Structured per-tick output of a gesture session."""
    timestamp: float
    hands: List[GestureState]
    total_raised: int
    gesture: Gesture
    roles: Dict[str, Optional[GestureState]] = field(default_factory=dict)
    role_gestures: Dict[str, Gesture] = field(default_factory=dict)
    bindings: Dict[str, Optional[str]] = field(default_factory=dict)
    cursors: Dict[str, Optional[Point]] = field(default_factory=dict)
    confirmed: Optional[Confirmed] = None
    hold_candidate: Any = None
    hold_progress: float = 0.0  # 0..1 towards confirmation
    role_hands: Dict[str, Optional[Hand]] = field(default_factory=dict)


@runtime_checkable
class CaptureProto(Protocol):
    """A frame source exclusively owned by one game at a time."""

    def read(self) -> Optional[Any]:
        """Return the next frame, or None when no frame is available."""
        ...

    def release(self) -> None:
        """Free the underlying device."""
        ...


@runtime_checkable
class ScoreStoreProto(Protocol):
    """External key-value store for high scores."""

    def get(self, key: str) -> int:
        ...

    def set(self, key: str, value: int) -> None:
        ...
