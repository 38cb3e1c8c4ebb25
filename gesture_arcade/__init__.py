"""
Gesture Arcade

Hand-gesture recognition core for camera-controlled arcade games: a finger
classifier, temporal smoothing, sticky hand tracking and hold-to-confirm,
driving a family of games through one shared controller.
"""

__version__ = "0.1.0"

from .types import (
    Hand, Landmark, FrameResult, GestureState, TickReport, Confirmed,
    NoGesture, FingerCount, Pointing, Pinching, TenFingers,
)
from .config import load_config, Cfg
from .classifier import GestureClassifier, VerticalStrategy, AngleStrategy
from .smoothing import ExponentialSmoother, SmootherBank
from .tracking import HandIdentityResolver, Role
from .hold import HoldToConfirm
from .gestures import GestureSession
from .content import MockContentProvider

__all__ = [
    "Hand",
    "Landmark",
    "FrameResult",
    "GestureState",
    "TickReport",
    "Confirmed",
    "NoGesture",
    "FingerCount",
    "Pointing",
    "Pinching",
    "TenFingers",
    "load_config",
    "Cfg",
    "GestureClassifier",
    "VerticalStrategy",
    "AngleStrategy",
    "ExponentialSmoother",
    "SmootherBank",
    "HandIdentityResolver",
    "Role",
    "HoldToConfirm",
    "GestureSession",
    "MockContentProvider",
]
