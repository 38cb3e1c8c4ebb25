"""
Per-game gesture pipeline: classifier, sticky role tracking, cursor smoothing
and hold-to-confirm, evaluated once per tick.
"""
import logging
from typing import Callable, Generic, Iterable, Optional, TypeVar, Union

from .classifier import GestureClassifier
from .config import Cfg
from .hold import HoldToConfirm
from .smoothing import SmootherBank
from .tracking import HandIdentityResolver, Role
from .types import FrameResult, TickReport

logger = logging.getLogger(__name__)

T = TypeVar("T")

CandidateFn = Callable[[TickReport], Optional[T]]


class GestureSession(Generic[T]):
    """
    Gesture state owned by one running game.

    The session is created when a game starts and reset when it stops, so
    role locks, smoother values and hold progress never leak between games.

    The ``candidate`` callback maps each tick's report to the value the
    player is currently "holding" (a finger count, an option, a flag...),
    or None. It can be swapped when the game's objective changes.
    """

    def __init__(self, classifier: GestureClassifier,
                 roles: Iterable[Union[Role, str]] = ("primary",),
                 alpha: float = 0.3, hold_required: float = 3.0,
                 candidate: Optional[CandidateFn] = None):
        self.classifier = classifier
        self.resolver = HandIdentityResolver(roles)
        self.smoothers = SmootherBank(alpha)
        self.hold: HoldToConfirm[T] = HoldToConfirm(hold_required)
        self.candidate = candidate

    @classmethod
    def from_config(cls, cfg: Cfg, roles: Iterable[Union[Role, str]] = ("primary",),
                    hold_required: Optional[float] = None,
                    candidate: Optional[CandidateFn] = None) -> "GestureSession":
        return cls(
            GestureClassifier.from_config(cfg.classifier),
            roles=roles,
            alpha=cfg.smoothing.alpha,
            hold_required=cfg.hold.duration_s if hold_required is None else hold_required,
            candidate=candidate,
        )

    def process_frame(self, frame: Optional[FrameResult], now: float, dt: float = 1.0) -> TickReport:
        """
        Run one tick of the pipeline.

        Args:
            frame: Hands detected this tick (None or empty when nothing was seen)
            now: Tick timestamp
            dt: Tick duration, in the same unit as the hold requirement

        Returns:
            TickReport for this tick
        """
        states = self.classifier.classify_frame(frame)
        indices = self.resolver.resolve_indices(frame)

        roles = {}
        role_hands = {}
        role_gestures = {}
        cursors = {}
        for name, idx in indices.items():
            state = states[idx] if idx is not None else None
            roles[name] = state
            role_hands[name] = frame.hands[idx] if idx is not None else None
            role_gestures[name] = self.classifier.recognize(state)
            if state is not None and state.action_point is not None:
                cursors[name] = self.smoothers.update(name, *state.action_point)
            else:
                # reseed on reappearance instead of sliding from the stale position
                self.smoothers.reset(name)
                cursors[name] = None

        report = TickReport(
            timestamp=now,
            hands=states,
            total_raised=sum(state.raised for state in states),
            gesture=self.classifier.recognize_frame(states),
            roles=roles,
            role_gestures=role_gestures,
            bindings=dict(self.resolver.bindings),
            cursors=cursors,
            role_hands=role_hands,
        )

        if self.candidate is not None:
            report.confirmed = self.hold.update(self.candidate(report), dt)
            report.hold_candidate = self.hold.candidate
            report.hold_progress = self.hold.progress
        return report

    def reset(self) -> None:
        """Unlock all roles and clear smoothing and hold progress."""
        self.resolver.reset()
        self.smoothers.reset()
        self.hold.reset()
