"""
Hold-to-confirm: a candidate value must be sustained before it counts.
"""
import logging
from enum import Enum, auto
from typing import Callable, Generic, Optional, TypeVar

from .types import Confirmed

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPSILON = 1e-9
_NOTHING = object()


class HoldState(Enum):
    IDLE = auto()
    HOLDING = auto()


class HoldToConfirm(Generic[T]):
    """
    Debounce a stream of candidate values.

    Call ``update`` once per tick with the freshly observed candidate (None
    for "no candidate") and the tick duration. The tick on which a candidate
    is first observed counts towards its hold. When the accumulated duration
    reaches ``required`` a single ``Confirmed`` is returned and the machine
    goes back to idle. The same value cannot confirm again until it has been
    released (a different value or None observed).

    Any change of candidate discards all progress.
    """

    def __init__(self, required: float, equals: Optional[Callable[[T, T], bool]] = None):
        self.required = required
        self._equals = equals or (lambda a, b: a == b)
        self.state = HoldState.IDLE
        self.candidate: Optional[T] = None
        self.elapsed = 0.0
        self._latched = _NOTHING

    @property
    def progress(self) -> float:
        """Fraction of the required duration held so far (0..1)."""
        if self.state is not HoldState.HOLDING or self.required <= 0:
            return 0.0
        return min(1.0, self.elapsed / self.required)

    def update(self, candidate: Optional[T], dt: float = 1.0) -> Optional[Confirmed]:
        """
        Advance the machine by one tick.

        Args:
            candidate: Value observed this tick, None when there is none
            dt: Duration of this tick (ticks or seconds, matching ``required``)

        Returns:
            Confirmed(value) on the tick the hold completes, otherwise None
        """
        if candidate is None:
            self._latched = _NOTHING
            self._idle()
            return None

        if self._latched is not _NOTHING:
            if self._equals(candidate, self._latched):
                return None
            self._latched = _NOTHING

        if self.state is HoldState.HOLDING and self._equals(candidate, self.candidate):
            self.elapsed += dt
        else:
            self.state = HoldState.HOLDING
            self.candidate = candidate
            self.elapsed = dt

        if self.elapsed + _EPSILON >= self.required:
            value = self.candidate
            logger.debug("Hold confirmed %r after %.3f", value, self.elapsed)
            self._latched = value
            self._idle()
            return Confirmed(value)
        return None

    def reset(self) -> None:
        """Return to idle and forget any confirmed value awaiting release."""
        self._latched = _NOTHING
        self._idle()

    def _idle(self) -> None:
        self.state = HoldState.IDLE
        self.candidate = None
        self.elapsed = 0.0
