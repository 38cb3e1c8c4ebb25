"""
Exponential smoothing of continuous control points (cursors, paddles, lanes).
"""
from typing import Dict, Hashable, Optional

from .types import Point


class ExponentialSmoother:
    """
    Per-axis exponential smoothing: ``s <- s + alpha * (raw - s)``.

    The first observation seeds the filter unchanged. Lower alpha is
    smoother but lags more; higher alpha is snappier but jittery.
    """

    def __init__(self, alpha: float = 0.3):
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.value: Optional[Point] = None

    def update(self, x: float, y: float) -> Point:
        """Feed one raw observation and return the smoothed point."""
        if self.value is None:
            self.value = (x, y)
        else:
            sx, sy = self.value
            self.value = (sx + self.alpha * (x - sx), sy + self.alpha * (y - sy))
        return self.value

    def reset(self) -> None:
        """Forget the current value; the next observation seeds again."""
        self.value = None


class SmootherBank:
    """Independent smoothers keyed by control point (role name, lane index...)."""

    def __init__(self, alpha: float = 0.3):
        self.alpha = alpha
        self._smoothers: Dict[Hashable, ExponentialSmoother] = {}

    def update(self, key: Hashable, x: float, y: float) -> Point:
        smoother = self._smoothers.get(key)
        if smoother is None:
            smoother = self._smoothers[key] = ExponentialSmoother(self.alpha)
        return smoother.update(x, y)

    def get(self, key: Hashable) -> Optional[Point]:
        smoother = self._smoothers.get(key)
        return smoother.value if smoother is not None else None

    def reset(self, key: Optional[Hashable] = None) -> None:
        """Reset one control point, or all of them."""
        if key is None:
            self._smoothers.clear()
        else:
            self._smoothers.pop(key, None)
