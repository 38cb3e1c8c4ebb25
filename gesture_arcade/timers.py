"""
Tick-driven, cancelable named timers.

Timers are advanced from the game loop, so callbacks run inside a tick and
never concurrently with it. Starting a timer under a name that is already
pending cancels the earlier one.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Pending:
    due: float
    callback: Callable[[], None]


class Timers:
    """A set of one-shot timers, at most one pending per name."""

    def __init__(self):
        self._pending: Dict[str, _Pending] = {}

    def start(self, name: str, now: float, delay: float, callback: Callable[[], None]) -> None:
        if name in self._pending:
            logger.debug("Timer %r restarted", name)
        self._pending[name] = _Pending(due=now + delay, callback=callback)

    def cancel(self, name: str) -> bool:
        return self._pending.pop(name, None) is not None

    def cancel_all(self) -> None:
        self._pending.clear()

    def active(self, name: str) -> bool:
        return name in self._pending

    def remaining(self, name: str, now: float) -> Optional[float]:
        pending = self._pending.get(name)
        if pending is None:
            return None
        return max(0.0, pending.due - now)

    def advance(self, now: float) -> List[str]:
        """Fire every timer due at ``now``, earliest first. Returns the fired names."""
        due = sorted(
            ((name, pending) for name, pending in self._pending.items() if pending.due <= now),
            key=lambda item: item[1].due,
        )
        fired = []
        for name, pending in due:
            # an earlier callback may have cancelled or replaced this timer
            if self._pending.get(name) is not pending:
                continue
            del self._pending[name]
            fired.append(name)
            pending.callback()
        return fired

    def __len__(self) -> int:
        return len(self._pending)
