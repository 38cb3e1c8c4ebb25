"""
Async bridge between a game controller and its content provider.

The controller never awaits anything itself. Content requests it emits are
fulfilled here as asyncio tasks, and every result is posted back as an event
that the controller handles on its next tick.
"""
import asyncio
import logging
from typing import List, Optional, Set

from .content import ContentProviderProto, ContentRequest, fulfill
from .games.base import ContentFailed, ContentReady, GameController, GameReport
from .types import FrameResult

logger = logging.getLogger(__name__)


class GameRunner:
    """Drives one controller; owns the in-flight content tasks."""

    def __init__(self, game: GameController, provider: ContentProviderProto):
        self.game = game
        self.provider = provider
        self._tasks: Set[asyncio.Task] = set()

    def start(self, now: float, **options) -> bool:
        # requests made during start() are scheduled by the first tick
        return self.game.start(now, **options)

    def tick(self, frame: Optional[FrameResult], now: float) -> GameReport:
        """Advance the game and schedule any content it asked for."""
        report = self.game.tick(frame, now)
        for request in report.requests:
            self._schedule(request)
        return report

    def _schedule(self, request: ContentRequest) -> None:
        task = asyncio.create_task(self._fetch(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, request: ContentRequest) -> None:
        try:
            payload = await fulfill(self.provider, request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Content request %s failed: %s", request.kind, e)
            self.game.post(ContentFailed(request, str(e)))
            return
        self.game.post(ContentReady(request, payload))

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every in-flight content request to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel in-flight requests, then tear the game down."""
        tasks: List[asyncio.Task] = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.game.stop()
