"""
Generalized game interaction controller.

Every game runs the same phase machine:

    IDLE -> LOADING -> [READY_CHECK] -> [COUNTDOWN] -> ACTIVE <-> FEEDBACK
                                                           \\-> GAME_OVER

Phases advance on timer expiry, on gesture events from the session, or on
external events (content ready/failed, acquisition failure) posted with
``post`` and handled at the start of the next tick.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional, Union

from ..capture import CameraCapture, CaptureManager, capture_manager
from ..config import Cfg
from ..content import ContentRequest
from ..errors import AcquisitionError, CaptureBusyError
from ..gestures import GestureSession
from ..scores import MemoryScoreStore, record_high_score
from ..timers import Timers
from ..types import CaptureProto, FrameResult, ScoreStoreProto, TenFingers, TickReport

logger = logging.getLogger(__name__)

MAX_TICK_S = 0.25


class GamePhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY_CHECK = "ready_check"
    COUNTDOWN = "countdown"
    ACTIVE = "active"
    FEEDBACK = "feedback"
    GAME_OVER = "game_over"


@dataclass
class ContentReady:
    request: ContentRequest
    payload: Any


@dataclass
class ContentFailed:
    request: ContentRequest
    error: str


@dataclass
class AcquisitionFailed:
    error: str


GameEvent = Union[ContentReady, ContentFailed, AcquisitionFailed]


@dataclass
class GameReport:
    """Everything a presentation layer needs to draw one tick of a game."""
    game: str
    phase: GamePhase
    score: int
    tick: Optional[TickReport] = None
    requests: List[ContentRequest] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
    countdown: Optional[float] = None
    time_left: Optional[float] = None
    feedback: Optional[str] = None
    error: Optional[str] = None
    view: Dict[str, Any] = field(default_factory=dict)


class GameController:
    """
    Base class for gesture games.

    Subclasses set the class attributes and override the hooks they need:
    ``configure``, ``make_request``, ``on_content``, ``begin_round``,
    ``on_active``, ``candidate`` and ``view``.
    """

    name = "game"
    roles = ("primary",)
    content_kind: Optional[str] = None   # content fetched before each round
    ready_check = False                  # wait for ten fingers before the countdown
    ready_every_round = False
    countdown = False

    def __init__(self, cfg: Cfg, captures: Optional[CaptureManager] = None,
                 opener: Optional[Callable[[], CaptureProto]] = None,
                 store: Optional[ScoreStoreProto] = None):
        self.cfg = cfg
        self.captures = captures or capture_manager
        self.opener = opener or (lambda: CameraCapture(cfg.camera))
        self.store = store or MemoryScoreStore()
        self.capture: Optional[CaptureProto] = None
        self.timers = Timers()
        self.session = self._make_session()
        self.phase = GamePhase.IDLE
        self.score = 0
        self.error: Optional[str] = None
        self.feedback: Optional[str] = None
        self._events: Deque[GameEvent] = deque()
        self._requests: List[ContentRequest] = []
        self._notices: List[str] = []
        self._pending: Optional[ContentRequest] = None
        self._played = False
        self._now = 0.0
        self._last_tick: Optional[float] = None

    # ------------------------------------------------------------------ hooks
    def configure(self, **options) -> None:
        """Apply per-start options (mode, hand choice, subjects...)."""
        if options:
            raise TypeError(f"{self.name} takes no options, got {sorted(options)}")

    def hold_seconds(self) -> float:
        return self.cfg.hold.duration_s

    def feedback_seconds(self) -> float:
        return self.cfg.games.feedback_s

    def candidate(self, report: TickReport) -> Optional[Any]:
        """Value the player is holding this tick, or None."""
        return None

    def make_request(self) -> ContentRequest:
        return ContentRequest(kind=self.content_kind, score=self.score)

    def on_content(self, payload: Any, now: float) -> None:
        pass

    def on_content_failed(self, request: ContentRequest, error: str, now: float) -> None:
        self.fail(f"Could not load content: {error}")

    def begin_round(self, now: float) -> None:
        pass

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        pass

    def view(self) -> Dict[str, Any]:
        return {}

    # -------------------------------------------------------------- lifecycle
    def start(self, now: float, **options) -> bool:
        """
        Start (or restart) the game. Returns False when acquisition failed;
        ``error`` then holds the reason and ``start`` may simply be called again.
        """
        if self.phase not in (GamePhase.IDLE, GamePhase.GAME_OVER):
            logger.warning("%s already running (%s)", self.name, self.phase.value)
            return False
        self.timers.cancel_all()
        self.configure(**options)
        self.session = self._make_session()
        self.score = 0
        self.error = None
        self.feedback = None
        self._played = False
        self._pending = None
        self._events.clear()
        self._now = now
        self._last_tick = None
        self._set_phase(GamePhase.LOADING)

        try:
            self.capture = self.captures.acquire(self.name, self.opener)
        except (AcquisitionError, CaptureBusyError) as e:
            self.fail(str(e))
            return False

        if self.content_kind is not None:
            self.request_content(self.make_request())
        else:
            self._after_loading()
        return True

    def stop(self) -> None:
        """Cancel timers, release the capture, then reset role locks and hold state."""
        self.timers.cancel_all()
        self._release()
        self.session.reset()
        self._pending = None
        self._events.clear()
        if self.phase is not GamePhase.IDLE:
            self._set_phase(GamePhase.IDLE)

    def fail(self, reason: str) -> None:
        logger.warning("%s failed: %s", self.name, reason)
        self.stop()
        self.error = reason

    def post(self, event: GameEvent) -> None:
        """Queue an external event; it is handled at the start of the next tick."""
        self._events.append(event)

    # ------------------------------------------------------------------- tick
    def tick(self, frame: Optional[FrameResult], now: float) -> GameReport:
        """Advance the game by one frame."""
        dt = 0.0 if self._last_tick is None else min(MAX_TICK_S, max(0.0, now - self._last_tick))
        self._last_tick = now
        self._now = now

        while self._events:
            self._handle_event(self._events.popleft())

        report = None
        if self.phase not in (GamePhase.IDLE, GamePhase.GAME_OVER):
            self.timers.advance(now)
        if self.phase not in (GamePhase.IDLE, GamePhase.GAME_OVER):
            report = self.session.process_frame(frame, now, dt)
            if self.phase is GamePhase.READY_CHECK:
                if isinstance(report.gesture, TenFingers):
                    self._after_ready()
            elif self.phase is GamePhase.ACTIVE:
                self.on_active(report, now, dt)

        return self._report(report)

    # ---------------------------------------------------------------- helpers
    def request_content(self, request: ContentRequest) -> None:
        self._pending = request
        self._requests.append(request)
        self._set_phase(GamePhase.LOADING)

    def notify(self, notice: str) -> None:
        self._notices.append(notice)

    def show_feedback(self, result: str) -> None:
        """Show a transient result, then move on to the next round."""
        self.timers.cancel("round")
        self.feedback = result
        self.notify(result)
        self._set_phase(GamePhase.FEEDBACK)
        self.timers.start("feedback", self._now, self.feedback_seconds(), self._after_feedback)

    def resume(self) -> None:
        """Return to play without starting a new round."""
        self._set_phase(GamePhase.ACTIVE)

    def game_over(self) -> None:
        self.timers.cancel_all()
        self._release()
        self.session.reset()
        record_high_score(self.store, self.name, self.score)
        self.notify("game_over")
        self._set_phase(GamePhase.GAME_OVER)

    @property
    def high_score(self) -> int:
        return self.store.get(self.name)

    def _release(self) -> None:
        self.capture = None
        self.captures.release(self.name)

    def _make_session(self) -> GestureSession:
        return GestureSession.from_config(
            self.cfg, roles=self.roles, hold_required=self.hold_seconds(),
            candidate=self._candidate,
        )

    def _candidate(self, report: TickReport) -> Optional[Any]:
        if self.phase is not GamePhase.ACTIVE:
            return None
        return self.candidate(report)

    def _handle_event(self, event: GameEvent) -> None:
        if isinstance(event, AcquisitionFailed):
            self.fail(event.error)
        elif isinstance(event, (ContentReady, ContentFailed)):
            if event.request is not self._pending:
                logger.debug("%s dropping stale %s result", self.name, event.request.kind)
                return
            self._pending = None
            if isinstance(event, ContentFailed):
                self.on_content_failed(event.request, event.error, self._now)
                return
            self.on_content(event.payload, self._now)
            if self.phase is GamePhase.LOADING and self._pending is None:
                self._after_loading()
        else:
            raise TypeError(f"Unknown game event {event!r}")

    def _after_loading(self) -> None:
        if self.ready_check and (not self._played or self.ready_every_round):
            self._set_phase(GamePhase.READY_CHECK)
        elif self.countdown and not self._played:
            self._start_countdown()
        else:
            self._begin()

    def _after_ready(self) -> None:
        if self.countdown:
            self._start_countdown()
        else:
            self._begin()

    def _start_countdown(self) -> None:
        self._set_phase(GamePhase.COUNTDOWN)
        self.timers.start("countdown", self._now, self.cfg.games.countdown_s, self._begin)

    def _begin(self) -> None:
        self._played = True
        self.session.hold.reset()
        self._set_phase(GamePhase.ACTIVE)
        self.begin_round(self._now)

    def _after_feedback(self) -> None:
        self.feedback = None
        if self.content_kind is not None:
            self.request_content(self.make_request())
        else:
            self._begin()

    def _set_phase(self, phase: GamePhase) -> None:
        if phase is not self.phase:
            logger.info("%s: %s -> %s", self.name, self.phase.value, phase.value)
            self.phase = phase

    def _report(self, tick: Optional[TickReport]) -> GameReport:
        report = GameReport(
            game=self.name,
            phase=self.phase,
            score=self.score,
            tick=tick,
            requests=self._requests,
            notices=self._notices,
            countdown=self.timers.remaining("countdown", self._now),
            time_left=self.timers.remaining("round", self._now),
            feedback=self.feedback,
            error=self.error,
            view=self.view(),
        )
        self._requests = []
        self._notices = []
        return report
