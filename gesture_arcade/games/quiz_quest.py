"""
Quiz Quest: multiple-choice questions answered by holding up 1..N fingers.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..content import ContentRequest, QuizQuestion
from ..types import TickReport
from .base import GameController

logger = logging.getLogger(__name__)

SUBJECTS = ["General Knowledge", "Science", "History", "Computers"]
DEFAULT_SUBJECT = "General Knowledge"


class QuizQuest(GameController):
    """
    Raising N fingers picks option N. The thinking timer pauses while an
    answer is being held and resumes if the player lets go early.
    """

    name = "quiz_quest"
    roles = ()
    content_kind = "quiz"

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.quiz_quest
        super().__init__(cfg, **kwargs)
        self.subjects: List[str] = [DEFAULT_SUBJECT]
        self.question: Optional[QuizQuestion] = None
        self.submitted: Optional[int] = None
        self._paused_left: Optional[float] = None

    def configure(self, subjects: Optional[Sequence[str]] = None) -> None:
        # custom subjects are passed through to the content provider
        self.subjects = [s.strip() for s in subjects or [] if s and s.strip()] or [DEFAULT_SUBJECT]
        self.question = None
        self.submitted = None
        self._paused_left = None

    def hold_seconds(self) -> float:
        return self.game_cfg.hold_s

    def feedback_seconds(self) -> float:
        return self.game_cfg.feedback_s

    def make_request(self) -> ContentRequest:
        return ContentRequest(kind="quiz", score=self.score, subjects=list(self.subjects))

    def on_content(self, payload: Any, now: float) -> None:
        options = payload.options[:self.game_cfg.max_options]
        if not 0 <= payload.correct_index < len(options):
            self.fail(f"Question has no valid answer among {len(options)} options")
            return
        self.question = QuizQuestion(payload.question, options, payload.correct_index)

    def begin_round(self, now: float) -> None:
        self.submitted = None
        self._paused_left = None
        self.timers.start("round", now, self.game_cfg.thinking_time_s, self._time_up)

    def candidate(self, report: TickReport) -> Optional[int]:
        if self.question is None:
            return None
        if 1 <= report.total_raised <= len(self.question.options):
            return report.total_raised
        return None

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        if report.confirmed is not None:
            self.submitted = report.confirmed.value
            correct = self.submitted - 1 == self.question.correct_index
            if correct:
                self.score += 1
            self.show_feedback("correct" if correct else "incorrect")
            return

        if report.hold_candidate is not None:
            if self.timers.active("round"):
                self._paused_left = self.timers.remaining("round", now)
                self.timers.cancel("round")
        elif self._paused_left is not None:
            self.timers.start("round", now, self._paused_left, self._time_up)
            self._paused_left = None

    def _time_up(self) -> None:
        self.submitted = None
        self.show_feedback("incorrect")

    def view(self) -> Dict[str, Any]:
        return {
            "question": self.question.question if self.question else None,
            "options": list(self.question.options) if self.question else [],
            "subjects": list(self.subjects),
            "submitted": self.submitted,
            "thinking_paused": self._paused_left is not None,
        }
