"""
Math Challenge: answer arithmetic problems by raising fingers (0-10).
"""
import logging
from typing import Any, Dict, List, Optional

from ..content import ContentRequest, MathProblem
from ..types import TickReport
from .base import GameController

logger = logging.getLogger(__name__)


class MathChallenge(GameController):
    """
    The total raised-finger count over all hands is the answer. Holding the
    correct count scores a point; the problem timer running out counts as a miss.
    """

    name = "math_challenge"
    roles = ()
    content_kind = "math"

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.math_challenge
        super().__init__(cfg, **kwargs)
        self.problem: Optional[MathProblem] = None
        self.past_scores: List[int] = []
        self.last_answer: Optional[int] = None

    def configure(self, **options) -> None:
        super().configure(**options)
        self.problem = None
        self.past_scores = []
        self.last_answer = None

    def hold_seconds(self) -> float:
        return self.game_cfg.hold_s

    def make_request(self) -> ContentRequest:
        return ContentRequest(kind="math", score=self.score, past_scores=list(self.past_scores))

    def on_content(self, payload: Any, now: float) -> None:
        self.problem = payload

    def begin_round(self, now: float) -> None:
        self.last_answer = None
        self.timers.start("round", now, self.game_cfg.problem_time_s, self._time_up)

    def candidate(self, report: TickReport) -> Optional[int]:
        if not report.hands:
            return None
        return report.total_raised

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        if report.confirmed is None or self.problem is None:
            return
        self.last_answer = report.confirmed.value
        if self.last_answer == self.problem.solution:
            self.score += 1
            self._finish("correct")
        else:
            logger.debug("Held %d, expected %d", self.last_answer, self.problem.solution)

    def _time_up(self) -> None:
        self._finish("incorrect")

    def _finish(self, result: str) -> None:
        if self.score > 0:
            self.past_scores.append(self.score)
        self.show_feedback(result)

    def view(self) -> Dict[str, Any]:
        return {
            "problem": self.problem.problem if self.problem else None,
            "last_answer": self.last_answer,
        }
