"""
Bubble Pop: touch the bubble holding the right answer with your index finger.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..content import BubbleProblem
from ..landmarks import mirror, point_in_circle
from ..types import Point, TickReport
from .base import GameController

logger = logging.getLogger(__name__)


@dataclass
class Bubble:
    value: int
    center: Point  # screen space, normalized
    radius: float
    popped: bool = False


def layout_bubbles(options: List[int], row_y: float, radius: float) -> List[Bubble]:
    """Spread the options evenly across one row."""
    step = 1.0 / (len(options) + 1)
    return [Bubble(value, (step * (i + 1), row_y), radius) for i, value in enumerate(options)]


class BubblePop(GameController):
    name = "bubble_pop"
    roles = ("primary",)
    content_kind = "bubbles"

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.bubble_pop
        super().__init__(cfg, **kwargs)
        self.problem: Optional[BubbleProblem] = None
        self.bubbles: List[Bubble] = []
        self.last_answer: Optional[int] = None
        self.pointer: Optional[Point] = None

    def configure(self, **options) -> None:
        super().configure(**options)
        self.problem = None
        self.bubbles = []
        self.last_answer = None
        self.pointer = None

    def feedback_seconds(self) -> float:
        return self.game_cfg.feedback_s

    def on_content(self, payload: Any, now: float) -> None:
        if not 4 <= len(payload.options) <= 6 or payload.correct_answer not in payload.options:
            self.fail(f"Malformed bubble problem {payload.problem!r}")
            return
        self.problem = payload
        self.bubbles = layout_bubbles(payload.options, self.game_cfg.row_y, self.game_cfg.bubble_radius)

    def begin_round(self, now: float) -> None:
        self.last_answer = None
        self.timers.start("round", now, self.game_cfg.problem_time_s, self._time_up)

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        cursor = report.cursors.get("primary")
        self.pointer = mirror(cursor) if cursor is not None else None
        if self.pointer is None:
            return
        for bubble in self.bubbles:
            if bubble.popped or not point_in_circle(self.pointer, bubble.center, bubble.radius):
                continue
            bubble.popped = True
            self.last_answer = bubble.value
            correct = bubble.value == self.problem.correct_answer
            if correct:
                self.score += 1
            self.notify("pop")
            self.show_feedback("correct" if correct else "incorrect")
            return

    def _time_up(self) -> None:
        self.show_feedback("incorrect")

    def _after_feedback(self) -> None:
        self.bubbles = []
        super()._after_feedback()

    def view(self) -> Dict[str, Any]:
        return {
            "problem": self.problem.problem if self.problem else None,
            "bubbles": [
                {"value": b.value, "center": b.center, "radius": b.radius, "popped": b.popped}
                for b in self.bubbles
            ],
            "pointer": self.pointer,
            "last_answer": self.last_answer,
        }
