"""
Ping Pong: keep the ball in play with a paddle that follows your index finger.

The court is the unit square in mirrored screen space, y growing downward,
with the paddle resting on the bottom edge. Holding an open palm toggles pause.
"""
import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..landmarks import mirror
from ..types import FingerCount, TickReport
from .base import GameController

logger = logging.getLogger(__name__)


@dataclass
class Ball:
    x: float
    y: float
    vx: float
    vy: float


def bounce_velocity(hit_offset: float, speed: float, max_angle_deg: float):
    """
    Velocity after a paddle hit.

    Args:
        hit_offset: Hit point relative to the paddle center, -1 (left edge) to 1 (right edge)
        speed: Magnitude of the outgoing velocity
        max_angle_deg: Deflection from vertical at the paddle edges

    Returns:
        (vx, vy) heading upward
    """
    offset = max(-1.0, min(1.0, hit_offset))
    angle = math.radians(offset * max_angle_deg)
    return math.sin(angle) * speed, -math.cos(angle) * speed


class PingPong(GameController):
    name = "ping_pong"
    roles = ("player",)
    countdown = True

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.ping_pong
        super().__init__(cfg, **kwargs)
        self.rng = random.Random()
        self.ball = self._serve()
        self.paddle_x = 0.5
        self.combo = 0
        self.paused = False

    def configure(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self.ball = self._serve()
        self.paddle_x = 0.5
        self.combo = 0
        self.paused = False

    def hold_seconds(self) -> float:
        return self.game_cfg.pause_hold_s

    def candidate(self, report: TickReport) -> Optional[bool]:
        gesture = report.role_gestures.get("player")
        if isinstance(gesture, FingerCount) and gesture.count == 5:
            return True
        return None

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        if report.confirmed is not None:
            self.paused = not self.paused
            self.notify("paused" if self.paused else "resumed")
            logger.info("Ping pong %s", "paused" if self.paused else "resumed")

        cursor = report.cursors.get("player")
        if cursor is not None:
            half = self.game_cfg.paddle_width / 2
            self.paddle_x = max(half, min(1.0 - half, mirror(cursor)[0]))

        if not self.paused:
            self.step(dt)

    def step(self, dt: float) -> None:
        """Advance the ball by ``dt`` seconds."""
        cfg = self.game_cfg
        ball = self.ball
        r = cfg.ball_radius
        ball.x += ball.vx * dt
        ball.y += ball.vy * dt

        if ball.x - r < 0.0:
            ball.vx = abs(ball.vx)
        elif ball.x + r > 1.0:
            ball.vx = -abs(ball.vx)
        if ball.y - r < 0.0:
            ball.vy = abs(ball.vy)

        half = cfg.paddle_width / 2
        if (ball.vy > 0 and ball.y + r >= 1.0 - cfg.paddle_height
                and ball.x + r >= self.paddle_x - half and ball.x - r <= self.paddle_x + half):
            speed = math.hypot(ball.vx, ball.vy)
            ball.vx, ball.vy = bounce_velocity((ball.x - self.paddle_x) / half, speed, cfg.max_bounce_deg)
            self.score += 1
            self.combo += 1
            self.notify("hit")
            return

        if ball.y + r > 1.0:
            self.combo = 0
            ball.vx = ball.vy = 0.0
            self.game_over()

    def _serve(self) -> Ball:
        speed = self.game_cfg.ball_speed
        direction = 1.0 if self.rng.random() > 0.5 else -1.0
        return Ball(0.5, 0.5, speed * direction, -speed)

    def view(self) -> Dict[str, Any]:
        return {
            "ball": (self.ball.x, self.ball.y),
            "paddle_x": self.paddle_x,
            "paddle_width": self.game_cfg.paddle_width,
            "combo": self.combo,
            "paused": self.paused,
            "high_score": self.high_score,
        }
