"""
Air Piano: tap the highlighted lane with the matching finger before time runs out.

Lanes map to the index, middle, ring and pinky fingertips of one sticky hand.
A fingertip moving down into the tap zone hits its lane.
"""
import logging
import random
from typing import Any, Dict, List, Optional

from ..landmarks import INDEX_TIP, MIDDLE_TIP, PINKY_TIP, RING_TIP
from ..smoothing import SmootherBank
from ..types import TickReport
from .base import GameController

logger = logging.getLogger(__name__)

LANE_TIPS = (INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)
MODES = ("easy", "hard")


class AirPiano(GameController):
    name = "air_piano"
    roles = ("player",)
    countdown = True

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.air_piano
        super().__init__(cfg, **kwargs)
        if not 1 <= self.game_cfg.lanes <= len(LANE_TIPS):
            raise ValueError(f"air_piano.lanes must be 1..{len(LANE_TIPS)}, got {self.game_cfg.lanes}")
        self.lanes = self.game_cfg.lanes
        self.mode = "easy"
        self.rng = random.Random()
        self.lane_y = SmootherBank(cfg.smoothing.alpha)
        self.target = 0
        self.mistakes = 0
        self.hit: Optional[int] = None
        self.fingers: List[Optional[float]] = [None] * self.lanes
        self._last_y: List[Optional[float]] = [None] * self.lanes
        self._last_hit: List[Optional[float]] = [None] * self.lanes

    def configure(self, mode: str = "easy", seed: Optional[int] = None) -> None:
        mode = mode.lower()
        if mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
        self.mode = mode
        self.rng = random.Random(seed)
        self.mistakes = 0
        self.hit = None
        self.lane_y.reset()
        self.fingers = [None] * self.lanes
        self._last_y = [None] * self.lanes
        self._last_hit = [None] * self.lanes

    @property
    def target_seconds(self) -> float:
        return self.game_cfg.hard_s if self.mode == "hard" else self.game_cfg.easy_s

    def begin_round(self, now: float) -> None:
        self._next_target(now)

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        hand = report.role_hands.get("player")
        if hand is None or len(hand.landmarks) <= PINKY_TIP:
            self.lane_y.reset()
            self.fingers = [None] * self.lanes
            self._last_y = [None] * self.lanes
            return

        for lane in range(self.lanes):
            tip = hand.landmarks[LANE_TIPS[lane]]
            _, y = self.lane_y.update(lane, self.lane_center(lane), tip.y)
            self.fingers[lane] = y

            last_y = self._last_y[lane]
            self._last_y[lane] = y
            moving_down = last_y is None or y > last_y
            if not moving_down or y <= self.game_cfg.tap_zone:
                continue
            last_hit = self._last_hit[lane]
            if last_hit is not None and now - last_hit <= self.game_cfg.hit_cooldown_s:
                continue
            self._last_hit[lane] = now
            self.hit = lane

            if lane == self.target:
                self.score += 1
                self.mistakes = 0
                self.notify(f"note:{lane}")
                self._next_target(now)
            else:
                self.notify("wrong")
                if self._mistake():
                    return

    def lane_center(self, lane: int) -> float:
        return (lane + 0.5) / self.lanes

    def _next_target(self, now: float) -> None:
        self.target = self.rng.randrange(self.lanes)
        self.timers.start("round", now, self.target_seconds, self._missed)

    def _missed(self) -> None:
        self.notify("missed")
        if not self._mistake():
            self._next_target(self._now)

    def _mistake(self) -> bool:
        """Count a mistake. Returns True when it ended the game."""
        self.score -= 1
        self.mistakes += 1
        if self.mistakes >= self.game_cfg.max_mistakes:
            self.game_over()
            return True
        return False

    def view(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "target": self.target,
            "mistakes": self.mistakes,
            "fingers": list(self.fingers),
            "tap_zone": self.game_cfg.tap_zone,
            "last_hit": self.hit,
            "high_score": self.high_score,
        }
