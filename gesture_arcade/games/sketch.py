"""
Sketch and Score: draw the requested shape in the air, then have it judged.

One hand draws (pointing = pencil, pinching = eraser); the other hand sets
the eraser size with its thumb-index spread. Ten fingers clears the canvas.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import cv2
import numpy as np

from ..classifier import AngleStrategy, GestureClassifier
from ..content import ContentRequest, DrawingVerdict, ShapePrompt
from ..landmarks import FINGER_JOINTS, INDEX_TIP, THUMB_TIP, distance, joint_angle, mirror, to_pixels
from ..tracking import Role, opposite
from ..types import Hand, Pinching, Point, Pointing, TenFingers, TickReport
from .base import GameController, GamePhase

logger = logging.getLogger(__name__)

PENCIL = "pencil"
ERASER = "eraser"

INK = (0, 0, 0)
PAPER = (255, 255, 255)


class Canvas:
    """White BGR raster the player draws on, in mirrored screen space."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.image = np.full((height, width, 3), 255, dtype=np.uint8)
        self._last: Optional[Tuple[int, int]] = None

    def stroke(self, point: Point, width: float, erase: bool = False) -> None:
        """Extend the current stroke to ``point`` (normalized screen coordinates)."""
        px = to_pixels(point, (self.width, self.height))
        color = PAPER if erase else INK
        thickness = max(1, int(round(width)))
        if self._last is None:
            cv2.circle(self.image, px, max(1, thickness // 2), color, -1, cv2.LINE_AA)
        else:
            cv2.line(self.image, self._last, px, color, thickness, cv2.LINE_AA)
        self._last = px

    def lift(self) -> None:
        self._last = None

    def clear(self) -> None:
        self.image[:] = 255
        self._last = None

    @property
    def blank(self) -> bool:
        return not np.any(self.image < 255)

    def to_png(self) -> bytes:
        ok, buf = cv2.imencode(".png", self.image)
        if not ok:
            raise RuntimeError("PNG encoding failed")
        return buf.tobytes()


def others_curled(hand: Hand, curled_deg: float) -> bool:
    """Middle, ring and pinky all bent below ``curled_deg`` at the PIP joint."""
    lm = hand.landmarks
    return all(joint_angle(lm[mcp], lm[pip], lm[tip]) < curled_deg for mcp, pip, tip in FINGER_JOINTS[1:])


def eraser_size(spread: float, lo: float, hi: float, span: float) -> float:
    """Map a thumb-index spread onto an eraser diameter in [lo, hi]."""
    size = lo + (spread / span) * (hi - lo)
    return max(lo, min(hi, size))


class SketchAndScore(GameController):
    name = "sketch"
    roles = (Role("drawing", "Right"), Role("gesture", "Left"))
    content_kind = "shape"
    ready_check = True
    ready_every_round = True
    countdown = True

    def __init__(self, cfg, **kwargs):
        self.game_cfg = cfg.games.sketch
        super().__init__(cfg, **kwargs)
        # pointing is judged by joint angles, so a tilted drawing hand still draws
        self.pointer_classifier = GestureClassifier(
            AngleStrategy(cfg.classifier.extended_angle_deg),
            cfg.classifier.pinch_threshold,
            cfg.classifier.pinch_use_depth,
        )
        # the pencil also needs the other fingers clearly folded
        self.curled_deg = cfg.classifier.curled_angle_deg
        self.canvas = Canvas(self.game_cfg.canvas_width, self.game_cfg.canvas_height)
        self.drawing_hand = "Right"
        self.shape: Optional[str] = None
        self.tool: Optional[str] = None
        self.eraser = (self.game_cfg.eraser_min + self.game_cfg.eraser_max) / 2
        self.pointer: Optional[Point] = None
        self.verdict: Optional[DrawingVerdict] = None
        self._ten_fingers = False

    def configure(self, drawing_hand: str = "Right") -> None:
        if drawing_hand not in ("Left", "Right"):
            raise ValueError(f"drawing_hand must be 'Left' or 'Right', got {drawing_hand!r}")
        self.drawing_hand = drawing_hand
        self.roles = (Role("drawing", drawing_hand), Role("gesture", opposite(drawing_hand)))
        self.canvas.clear()
        self.shape = None
        self.tool = None
        self.verdict = None
        self.pointer = None
        self._ten_fingers = False

    def on_content(self, payload: Any, now: float) -> None:
        if isinstance(payload, ShapePrompt):
            self.shape = payload.shape
            self.verdict = None
        elif isinstance(payload, DrawingVerdict):
            self.verdict = payload
            if payload.is_match:
                self.score += 1
            self.show_feedback(payload.feedback)
        else:
            raise TypeError(f"Unexpected sketch content {payload!r}")

    def on_content_failed(self, request: ContentRequest, error: str, now: float) -> None:
        if request.kind == "evaluate":
            # keep the drawing and let the player resubmit
            logger.warning("Drawing evaluation failed: %s", error)
            self.notify("evaluation_failed")
            self.resume()
            return
        super().on_content_failed(request, error, now)

    def begin_round(self, now: float) -> None:
        self.canvas.clear()
        self.tool = None
        self._ten_fingers = False

    def submit(self) -> bool:
        """Send the canvas off for judging. Only possible while drawing."""
        if self.phase is not GamePhase.ACTIVE or self.shape is None:
            return False
        self.canvas.lift()
        self.request_content(ContentRequest(
            kind="evaluate", score=self.score, shape=self.shape, drawing_png=self.canvas.to_png(),
        ))
        return True

    def on_active(self, report: TickReport, now: float, dt: float) -> None:
        ten = isinstance(report.gesture, TenFingers)
        if ten:
            if not self._ten_fingers:
                self.canvas.clear()
                self.notify("canvas_cleared")
            self._ten_fingers = True
            self.pointer = None
            return
        self._ten_fingers = False

        self._draw(report.role_hands.get("drawing"), report.cursors.get("drawing"))

        gesture_hand = report.role_hands.get("gesture")
        if gesture_hand is not None and self.tool == ERASER:
            lm = gesture_hand.landmarks
            if len(lm) > INDEX_TIP:
                spread = distance(lm[THUMB_TIP], lm[INDEX_TIP])
                self.eraser = eraser_size(
                    spread, self.game_cfg.eraser_min, self.game_cfg.eraser_max, self.game_cfg.eraser_span,
                )

    def _draw(self, hand: Optional[Hand], cursor: Optional[Point]) -> None:
        if hand is None or cursor is None:
            self.pointer = None
            self.canvas.lift()
            return
        gesture = self.pointer_classifier.recognize(self.pointer_classifier.classify(hand))
        self.pointer = mirror(cursor)
        if isinstance(gesture, Pinching):
            self.tool = ERASER
            self.canvas.stroke(self.pointer, self.eraser, erase=True)
        elif isinstance(gesture, Pointing) and others_curled(hand, self.curled_deg):
            self.tool = PENCIL
            self.canvas.stroke(self.pointer, self.game_cfg.pencil_width)
        else:
            self.canvas.lift()

    def view(self) -> Dict[str, Any]:
        return {
            "shape": self.shape,
            "drawing_hand": self.drawing_hand,
            "tool": self.tool,
            "eraser_size": self.eraser,
            "pointer": self.pointer,
            "verdict": self.verdict.feedback if self.verdict else None,
        }
