"""
Desktop arcade: play one game with the local webcam in an OpenCV window.
"""
import argparse
import asyncio
import logging
import time
from typing import Any, Dict, Optional

import cv2
import numpy as np

from .capture import ReadWatchdog
from .config import Cfg, load_config
from .content import MockContentProvider
from .errors import ModelLoadError
from .games import GAMES, AcquisitionFailed, GamePhase, GameReport
from .landmarks import to_pixels
from .runner import GameRunner
from .tracker import HandsTracker, draw_hands
from .types import FrameResult

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)
GREEN = (0, 200, 0)
RED = (0, 0, 255)
YELLOW = (0, 220, 255)


def _text(frame, text: str, y: int, color=WHITE, scale: float = 0.6) -> None:
    cv2.putText(frame, text, (10, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2)


def draw_view(frame: np.ndarray, game: str, view: Dict[str, Any]) -> None:
    """Draw game objects onto the mirrored display frame."""
    height, width = frame.shape[:2]
    wh = (width, height)

    for bubble in view.get("bubbles", []):
        if bubble["popped"]:
            continue
        center = to_pixels(bubble["center"], wh)
        radius = int(bubble["radius"] * width)
        cv2.circle(frame, center, radius, YELLOW, 2)
        cv2.putText(frame, str(bubble["value"]), (center[0] - 12, center[1] + 8),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.8, YELLOW, 2)

    if game == "air_piano":
        lanes = len(view["fingers"])
        zone_y = int(view["tap_zone"] * height)
        cv2.line(frame, (0, zone_y), (width, zone_y), WHITE, 1)
        for lane, y in enumerate(view["fingers"]):
            x0, x1 = lane * width // lanes, (lane + 1) * width // lanes
            color = GREEN if lane == view["target"] else WHITE
            cv2.rectangle(frame, (x0, zone_y), (x1, height - 1), color, 2 if lane == view["target"] else 1)
            if y is not None:
                cv2.circle(frame, ((x0 + x1) // 2, int(y * height)), 10, color, -1)

    if game == "ping_pong":
        ball = to_pixels(view["ball"], wh)
        cv2.circle(frame, ball, 10, YELLOW, -1)
        paddle = to_pixels((view["paddle_x"], 1.0), wh)
        half = int(view["paddle_width"] * width / 2)
        cv2.rectangle(frame, (paddle[0] - half, height - 15), (paddle[0] + half, height - 1), GREEN, -1)
        if view["paused"]:
            _text(frame, "PAUSED", height // 2, YELLOW, 1.2)

    pointer = view.get("pointer")
    if pointer is not None:
        cv2.circle(frame, to_pixels(pointer, wh), 8, RED, -1)


def render(frame: np.ndarray, hands: Optional[FrameResult], report: GameReport, runner: GameRunner, cfg: Cfg) -> np.ndarray:
    game = runner.game
    if hands is not None and cfg.display.show_landmarks:
        # landmarks are in camera space; draw before mirroring
        frame = draw_hands(frame, hands)
    frame = cv2.flip(frame, 1)

    if game.name == "sketch":
        ink = game.canvas.image
        ink = cv2.resize(ink, (frame.shape[1], frame.shape[0]))
        mask = ink < 255
        frame[mask] = ink[mask]

    draw_view(frame, game.name, report.view)

    _text(frame, f"{game.name}  {report.phase.value}  score {report.score}", 30)
    if report.countdown is not None:
        _text(frame, f"Get ready: {report.countdown:.0f}", 60, YELLOW)
    if report.time_left is not None:
        _text(frame, f"Time: {report.time_left:.0f}s", 60)
    if report.phase is GamePhase.READY_CHECK:
        _text(frame, "Show ten fingers to start", 60, YELLOW)
    prompt = report.view.get("problem") or report.view.get("question") or report.view.get("shape")
    if prompt:
        _text(frame, str(prompt), 90, YELLOW)
    for i, option in enumerate(report.view.get("options", []), start=1):
        _text(frame, f"{i}: {option}", 90 + 25 * i, WHITE, 0.5)
    if report.tick is not None and report.tick.hold_progress > 0:
        _text(frame, f"Holding {report.tick.hold_candidate}: {report.tick.hold_progress:.0%}", frame.shape[0] - 50, GREEN)
    if report.feedback:
        _text(frame, report.feedback, frame.shape[0] // 2, GREEN if report.feedback == "correct" else RED, 1.0)
    if report.error:
        _text(frame, f"Error: {report.error}", frame.shape[0] - 50, RED)
    if report.phase is GamePhase.GAME_OVER:
        _text(frame, f"Game over! High score {game.high_score}. 'r' to restart", frame.shape[0] // 2, RED, 0.8)
    _text(frame, "q: quit  r: restart  s: submit drawing", frame.shape[0] - 20, WHITE, 0.5)
    return frame


class ArcadeApp:
    """Main application class for the desktop arcade."""

    def __init__(self, cfg: Cfg, game: str, options: Dict[str, Any], seed: Optional[int] = None):
        self.cfg = cfg
        self.tracker = HandsTracker(cfg.mediapipe)
        self.runner = GameRunner(GAMES[game](cfg), MockContentProvider(seed=seed))
        self.options = options
        self.watchdog = ReadWatchdog(cfg.camera.max_missed_reads)

    async def run(self):
        """Run the main application loop."""
        game = self.runner.game
        logger.info("Starting %s", game.name)
        if not self.runner.start(time.monotonic(), **self.options):
            logger.error("Could not start %s: %s", game.name, game.error)
            return

        blank = np.zeros((self.cfg.camera.height, self.cfg.camera.width, 3), dtype=np.uint8)
        try:
            while True:
                now = time.monotonic()
                frame = None
                if game.capture is not None:
                    frame = game.capture.read()
                    if self.watchdog.update(frame):
                        game.post(AcquisitionFailed(
                            f"Camera delivered no frames for {self.watchdog.max_missed} reads"
                        ))
                hands = None
                if frame is not None:
                    hands = self.tracker.process(frame, int(now * 1000))
                else:
                    frame = blank.copy()

                report = self.runner.tick(hands, now)
                for notice in report.notices:
                    logger.info("%s: %s", game.name, notice)

                cv2.imshow(self.cfg.display.window_name, render(frame, hands, report, self.runner, self.cfg))
                # let content requests make progress
                await asyncio.sleep(0)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                if key == ord('s') and hasattr(game, "submit"):
                    game.submit()
                if key == ord('r') and game.phase in (GamePhase.IDLE, GamePhase.GAME_OVER):
                    self.watchdog.reset()
                    self.runner.start(time.monotonic(), **self.options)
        finally:
            await self.runner.stop()
            self.tracker.close()
            cv2.destroyAllWindows()


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hand-gesture arcade")
    parser.add_argument("game", choices=sorted(GAMES), help="Game to play")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--seed", type=int, default=None, help="Seed for generated content")
    parser.add_argument("--mode", choices=["easy", "hard"], default=None, help="Air piano difficulty")
    parser.add_argument("--drawing-hand", choices=["Left", "Right"], default=None, help="Sketch drawing hand")
    parser.add_argument("--subjects", nargs="*", default=None, help="Quiz subjects")
    return parser.parse_args(argv)


def _game_options(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if args.game == "air_piano":
        options["mode"] = args.mode or "easy"
        options["seed"] = args.seed
    elif args.game == "ping_pong":
        options["seed"] = args.seed
    elif args.game == "sketch" and args.drawing_hand:
        options["drawing_hand"] = args.drawing_hand
    elif args.game == "quiz_quest" and args.subjects:
        options["subjects"] = args.subjects
    return options


async def main(argv=None):
    """Entry point for the application."""
    args = _parse_args(argv)
    cfg = load_config(args.config)
    logging.basicConfig(level=getattr(logging, cfg.logging.level))

    try:
        app = ArcadeApp(cfg, args.game, _game_options(args), seed=args.seed)
    except ModelLoadError as e:
        logger.error("%s", e)
        return
    try:
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
