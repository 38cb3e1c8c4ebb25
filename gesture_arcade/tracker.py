"""
Hand landmark detection using the MediaPipe Tasks Hand Landmarker.

The model file is downloaded on first use.
"""
import logging
import os
import urllib.request
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision as mp_vision

from .config import MediaPipeConfig
from .errors import ModelLoadError
from .landmarks import HAND_CONNECTIONS, to_pixels
from .types import FrameResult, Hand, Landmark

logger = logging.getLogger(__name__)


def _ensure_model(path: str, url: str) -> None:
    if os.path.exists(path):
        return
    logger.info("Downloading hand landmark model from %s", url)
    try:
        urllib.request.urlretrieve(url, path)
    except OSError as e:
        raise ModelLoadError(f"Could not download hand landmark model: {e}") from e
    logger.info("Model saved to %s", path)


class HandsTracker:
    """Hand landmark tracker producing one FrameResult per video frame."""

    def __init__(self, cfg: MediaPipeConfig):
        """
        Initialize the hands tracker.

        Args:
            cfg: MediaPipe section of the configuration

        Raises:
            ModelLoadError: the model could not be fetched or loaded
        """
        _ensure_model(cfg.model_path, cfg.model_url)
        options = mp_vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=cfg.model_path),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_hands=cfg.max_num_hands,
            min_hand_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence,
        )
        try:
            self._landmarker = mp_vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            raise ModelLoadError(f"Failed to initialize hand landmark model: {e}") from e
        self._last_ts = -1

    def process(self, frame_bgr: np.ndarray, timestamp_ms: int) -> FrameResult:
        """
        Process a frame and return all detected hands.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonic frame timestamp in milliseconds

        Returns:
            FrameResult with 0..max_num_hands hands
        """
        # the VIDEO running mode rejects non-increasing timestamps
        timestamp_ms = max(timestamp_ms, self._last_ts + 1)
        self._last_ts = timestamp_ms

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self._landmarker.detect_for_video(image, timestamp_ms)

        hands = []
        for lm_list, handedness_list in zip(result.hand_landmarks, result.handedness):
            category = handedness_list[0] if handedness_list else None
            hands.append(Hand(
                landmarks=[Landmark(lm.x, lm.y, lm.z) for lm in lm_list],
                handedness=category.category_name if category else None,
                score=category.score if category else 0.0,
            ))
        return FrameResult(hands=hands, timestamp_ms=timestamp_ms)

    def close(self) -> None:
        self._landmarker.close()


def draw_hands(frame: np.ndarray, result: Optional[FrameResult]) -> np.ndarray:
    """
    Draw hand skeletons on the frame.

    Args:
        frame: Input frame
        result: Hands to draw, normalized coordinates

    Returns:
        Frame with landmarks drawn
    """
    if result is None:
        return frame
    height, width = frame.shape[:2]
    for hand in result.hands:
        points = [to_pixels((lm.x, lm.y), (width, height)) for lm in hand.landmarks]
        for start, end in HAND_CONNECTIONS:
            if start < len(points) and end < len(points):
                cv2.line(frame, points[start], points[end], (0, 220, 0), 2)
        for pt in points:
            cv2.circle(frame, pt, 3, (255, 255, 255), -1)
    return frame
