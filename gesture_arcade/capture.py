"""
Camera capture sessions and the single-owner guard around them.
"""
import logging
from typing import Any, Callable, Optional

import cv2

from .config import CameraConfig
from .errors import CameraPermissionError, CaptureBusyError
from .types import CaptureProto

logger = logging.getLogger(__name__)


class CameraCapture:
    """Local webcam opened through OpenCV."""

    def __init__(self, cfg: CameraConfig):
        self.cap = cv2.VideoCapture(cfg.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, cfg.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cfg.height)
        self.cap.set(cv2.CAP_PROP_FPS, cfg.fps)

        if not self.cap.isOpened():
            self.cap.release()
            raise CameraPermissionError(f"Failed to open camera {cfg.index}")

    def read(self) -> Optional[Any]:
        # unmirrored; games mirror landmark x themselves when projecting to screen
        ret, frame = self.cap.read()
        if not ret:
            return None
        return frame

    def release(self) -> None:
        if self.cap.isOpened():
            self.cap.release()


class ReadWatchdog:
    """
    Counts consecutive failed reads from a capture session.

    ``update`` returns True once, on the read that reaches ``max_missed``
    misses in a row; a successful read starts the count over.
    """

    def __init__(self, max_missed: int):
        if max_missed < 1:
            raise ValueError(f"max_missed must be at least 1, got {max_missed}")
        self.max_missed = max_missed
        self.missed = 0

    def update(self, frame: Optional[Any]) -> bool:
        if frame is not None:
            self.missed = 0
            return False
        self.missed += 1
        return self.missed == self.max_missed

    def reset(self) -> None:
        self.missed = 0


class RemoteCapture:
    """Placeholder session for frames streamed in by a remote client."""

    def __init__(self):
        self.released = False

    def read(self) -> Optional[Any]:
        return None

    def release(self) -> None:
        self.released = True


class CaptureManager:
    """
    Grants one capture session at a time to a single owner.

    A second owner asking while the session is held gets ``CaptureBusyError``;
    the owner must release before anyone else can acquire.
    """

    def __init__(self):
        self._owner: Optional[str] = None
        self._capture: Optional[CaptureProto] = None

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    @property
    def busy(self) -> bool:
        return self._owner is not None

    def acquire(self, owner: str, opener: Callable[[], CaptureProto]) -> CaptureProto:
        """
        Open a capture session for ``owner``.

        Raises:
            CaptureBusyError: another owner holds the session
            AcquisitionError: the opener failed (propagated unchanged)
        """
        if self._owner is not None:
            if self._owner != owner:
                raise CaptureBusyError(self._owner)
            return self._capture
        capture = opener()
        self._owner, self._capture = owner, capture
        logger.info("Capture acquired by %s", owner)
        return capture

    def release(self, owner: str) -> bool:
        """Release the session if ``owner`` holds it. Returns True when released."""
        if self._owner is None or self._owner != owner:
            return False
        capture = self._capture
        self._owner, self._capture = None, None
        try:
            capture.release()
        finally:
            logger.info("Capture released by %s", owner)
        return True


# The one local camera of this process.
capture_manager = CaptureManager()
