"""
Exception types raised by the gesture arcade.
"""


class ArcadeError(Exception):
    """Base class for all gesture arcade errors."""


class AcquisitionError(ArcadeError):
    """Camera or hand-pose model could not be acquired."""


class CameraPermissionError(AcquisitionError):
    """Camera access was denied or the device could not be opened."""


class ModelLoadError(AcquisitionError):
    """The hand landmark model failed to load."""


class CaptureBusyError(ArcadeError):
    """Another game already owns the capture session."""

    def __init__(self, owner: str):
        super().__init__(f"Capture session is owned by {owner!r}")
        self.owner = owner


class ContentError(ArcadeError):
    """A content provider could not produce a result."""
