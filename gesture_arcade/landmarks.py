"""
Hand landmark indices and geometry helpers.

All coordinates are MediaPipe-normalized: x and y in [0..1] with y growing
downwards, z a relative depth.
"""
import math
from typing import Tuple

from .types import Landmark, Point

NUM_LANDMARKS = 21

WRIST = 0
THUMB_CMC = 1
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_DIP = 7
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_DIP = 11
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_DIP = 15
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_DIP = 19
PINKY_TIP = 20

# (mcp, pip, tip) for the four non-thumb fingers, index to pinky
FINGER_JOINTS = (
    (INDEX_MCP, INDEX_PIP, INDEX_TIP),
    (MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP),
    (RING_MCP, RING_PIP, RING_TIP),
    (PINKY_MCP, PINKY_PIP, PINKY_TIP),
)

FINGERTIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)

HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),
    (0, 5), (5, 6), (6, 7), (7, 8),
    (5, 9), (9, 10), (10, 11), (11, 12),
    (9, 13), (13, 14), (14, 15), (15, 16),
    (13, 17), (0, 17), (17, 18), (18, 19), (19, 20),
]


def distance(a: Landmark, b: Landmark, use_depth: bool = False) -> float:
    """
    Euclidean distance between two landmarks.

    Args:
        a: First landmark
        b: Second landmark
        use_depth: Include the z component

    Returns:
        Distance in normalized units
    """
    dz = (a.z - b.z) if use_depth else 0.0
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + dz ** 2)


def joint_angle(a: Landmark, b: Landmark, c: Landmark) -> float:
    """
    Interior angle at ``b`` formed by ``a-b-c``, in degrees within [0, 180].

    Computed as the difference of two atan2 calls, folded into [0, 180].
    """
    radians = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def mirror(point: Point) -> Point:
    """Flip a normalized point horizontally (the camera preview is mirrored)."""
    return (1.0 - point[0], point[1])


def to_pixels(point: Point, frame_wh: Tuple[int, int]) -> Tuple[int, int]:
    """Project a normalized point onto a frame of the given (width, height)."""
    width, height = frame_wh
    return (int(point[0] * width), int(point[1] * height))


def point_in_circle(point: Point, center: Point, radius: float) -> bool:
    """True when ``point`` lies strictly inside the circle."""
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return dx * dx + dy * dy < radius * radius
