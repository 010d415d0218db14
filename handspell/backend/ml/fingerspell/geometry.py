from __future__ import annotations

import math
from typing import Any, NamedTuple

import numpy as np

# -------------------------
# 21-point hand layout
# -------------------------

WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

NUM_KEYPOINTS = 21

# (mcp, tip) per non-thumb finger
FINGERS = {
    "index": (INDEX_MCP, INDEX_TIP),
    "middle": (MIDDLE_MCP, MIDDLE_TIP),
    "ring": (RING_MCP, RING_TIP),
    "pinky": (PINKY_MCP, PINKY_TIP),
}


class InvalidFrame(ValueError):
    """Raised for hand frames the classifier cannot reason about."""


class Keypoint(NamedTuple):
    x: float
    y: float


def _point_xy(p: Any) -> tuple:
    """Accepts (x, y[, z]) sequences and landmark-like objects with .x/.y."""
    if hasattr(p, "x") and hasattr(p, "y"):
        return p.x, p.y
    try:
        return p[0], p[1]
    except (TypeError, IndexError, KeyError) as e:
        raise InvalidFrame(f"keypoint {p!r} has no x/y coordinates") from e


class HandFrame:
    """
    The 21 keypoints of one detected hand in one video frame.

    Coordinates are only compared as ratios of the hand size, so pixel and
    normalized (0..1) inputs both work.
    """

    __slots__ = ("points",)

    def __init__(self, points: Any):
        if isinstance(points, HandFrame):
            self.points = points.points
            return
        self.points = to_array(points)

    def __len__(self) -> int:
        return NUM_KEYPOINTS

    def __getitem__(self, i: int) -> Keypoint:
        x, y = self.points[i]
        return Keypoint(float(x), float(y))

    def dist(self, i: int, j: int) -> float:
        a, b = self.points[i], self.points[j]
        return math.hypot(a[0] - b[0], a[1] - b[1])

    @property
    def wrist_x(self) -> float:
        return float(self.points[WRIST][0])

    @property
    def hand_size(self) -> float:
        """Wrist -> middle MCP, the unit every threshold is expressed in."""
        return self.dist(WRIST, MIDDLE_MCP)

    def scaled(self, factor: float) -> "HandFrame":
        return HandFrame(self.points * factor)

    def translated(self, dx: float, dy: float) -> "HandFrame":
        return HandFrame(self.points + np.array([dx, dy]))

    def tolist(self) -> list:
        return self.points.tolist()


def to_array(points: Any) -> np.ndarray:
    """Validate raw keypoints and return a (21, 2) float array."""
    if isinstance(points, np.ndarray):
        arr = points
    else:
        try:
            pts = list(points)
        except TypeError as e:
            raise InvalidFrame("hand frame must be a sequence of keypoints") from e
        if len(pts) != NUM_KEYPOINTS:
            raise InvalidFrame(f"expected {NUM_KEYPOINTS} keypoints, got {len(pts)}")
        try:
            arr = np.array([_point_xy(p) for p in pts], dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidFrame(f"non-numeric keypoint coordinates: {e}") from e

    if arr.ndim != 2 or arr.shape[0] != NUM_KEYPOINTS or arr.shape[1] < 2:
        raise InvalidFrame(f"expected keypoints of shape ({NUM_KEYPOINTS}, 2), got {arr.shape}")

    try:
        arr = np.asarray(arr[:, :2], dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidFrame(f"non-numeric keypoint coordinates: {e}") from e
    if not np.isfinite(arr).all():
        raise InvalidFrame("keypoint coordinates must be finite")
    return arr


def as_frame(hand: Any) -> HandFrame:
    return hand if isinstance(hand, HandFrame) else HandFrame(hand)
