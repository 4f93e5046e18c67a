"""
Angle Geometry Module
=====================

Joint angle math and landmark access for MediaPipe Pose output.

Functions:
    angle_at: Interior angle at a vertex formed by three points
    get_landmark: Safe accessor into a landmark set by index
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Sequence

import numpy as np


class PoseLandmark(IntEnum):
    """MediaPipe Pose landmark indices used by the analyzers."""

    NOSE = 0
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28


# Number of landmarks in a full MediaPipe Pose result
NUM_LANDMARKS = 33


@dataclass(frozen=True)
class Landmark:
    """
    Normalized 2D body keypoint.

    Attributes:
        x (float): Horizontal position in [0, 1]
        y (float): Vertical position in [0, 1]
        visibility (float): Detection confidence in [0, 1]
    """

    x: float = 0.0
    y: float = 0.0
    visibility: float = 0.0

    @classmethod
    def coerce(cls, value: Any) -> "Landmark":
        """
        Build a landmark from a Landmark, mapping, attribute object or (x, y) pair.

        Anything that cannot be read as a point becomes the zero landmark.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        try:
            if isinstance(value, dict):
                return cls(
                    float(value.get("x", 0.0)),
                    float(value.get("y", 0.0)),
                    float(value.get("visibility") or 0.0),
                )
            if hasattr(value, "x") and hasattr(value, "y"):
                return cls(
                    float(value.x),
                    float(value.y),
                    float(getattr(value, "visibility", 0.0) or 0.0),
                )
            if len(value) >= 2:
                visibility = float(value[2]) if len(value) > 2 else 0.0
                return cls(float(value[0]), float(value[1]), visibility)
        except (TypeError, ValueError):
            pass
        return cls()


def _xy(point: Any) -> np.ndarray:
    lm = Landmark.coerce(point)
    return np.array([lm.x, lm.y])


def angle_at(a: Any, b: Any, c: Any) -> float:
    """
    Calculate the angle at vertex b formed by rays b->a and b->c.

    Args:
        a: First point
        b: Middle point (vertex)
        c: Third point

    Returns:
        Angle in degrees, always within [0, 180]
    """
    a = _xy(a)
    b = _xy(b)
    c = _xy(c)
    radians = np.arctan2(c[1] - b[1], c[0] - b[0]) - np.arctan2(
        a[1] - b[1], a[0] - b[0]
    )
    angle = np.abs(radians * 180.0 / np.pi)
    if angle > 180.0:
        angle = 360 - angle
    return float(angle)


def get_landmark(landmarks: Optional[Sequence[Any]], index: int) -> Landmark:
    """
    Get a landmark by index.

    Returns the zero-valued, zero-visibility landmark when the set is
    absent, the index is out of range or the entry is malformed.
    """
    if not landmarks:
        return Landmark()
    try:
        entry = landmarks[int(index)]
    except (IndexError, TypeError, ValueError):
        return Landmark()
    return Landmark.coerce(entry)


def to_landmarks(landmarks: Optional[Sequence[Any]]) -> Optional[list]:
    """Normalize any landmark-like sequence into a list of Landmark, or None when absent."""
    if landmarks is None:
        return None
    try:
        items = list(landmarks)
    except TypeError:
        return None
    if not items:
        return None
    return [Landmark.coerce(item) for item in items]
