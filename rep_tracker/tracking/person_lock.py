"""
Person Lock Module
==================

Keeps tracking attached to one subject once they have been locked.

While unlocked every frame passes through and its descriptor is recorded
so it can be captured as a lock target. While locked, frames whose
landmark centroid lies too far from the target are replaced with "no
person" so a second person entering the frame cannot hijack tracking.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..analyzers.geometry import to_landmarks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockTarget:
    """
    Spatial descriptor of a subject.

    Attributes:
        cx (float): Mean x of all landmarks
        cy (float): Mean y of all landmarks
        size (float): Normalized bounding-box area. Captured but not used
            for matching.
    """

    cx: float
    cy: float
    size: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LockTarget":
        return cls(
            cx=float(data["cx"]),
            cy=float(data["cy"]),
            size=float(data.get("size", 0.0)),
        )


@dataclass(frozen=True)
class LockResult:
    """Outcome of filtering one frame."""

    landmarks: Optional[list]
    lost: bool
    descriptor: Optional[LockTarget]


def compute_descriptor(landmarks: Optional[Sequence[Any]]) -> Optional[LockTarget]:
    """
    Compute centroid and bounding-box area of a landmark set.

    Returns:
        LockTarget, or None when the set is absent
    """
    points = to_landmarks(landmarks)
    if not points:
        return None
    xs = np.array([p.x for p in points])
    ys = np.array([p.y for p in points])
    size = (xs.max() - xs.min()) * (ys.max() - ys.min())
    return LockTarget(cx=float(xs.mean()), cy=float(ys.mean()), size=float(size))


class PersonLock:
    """
    Centroid-distance filter for one tracking session.

    Attributes:
        target (LockTarget): Locked subject, None while unlocked
        last_descriptor (LockTarget): Descriptor of the latest unlocked frame
    """

    # Max centroid distance, in normalized frame units, to accept a frame
    LOCK_RADIUS = 0.35

    def __init__(self, radius: Optional[float] = None):
        self.radius = self.LOCK_RADIUS if radius is None else radius
        self.target: Optional[LockTarget] = None
        self.last_descriptor: Optional[LockTarget] = None

    @property
    def is_locked(self) -> bool:
        return self.target is not None

    def lock(self, descriptor: Optional[LockTarget] = None) -> bool:
        """
        Lock onto a subject.

        Args:
            descriptor: Target to lock, defaults to the last captured descriptor

        Returns:
            True if locked, False when there is nothing to lock onto
        """
        target = descriptor or self.last_descriptor
        if target is None:
            return False
        self.target = target
        logger.info("Person locked at (%.2f, %.2f)", target.cx, target.cy)
        return True

    def unlock(self) -> None:
        """Return to pass-through mode."""
        if self.target is not None:
            logger.info("Person unlocked")
        self.target = None

    def reset(self) -> None:
        self.target = None
        self.last_descriptor = None

    def matches(self, descriptor: LockTarget) -> bool:
        """Check whether a descriptor lies within the lock radius of the target."""
        if self.target is None:
            return True
        distance = math.hypot(descriptor.cx - self.target.cx, descriptor.cy - self.target.cy)
        return distance < self.radius

    def filter(self, landmarks: Optional[Sequence[Any]]) -> LockResult:
        """
        Filter one frame.

        Returns:
            LockResult with the landmarks to pass downstream (None when
            rejected or absent) and whether the locked person is lost
        """
        points = to_landmarks(landmarks)
        descriptor = compute_descriptor(points)

        if not self.is_locked:
            if descriptor is not None:
                self.last_descriptor = descriptor
            return LockResult(points, False, descriptor)

        if descriptor is None or not self.matches(descriptor):
            return LockResult(None, True, descriptor)
        return LockResult(points, False, descriptor)
