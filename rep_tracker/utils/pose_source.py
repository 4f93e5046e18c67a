"""
Pose Source Module
==================

MediaPipe Pose adapter that turns camera frames into landmark sets.

MediaPipe is imported when an estimator is created, so the analyzers and
the landmark API run without it installed.
"""

import logging
from typing import Any, List, Optional

import cv2
import numpy as np

from ..analyzers import Landmark

logger = logging.getLogger(__name__)


def results_to_landmarks(results: Any) -> Optional[List[Landmark]]:
    """
    Convert a MediaPipe Pose result into a list of landmarks.

    Returns:
        List of Landmark, or None if no person was detected
    """
    pose_landmarks = getattr(results, "pose_landmarks", None)
    if not pose_landmarks:
        return None
    return [
        Landmark(float(lm.x), float(lm.y), float(getattr(lm, "visibility", 0.0) or 0.0))
        for lm in pose_landmarks.landmark
    ]


class PoseEstimator:
    """
    MediaPipe Pose wrapper producing landmark sets from BGR frames.

    Usage:
        estimator = PoseEstimator()
        landmarks = estimator.detect(frame)
        estimator.close()
    """

    def __init__(self, min_detection_confidence: float = 0.5, min_tracking_confidence: float = 0.5):
        import mediapipe as mp

        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def detect(self, frame: np.ndarray) -> Optional[List[Landmark]]:
        """
        Run pose detection on one frame.

        Args:
            frame: BGR image

        Returns:
            Landmark list, or None if no person was detected
        """
        image = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image.flags.writeable = False
        results = self.pose.process(image)
        return results_to_landmarks(results)

    def close(self) -> None:
        self.pose.close()
