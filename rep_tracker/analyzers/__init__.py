"""
Exercise Analyzers Module
=========================

Joint angle geometry, per-exercise angle extraction and the rep counting
state machine.
"""

from .geometry import Landmark, PoseLandmark, angle_at, get_landmark, to_landmarks
from .exercise_analyzer import (
    EXERCISE_CONFIG,
    AngleReading,
    ExerciseThresholds,
    analyze,
    get_thresholds,
    is_supported,
    resolve_exercise,
)
from .rep_counter import Phase, RepCounter, depth_percent

__all__ = [
    "Landmark",
    "PoseLandmark",
    "angle_at",
    "get_landmark",
    "to_landmarks",
    "EXERCISE_CONFIG",
    "AngleReading",
    "ExerciseThresholds",
    "analyze",
    "get_thresholds",
    "is_supported",
    "resolve_exercise",
    "Phase",
    "RepCounter",
    "depth_percent",
]
