"""
Exercise Analyzer Module
========================

Extracts the joint angles that drive rep counting for each exercise.

Each analysis returns a primary "effort" angle (the one compared against
the exercise thresholds) and an optional secondary "alignment" angle used
for form checks. Left and right sides are averaged because a single side
is noisier against a 2D camera projection.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from .geometry import PoseLandmark as PL, angle_at, get_landmark

DEFAULT_EXERCISE = "squat"


@dataclass(frozen=True)
class ExerciseThresholds:
    """
    Angle thresholds for one exercise, in degrees.

    Attributes:
        down (float): Below this the "down" phase is entered
        up (float): Above this the "up" phase is entered (rep completion)
        deep (float): Angle representing full depth
        alignment_floor (float): Secondary angle below this is a form fault,
            None when the exercise has no alignment check
    """

    down: float
    up: float
    deep: float
    alignment_floor: Optional[float] = None


EXERCISE_CONFIG: Dict[str, ExerciseThresholds] = {
    "squat": ExerciseThresholds(down=90, up=160, deep=65, alignment_floor=140),
    "pushup": ExerciseThresholds(down=90, up=150, deep=70, alignment_floor=150),
    "lunge": ExerciseThresholds(down=100, up=160, deep=80),
}

ALIGNMENT_FEEDBACK = {
    "squat": "Keep your back straight!",
    "pushup": "Keep your body level!",
}


@dataclass(frozen=True)
class AngleReading:
    """Joint angles extracted from one frame."""

    primary: float
    secondary: Optional[float] = None


def _exercise_key(exercise_id: Any) -> str:
    return str(exercise_id or "").strip().lower()


def is_supported(exercise_id: Any) -> bool:
    """Whether an identifier names a configured exercise."""
    return _exercise_key(exercise_id) in EXERCISE_CONFIG


def resolve_exercise(exercise_id: Any) -> str:
    """
    Map a free-form exercise identifier to a configured exercise.

    Unknown identifiers fall back to squat. Callers that own a session
    log the fallback, see RepCounter.
    """
    key = _exercise_key(exercise_id)
    if key in EXERCISE_CONFIG:
        return key
    return DEFAULT_EXERCISE


def get_thresholds(exercise_id: Any) -> ExerciseThresholds:
    """Get thresholds for an exercise, with the squat fallback."""
    return EXERCISE_CONFIG[resolve_exercise(exercise_id)]


def _side_angle(landmarks, first: PL, vertex: PL, last: PL) -> float:
    return angle_at(
        get_landmark(landmarks, first),
        get_landmark(landmarks, vertex),
        get_landmark(landmarks, last),
    )


def _both_sides(landmarks, left: tuple, right: tuple) -> tuple:
    return _side_angle(landmarks, *left), _side_angle(landmarks, *right)


def analyze_squat(landmarks: Sequence[Any]) -> AngleReading:
    """Knee angle (hip-knee-ankle) and back angle (shoulder-hip-knee)."""
    knee_l, knee_r = _both_sides(
        landmarks,
        (PL.LEFT_HIP, PL.LEFT_KNEE, PL.LEFT_ANKLE),
        (PL.RIGHT_HIP, PL.RIGHT_KNEE, PL.RIGHT_ANKLE),
    )
    back_l, back_r = _both_sides(
        landmarks,
        (PL.LEFT_SHOULDER, PL.LEFT_HIP, PL.LEFT_KNEE),
        (PL.RIGHT_SHOULDER, PL.RIGHT_HIP, PL.RIGHT_KNEE),
    )
    return AngleReading(primary=(knee_l + knee_r) / 2, secondary=(back_l + back_r) / 2)


def analyze_pushup(landmarks: Sequence[Any]) -> AngleReading:
    """Elbow angle (shoulder-elbow-wrist) and body alignment (shoulder-hip-knee)."""
    elbow_l, elbow_r = _both_sides(
        landmarks,
        (PL.LEFT_SHOULDER, PL.LEFT_ELBOW, PL.LEFT_WRIST),
        (PL.RIGHT_SHOULDER, PL.RIGHT_ELBOW, PL.RIGHT_WRIST),
    )
    body_l, body_r = _both_sides(
        landmarks,
        (PL.LEFT_SHOULDER, PL.LEFT_HIP, PL.LEFT_KNEE),
        (PL.RIGHT_SHOULDER, PL.RIGHT_HIP, PL.RIGHT_KNEE),
    )
    return AngleReading(primary=(elbow_l + elbow_r) / 2, secondary=(body_l + body_r) / 2)


def analyze_lunge(landmarks: Sequence[Any]) -> AngleReading:
    """Knee angle of the more-bent leg, taken to be the forward working leg."""
    knee_l, knee_r = _both_sides(
        landmarks,
        (PL.LEFT_HIP, PL.LEFT_KNEE, PL.LEFT_ANKLE),
        (PL.RIGHT_HIP, PL.RIGHT_KNEE, PL.RIGHT_ANKLE),
    )
    return AngleReading(primary=min(knee_l, knee_r))


ANALYZERS: Dict[str, Callable[[Sequence[Any]], AngleReading]] = {
    "squat": analyze_squat,
    "pushup": analyze_pushup,
    "lunge": analyze_lunge,
}


def analyze(landmarks: Sequence[Any], exercise_id: Any) -> AngleReading:
    """
    Extract the angles for an exercise from one frame of landmarks.

    Args:
        landmarks: Landmark set for the frame
        exercise_id: Exercise identifier, unknown values analyzed as squat

    Returns:
        AngleReading with the primary and (optional) secondary angle
    """
    return ANALYZERS[resolve_exercise(exercise_id)](landmarks)
