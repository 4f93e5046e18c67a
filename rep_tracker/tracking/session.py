"""
Tracking Session Module
=======================

One subject's workout: person lock, rep counter and session timing.

Usage:
    session = TrackingSession("pushup")
    for landmarks in frames:
        state = session.process_frame(landmarks)
    payload = session.summary()
"""

import time
from typing import Any, Dict, Optional, Sequence

from ..analyzers import RepCounter, resolve_exercise
from .person_lock import LockTarget, PersonLock, compute_descriptor

EXERCISE_LABELS = {
    "squat": "Squat",
    "pushup": "Push-up",
    "lunge": "Lunge",
}


def summarize(exercise: str, accuracy: int, reps: int) -> str:
    """Short end-of-session message for the given accuracy and rep count."""
    label = EXERCISE_LABELS.get(exercise, exercise)
    if accuracy >= 90:
        return f"Excellent {label} form! {reps} perfect reps."
    if accuracy >= 75:
        return f"Good work! {reps} {label}s with solid form."
    return f"{reps} {label}s completed. Keep practicing your form!"


class TrackingSession:
    """
    Tracking state for one subject.

    Attributes:
        exercise (str): Exercise identifier used when a frame names none
        counter (RepCounter): Rep counting state machine
        person_lock (PersonLock): Spatial identity filter
        person_lost (bool): Whether the last frame was rejected by the lock
    """

    def __init__(self, exercise: str = "squat", lock_radius: Optional[float] = None, clock=time.monotonic):
        self.exercise = exercise
        self.counter = RepCounter()
        self.person_lock = PersonLock(lock_radius)
        self.person_lost = False
        self._clock = clock
        self._started = clock()

    @property
    def rep_count(self) -> int:
        return self.counter.rep_count

    @property
    def accuracy(self) -> int:
        return self.counter.accuracy

    @property
    def feedback(self) -> str:
        return self.counter.feedback

    @property
    def phase(self):
        return self.counter.phase

    @property
    def duration(self) -> int:
        """Whole seconds since the session started or was reset."""
        return int(self._clock() - self._started)

    def process_frame(self, landmarks: Optional[Sequence[Any]], exercise_id: Any = None) -> Dict[str, Any]:
        """
        Run one frame through the person lock and the rep counter.

        Args:
            landmarks: Landmark set for the frame, or None when no person is detected
            exercise_id: Exercise for this frame, defaults to the session exercise

        Returns:
            Snapshot of the session state after the frame
        """
        if exercise_id is not None:
            self.exercise = exercise_id
        result = self.person_lock.filter(landmarks)
        self.person_lost = result.lost
        self.counter.process_frame(result.landmarks, self.exercise)
        return self.snapshot(result.descriptor)

    def capture_descriptor(self, landmarks: Optional[Sequence[Any]]) -> Optional[LockTarget]:
        return compute_descriptor(landmarks)

    def lock(self, descriptor: Optional[LockTarget] = None) -> bool:
        return self.person_lock.lock(descriptor)

    def unlock(self) -> None:
        self.person_lock.unlock()
        self.person_lost = False

    def reset(self) -> None:
        """Start over: counter, lock and duration clock."""
        self.counter.reset()
        self.person_lock.reset()
        self.person_lost = False
        self._started = self._clock()

    def snapshot(self, descriptor: Optional[LockTarget] = None) -> Dict[str, Any]:
        state = self.counter.snapshot()
        state.update(
            {
                "exercise": resolve_exercise(self.exercise),
                "person_lost": self.person_lost,
                "locked": self.person_lock.is_locked,
                "descriptor": descriptor.to_dict() if descriptor else None,
            }
        )
        return state

    def summary(self) -> Dict[str, Any]:
        """Session payload handed to the persistence API."""
        exercise = resolve_exercise(self.exercise)
        return {
            "exerciseType": exercise,
            "repsCompleted": self.rep_count,
            "accuracyScore": self.accuracy,
            "duration": self.duration,
            "feedbackSummary": summarize(exercise, self.accuracy, self.rep_count),
        }
