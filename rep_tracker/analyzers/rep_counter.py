"""
Rep Counter Module
==================

Phase state machine that turns per-frame joint angles into completed
repetitions, per-rep accuracy scores and coaching feedback.

Classes:
    Phase: Movement phase (IDLE, DOWN, UP)
    RepCounter: Per-session rep counting state machine

Usage:
    counter = RepCounter()
    for landmarks in frames:
        counter.process_frame(landmarks, "squat")
    print(counter.rep_count, counter.accuracy, counter.feedback)
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .exercise_analyzer import ALIGNMENT_FEEDBACK, analyze, get_thresholds, is_supported, resolve_exercise
from .geometry import to_landmarks

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Position in the movement cycle."""

    IDLE = "IDLE"
    DOWN = "DOWN"
    UP = "UP"


def depth_percent(angle: float, up: float, deep: float) -> float:
    """
    Range-of-motion proxy: where the angle sits between up (0%) and deep (100%).

    This is a heuristic for rep completeness, not a biomechanical measurement.
    """
    return max(0.0, min(100.0, (up - angle) / (up - deep) * 100))


class RepCounter:
    """
    Rep counting state machine for one tracking session.

    Attributes:
        phase (Phase): Current movement phase
        rep_count (int): Number of completed reps
        rep_accuracies (list): Accuracy score of each completed rep
        feedback (str): Latest coaching message
    """

    DEFAULT_FEEDBACK = "Get into position..."

    # Accuracy deductions per rep
    ALIGNMENT_PENALTY = 20
    SHALLOW_PENALTY = 20
    MIN_DEPTH_PERCENT = 30

    # Within this many degrees above the down threshold, hint to go lower
    NEAR_DOWN_MARGIN = 20

    def __init__(self):
        """Initialize the counter in the IDLE phase."""
        self._fallback_logged: Optional[str] = None
        self.reset()

    def reset(self) -> None:
        """Reset all counters and state."""
        self.phase = Phase.IDLE
        self.rep_count = 0
        self.rep_accuracies: List[int] = []
        self.feedback = self.DEFAULT_FEEDBACK
        self._down_alignment_fault = False

    @property
    def accuracy(self) -> int:
        """Rounded mean of per-rep accuracy, 100 before the first rep."""
        if not self.rep_accuracies:
            return 100
        return round(sum(self.rep_accuracies) / len(self.rep_accuracies))

    def _resolve(self, exercise_id: Any) -> str:
        exercise = resolve_exercise(exercise_id)
        if not is_supported(exercise_id) and exercise_id != self._fallback_logged:
            # Logged again only when the unknown identifier changes
            self._fallback_logged = exercise_id
            logger.warning("Unsupported exercise %r, falling back to %s", exercise_id, exercise)
        return exercise

    def process_frame(self, landmarks: Optional[Sequence[Any]], exercise_id: Any) -> None:
        """
        Advance the state machine by one frame.

        Feedback is rewritten on every processed frame: transition messages
        first, then the alignment warning, then the intermediate-angle hints.

        Args:
            landmarks: Landmark set for the frame, or None when no person is detected
            exercise_id: Exercise identifier, unknown values are treated as squat
        """
        landmarks = to_landmarks(landmarks)
        if not landmarks:
            return

        exercise = self._resolve(exercise_id)
        config = get_thresholds(exercise)
        reading = analyze(landmarks, exercise)
        angle = reading.primary

        alignment_fault = (
            config.alignment_floor is not None
            and reading.secondary is not None
            and reading.secondary < config.alignment_floor
        )
        fault_feedback = ALIGNMENT_FEEDBACK.get(exercise) if alignment_fault else None

        if self.phase == Phase.IDLE:
            if angle > config.up:
                self.phase = Phase.UP
                self.feedback = f"Ready! Start your {exercise}s"
        elif self.phase == Phase.UP:
            if angle < config.down:
                self.phase = Phase.DOWN
                self._down_alignment_fault = alignment_fault
                self.feedback = fault_feedback or "Lower! Now push up"
                return
        else:
            if angle > config.up:
                self._complete_rep(angle, config)
                return
            if alignment_fault:
                self._down_alignment_fault = True

        if fault_feedback:
            self.feedback = fault_feedback
        elif config.down <= angle <= config.up:
            if angle < config.down + self.NEAR_DOWN_MARGIN:
                self.feedback = "Go a bit lower"
            else:
                self.feedback = "Moving..."

    def _complete_rep(self, angle: float, config) -> None:
        """Score the rep finished by this frame's angle and move to UP."""
        score = 100
        if self._down_alignment_fault:
            score -= self.ALIGNMENT_PENALTY
        depth = depth_percent(angle, config.up, config.deep)
        if depth < self.MIN_DEPTH_PERCENT:
            score -= self.SHALLOW_PENALTY
        score = max(0, min(100, score))

        self.phase = Phase.UP
        self.rep_count += 1
        self.rep_accuracies.append(score)
        self.feedback = "Good rep! Keep going!"
        self._down_alignment_fault = False
        logger.debug("Rep %d completed (accuracy %d, depth %.0f%%)", self.rep_count, score, depth)

    def snapshot(self) -> Dict[str, Any]:
        """Current counter state as a plain dict."""
        return {
            "reps": self.rep_count,
            "accuracy": self.accuracy,
            "phase": self.phase.value,
            "feedback": self.feedback,
        }
