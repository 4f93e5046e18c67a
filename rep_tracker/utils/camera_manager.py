"""
Camera Manager Module
=====================

Thread-safe server-side camera loop feeding one tracking session.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

import cv2
import numpy as np

from ..analyzers.exercise_analyzer import ALIGNMENT_FEEDBACK, resolve_exercise
from ..tracking import TrackingSession
from .pose_source import PoseEstimator

logger = logging.getLogger(__name__)


def open_camera(
    index: Optional[int] = None, width: int = 640, height: int = 480, fps: int = 30
) -> cv2.VideoCapture:
    """
    Open a camera, auto-detecting one that provides non-black frames if no index is given.
    """
    if index is not None:
        cap = cv2.VideoCapture(index)
    else:
        cap = None
        for idx in [0, 1, 2]:
            candidate = cv2.VideoCapture(idx)
            if candidate.isOpened():
                ret, frame = candidate.read()
                if ret and frame is not None and np.mean(frame) > 10:
                    logger.info("Using camera %d", idx)
                    cap = candidate
                    break
            candidate.release()
        if cap is None:
            cap = cv2.VideoCapture(0)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    cap.set(cv2.CAP_PROP_FPS, fps)
    return cap


class CameraManager:
    """
    Thread-safe camera manager for single camera access.

    Captures frames on a background thread, runs pose detection and feeds
    the landmarks into its tracking session.

    Attributes:
        running (bool): Whether the capture loop is running
        session (TrackingSession): Session fed by the camera, None when stopped
    """

    def __init__(
        self,
        capture_factory: Callable[[], Any] = open_camera,
        estimator_factory: Optional[Callable[[], Any]] = None,
        voice=None,
        lock_radius: Optional[float] = None,
    ):
        """
        Initialize the camera manager.

        Args:
            capture_factory: Returns an opened cv2.VideoCapture-like object
            estimator_factory: Returns an object with detect(frame) and close()
            voice: Optional VoiceAssistant for spoken feedback
            lock_radius: Person lock radius for the camera session
        """
        self.capture_factory = capture_factory
        self.estimator_factory = estimator_factory or PoseEstimator
        self.voice = voice
        self.lock_radius = lock_radius
        self.lock = threading.Lock()
        self.frame_lock = threading.Lock()
        self.capture = None
        self.estimator = None
        self.session: Optional[TrackingSession] = None
        self._snapshot: Optional[Dict[str, Any]] = None
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self, exercise: str) -> bool:
        """
        Start tracking an exercise, switching exercise if already running.

        Returns:
            True if the camera loop is running, False otherwise
        """
        with self.lock:
            if self.running and self.session is not None:
                if resolve_exercise(self.session.exercise) != resolve_exercise(exercise):
                    with self.frame_lock:
                        self.session.exercise = exercise
                        self.session.reset()
                return True

            self._stop_internal()
            try:
                self.capture = self.capture_factory()
                if not self.capture.isOpened():
                    self.capture.release()
                    self.capture = None
                    return False
                self.estimator = self.estimator_factory()
            except Exception:
                logger.exception("Failed to start camera")
                self._release()
                return False

            self.session = TrackingSession(exercise, self.lock_radius)
            self.running = True
            self.thread = threading.Thread(target=self._capture_loop, daemon=True)
            self.thread.start()
            logger.info("Camera tracking started for %s", exercise)
            if self.voice:
                self.voice.speak(f"Starting {exercise} session. Good luck!", priority=True)
            return True

    def _release(self) -> None:
        if self.capture is not None:
            try:
                self.capture.release()
            except Exception:
                logger.debug("Camera release failed", exc_info=True)
            self.capture = None
        if self.estimator is not None:
            try:
                self.estimator.close()
            except Exception:
                logger.debug("Pose estimator close failed", exc_info=True)
            self.estimator = None

    def _stop_internal(self) -> Optional[Dict[str, Any]]:
        """Internal method to stop the loop (not thread-safe)."""
        self.running = False
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None
        self._release()
        with self.frame_lock:
            summary = self.session.summary() if self.session else None
            self.session = None
            self._snapshot = None
        return summary

    def stop(self) -> Optional[Dict[str, Any]]:
        """
        Stop the camera loop (thread-safe).

        Returns:
            Summary of the finished session, or None if nothing was running
        """
        with self.lock:
            summary = self._stop_internal()
        if summary is not None:
            logger.info("Camera tracking stopped after %d reps", summary["repsCompleted"])
            if self.voice:
                self.voice.speak("Session complete. Great work today!", priority=True)
        return summary

    def process(self, frame: np.ndarray) -> Dict[str, Any]:
        """Run one captured frame through pose detection and the session."""
        landmarks = self.estimator.detect(frame)
        with self.frame_lock:
            previous_reps = self.session.rep_count
            snapshot = self.session.process_frame(landmarks)
            self._snapshot = snapshot
        if self.voice:
            if snapshot["reps"] > previous_reps:
                self.voice.speak(str(snapshot["reps"]), priority=True)
            elif snapshot["feedback"] in ALIGNMENT_FEEDBACK.values():
                self.voice.speak(snapshot["feedback"])
        return snapshot

    def _capture_loop(self) -> None:
        """Background capture loop for continuous frame acquisition."""
        while self.running and self.capture is not None and self.capture.isOpened():
            try:
                ret, frame = self.capture.read()
                if not ret or frame is None:
                    time.sleep(0.01)
                    continue
                self.process(frame)
            except Exception:
                logger.exception("Capture error")
                break
        self.running = False

    def latest_snapshot(self) -> Optional[Dict[str, Any]]:
        """Get the session state after the latest processed frame."""
        with self.frame_lock:
            return dict(self._snapshot) if self._snapshot is not None else None

    def is_running(self) -> bool:
        """Check if the camera loop is currently running."""
        return self.running

    def get_exercise(self) -> Optional[str]:
        """Get the exercise being tracked."""
        return self.session.exercise if self.session else None

    def lock_person(self) -> bool:
        """Lock the camera session onto the person currently in view."""
        with self.frame_lock:
            if self.session is None:
                return False
            return self.session.lock()

    def unlock_person(self) -> None:
        with self.frame_lock:
            if self.session is not None:
                self.session.unlock()
