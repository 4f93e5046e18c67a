"""
Session Registry Module
=======================

Thread-safe registry of tracking sessions for frames arriving over HTTP.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..tracking import TrackingSession
from .pose_source import PoseEstimator

logger = logging.getLogger(__name__)


class _Entry:
    """A session, the lock serializing its frames and its pose estimator."""

    def __init__(self, session: TrackingSession):
        self.session = session
        self.lock = threading.Lock()
        self.estimator = None


class SessionRegistry:
    """
    Thread-safe store of tracking sessions keyed by session id.

    Sessions are created lazily. Access to one session is serialized so
    frames for the same subject are processed strictly one at a time,
    while different sessions proceed independently. Each session gets its
    own pose estimator, so tracking and smoothing state never mixes frames
    from different clients.

    Usage:
        registry = SessionRegistry()
        with registry.session("abc", "squat") as session:
            session.process_frame(landmarks)
        summary = registry.discard("abc").summary()
    """

    def __init__(
        self,
        default_exercise: str = "squat",
        lock_radius: Optional[float] = None,
        estimator_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Initialize an empty registry.

        Args:
            default_exercise: Exercise for sessions created without one
            lock_radius: Person lock radius for new sessions
            estimator_factory: Builds a pose estimator, defaults to PoseEstimator
        """
        self.default_exercise = default_exercise
        self.lock_radius = lock_radius
        self.estimator_factory = estimator_factory or PoseEstimator
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _get_or_create(self, session_id: str, exercise: Optional[str]) -> _Entry:
        with self._lock:
            if session_id not in self._entries:
                self._entries[session_id] = _Entry(
                    TrackingSession(exercise or self.default_exercise, self.lock_radius)
                )
            return self._entries[session_id]

    @contextmanager
    def session(self, session_id: str, exercise: Optional[str] = None) -> Iterator[TrackingSession]:
        """
        Get or create a session and hold its lock for the duration of the block.

        Args:
            session_id: Client-chosen session identifier
            exercise: Exercise for a newly created session
        """
        entry = self._get_or_create(session_id, exercise)
        with entry.lock:
            yield entry.session

    def detect(self, session_id: str, frame, exercise: Optional[str] = None) -> Dict[str, Any]:
        """
        Detect the pose in a frame with the session's estimator and process it.

        Detection and processing run under the session lock, in frame order.

        Returns:
            Snapshot of the session state after the frame
        """
        entry = self._get_or_create(session_id, exercise)
        with entry.lock:
            if entry.estimator is None:
                entry.estimator = self.estimator_factory()
            landmarks = entry.estimator.detect(frame)
            return entry.session.process_frame(landmarks, exercise)

    def exists(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._entries

    def reset(self, session_id: str) -> None:
        """Reset a session's counters and lock."""
        with self.session(session_id) as session:
            session.reset()

    def discard(self, session_id: str) -> Optional[TrackingSession]:
        """
        Remove a session and close its estimator.

        Waits for a frame in progress on the session to finish.

        Returns:
            The removed session, or None if it did not exist
        """
        with self._lock:
            entry = self._entries.pop(session_id, None)
        if entry is None:
            return None
        with entry.lock:
            if entry.estimator is not None:
                try:
                    entry.estimator.close()
                except Exception:
                    logger.debug("Pose estimator close failed", exc_info=True)
                entry.estimator = None
        return entry.session

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._entries)
