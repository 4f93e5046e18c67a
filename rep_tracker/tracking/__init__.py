"""
Tracking Module
===============

Person lock filtering and per-subject tracking sessions.
"""

from .person_lock import LockResult, LockTarget, PersonLock, compute_descriptor
from .session import TrackingSession, summarize

__all__ = [
    "LockResult",
    "LockTarget",
    "PersonLock",
    "compute_descriptor",
    "TrackingSession",
    "summarize",
]
