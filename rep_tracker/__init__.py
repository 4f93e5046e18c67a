"""
Rep Tracker Server
==================

Real-time repetition counting and form scoring from MediaPipe pose landmarks.

Modules:
    - analyzers: Angle geometry, exercise angle extraction and the rep counter
    - tracking: Person lock filter and tracking sessions
    - api: Flask API routes and endpoints
    - utils: Pose source, camera loop, session registry and voice output
"""

__version__ = "1.0.0"
__author__ = "Rep Tracker Team"
