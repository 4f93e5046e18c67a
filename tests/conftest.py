"""
Shared fixtures: synthetic landmark sets with chosen joint angles.
"""

import math
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from rep_tracker.analyzers.geometry import NUM_LANDMARKS, Landmark, PoseLandmark as PL


def place(vertex, reference, angle, length):
    """Point at `length` from vertex so the angle reference-vertex-point equals `angle`."""
    base = math.atan2(reference[1] - vertex[1], reference[0] - vertex[0])
    theta = base + math.radians(angle)
    return (vertex[0] + length * math.cos(theta), vertex[1] + length * math.sin(theta))


def _frame(points, shift):
    dx, dy = shift
    filler = points[PL.LEFT_HIP]
    frame = []
    for idx in range(NUM_LANDMARKS):
        x, y = points.get(idx, filler)
        frame.append(Landmark(x + dx, y + dy, 0.9))
    return frame


def build_squat_frame(knee_angle, back_angle=175.0, right_knee_angle=None, shift=(0.0, 0.0)):
    """Side-on standing figure with the given knee and back angles."""
    if right_knee_angle is None:
        right_knee_angle = knee_angle
    points = {}
    for side, offset, knee_deg in (("LEFT", 0.0, knee_angle), ("RIGHT", 0.02, right_knee_angle)):
        hip = (0.5 + offset, 0.5)
        knee = (0.5 + offset, 0.7)
        ankle = place(knee, hip, knee_deg, 0.2)
        shoulder = place(hip, knee, back_angle, 0.25)
        elbow = (shoulder[0], shoulder[1] + 0.12)
        wrist = (elbow[0], elbow[1] + 0.12)
        points[PL[f"{side}_HIP"]] = hip
        points[PL[f"{side}_KNEE"]] = knee
        points[PL[f"{side}_ANKLE"]] = ankle
        points[PL[f"{side}_SHOULDER"]] = shoulder
        points[PL[f"{side}_ELBOW"]] = elbow
        points[PL[f"{side}_WRIST"]] = wrist
    points[PL.NOSE] = (points[PL.LEFT_SHOULDER][0], points[PL.LEFT_SHOULDER][1] - 0.1)
    return _frame(points, shift)


def build_pushup_frame(elbow_angle, body_angle=175.0, shift=(0.0, 0.0)):
    """Plank-position figure with the given elbow angle and body alignment."""
    points = {}
    for side, offset in (("LEFT", 0.0), ("RIGHT", 0.02)):
        shoulder = (0.3, 0.5 + offset)
        hip = (0.6, 0.5 + offset)
        knee = place(hip, shoulder, body_angle, 0.2)
        ankle = (knee[0] + 0.15, knee[1])
        elbow = (0.3, 0.65 + offset)
        wrist = place(elbow, shoulder, elbow_angle, 0.15)
        points[PL[f"{side}_SHOULDER"]] = shoulder
        points[PL[f"{side}_HIP"]] = hip
        points[PL[f"{side}_KNEE"]] = knee
        points[PL[f"{side}_ANKLE"]] = ankle
        points[PL[f"{side}_ELBOW"]] = elbow
        points[PL[f"{side}_WRIST"]] = wrist
    points[PL.NOSE] = (0.25, 0.5)
    return _frame(points, shift)


def build_uniform_frame(x, y):
    """Every landmark at the same point."""
    return [Landmark(x, y, 0.9) for _ in range(NUM_LANDMARKS)]


@pytest.fixture
def squat_frame():
    return build_squat_frame


@pytest.fixture
def pushup_frame():
    return build_pushup_frame


@pytest.fixture
def uniform_frame():
    return build_uniform_frame
