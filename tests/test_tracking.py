"""
Unit tests for the person lock filter and tracking sessions.
"""

import pytest

from rep_tracker.analyzers import Landmark, Phase
from rep_tracker.tracking import LockTarget, PersonLock, TrackingSession, compute_descriptor, summarize


class TestDescriptor:
    """Test suite for descriptor computation."""

    def test_centroid_and_size(self):
        landmarks = [Landmark(0.2, 0.4), Landmark(0.6, 0.4), Landmark(0.4, 0.8)]
        descriptor = compute_descriptor(landmarks)
        assert descriptor.cx == pytest.approx(0.4)
        assert descriptor.cy == pytest.approx(1.6 / 3)
        assert descriptor.size == pytest.approx(0.4 * 0.4)

    def test_absent_set_has_no_descriptor(self):
        assert compute_descriptor(None) is None
        assert compute_descriptor([]) is None

    def test_round_trip_dict(self):
        target = LockTarget(0.5, 0.25, 0.1)
        assert LockTarget.from_dict(target.to_dict()) == target
        assert LockTarget.from_dict({"cx": 0.5, "cy": 0.5}).size == 0.0


class TestPersonLock:
    """Test suite for PersonLock."""

    def test_unlocked_passes_everything(self, uniform_frame):
        lock = PersonLock()
        for x in (0.1, 0.5, 0.9):
            result = lock.filter(uniform_frame(x, 0.5))
            assert result.landmarks is not None
            assert not result.lost
        assert lock.last_descriptor.cx == pytest.approx(0.9)

    def test_lock_uses_last_descriptor(self, uniform_frame):
        lock = PersonLock()
        assert not lock.lock()
        lock.filter(uniform_frame(0.5, 0.5))
        assert lock.lock()
        assert lock.is_locked
        assert lock.target.cx == pytest.approx(0.5)

    def test_far_frame_is_rejected(self, uniform_frame):
        lock = PersonLock()
        lock.lock(LockTarget(0.5, 0.5, 0.1))
        result = lock.filter(uniform_frame(0.9, 0.5))
        assert result.lost
        assert result.landmarks is None
        assert result.descriptor.cx == pytest.approx(0.9)

    def test_near_frame_is_accepted(self, uniform_frame):
        lock = PersonLock()
        lock.lock(LockTarget(0.5, 0.5, 0.1))
        result = lock.filter(uniform_frame(0.7, 0.6))
        assert not result.lost
        assert result.landmarks is not None

    def test_distance_equal_to_radius_is_rejected(self, uniform_frame):
        lock = PersonLock(radius=0.25)
        lock.lock(LockTarget(0.5, 0.5))
        assert lock.filter(uniform_frame(0.75, 0.5)).lost

    def test_size_is_not_used_for_matching(self, uniform_frame):
        lock = PersonLock()
        lock.lock(LockTarget(0.5, 0.5, size=0.9))
        assert not lock.filter(uniform_frame(0.5, 0.5)).lost

    def test_absent_frame_while_locked_is_lost(self):
        lock = PersonLock()
        lock.lock(LockTarget(0.5, 0.5))
        result = lock.filter(None)
        assert result.lost
        assert result.landmarks is None

    def test_unlock_restores_pass_through(self, uniform_frame):
        lock = PersonLock()
        lock.lock(LockTarget(0.5, 0.5, 0.1))
        lock.unlock()
        for x, y in ((0.0, 0.0), (0.95, 0.95), (0.5, 0.1)):
            result = lock.filter(uniform_frame(x, y))
            assert not result.lost
            assert result.landmarks is not None


class TestTrackingSession:
    """Test suite for TrackingSession."""

    def test_squat_sequence(self, squat_frame):
        session = TrackingSession("squat")
        for angle in (170, 80, 170):
            state = session.process_frame(squat_frame(angle))
        assert state["reps"] == 1
        assert state["phase"] == "UP"
        assert state["person_lost"] is False
        assert state["descriptor"] is not None

    def test_locked_session_ignores_other_person(self, squat_frame):
        session = TrackingSession("squat")
        session.process_frame(squat_frame(170))
        assert session.lock()

        far = (0.4, 0.0)
        state = session.process_frame(squat_frame(80, shift=far))
        assert state["person_lost"] is True
        assert state["phase"] == "UP"

        session.process_frame(squat_frame(80, shift=(0.05, 0.0)))
        state = session.process_frame(squat_frame(170))
        assert state["person_lost"] is False
        assert state["reps"] == 1

    def test_lost_frames_do_not_advance(self, squat_frame):
        session = TrackingSession("squat")
        session.process_frame(squat_frame(170))
        session.lock(session.capture_descriptor(squat_frame(170)))
        for angle in (80, 170, 80, 170):
            session.process_frame(squat_frame(angle, shift=(0.0, 0.5)))
        assert session.rep_count == 0
        assert session.phase == Phase.UP

    def test_unlock_clears_lost_flag(self, squat_frame):
        session = TrackingSession("squat")
        session.lock(LockTarget(0.1, 0.1))
        session.process_frame(squat_frame(170))
        assert session.person_lost
        session.unlock()
        assert not session.person_lost
        state = session.process_frame(squat_frame(170))
        assert state["phase"] == "UP"

    def test_frame_exercise_overrides_default(self, pushup_frame):
        session = TrackingSession("squat")
        state = session.process_frame(pushup_frame(165), "pushup")
        assert state["exercise"] == "pushup"
        assert session.exercise == "pushup"

    def test_reset(self, squat_frame):
        session = TrackingSession("squat")
        for angle in (170, 80, 170):
            session.process_frame(squat_frame(angle))
        session.lock()
        session.reset()
        assert session.rep_count == 0
        assert session.phase == Phase.IDLE
        assert not session.person_lock.is_locked
        assert session.person_lock.last_descriptor is None

    def test_summary(self, squat_frame):
        now = [100.0]
        session = TrackingSession("pushup", clock=lambda: now[0])
        now[0] = 165.7
        summary = session.summary()
        assert summary == {
            "exerciseType": "pushup",
            "repsCompleted": 0,
            "accuracyScore": 100,
            "duration": 65,
            "feedbackSummary": "Excellent Push-up form! 0 perfect reps.",
        }

    def test_summary_for_unknown_exercise(self):
        assert TrackingSession("burpee").summary()["exerciseType"] == "squat"

    @pytest.mark.parametrize("accuracy,expected", [
        (95, "Excellent Squat form! 5 perfect reps."),
        (80, "Good work! 5 Squats with solid form."),
        (60, "5 Squats completed. Keep practicing your form!"),
    ])
    def test_summarize(self, accuracy, expected):
        assert summarize("squat", accuracy, 5) == expected
