"""
Unit tests for angle geometry and landmark access.
"""

import itertools
from types import SimpleNamespace

import pytest

from rep_tracker.analyzers import Landmark, angle_at, get_landmark, to_landmarks


class TestAngleAt:
    """Test suite for angle_at."""

    def test_colinear_points_give_straight_angle(self):
        assert angle_at((0, 0), (1, 0), (2, 0)) == pytest.approx(180.0)

    def test_same_ray_gives_zero(self):
        assert angle_at((2, 0), (0, 0), (1, 0)) == pytest.approx(0.0)

    def test_right_angle(self):
        assert angle_at((1, 0), (0, 0), (0, 1)) == pytest.approx(90.0)

    def test_reflex_result_is_reflected(self):
        # Raw atan2 difference here exceeds 180 degrees
        angle = angle_at((-1, -0.1), (0, 0), (-1, 0.1))
        assert angle == pytest.approx(2 * 5.710593, abs=1e-4)

    def test_range_and_symmetry(self):
        points = [(0.1, 0.2), (0.9, 0.1), (0.5, 0.5), (0.3, 0.8), (0.7, 0.95)]
        for a, b, c in itertools.permutations(points, 3):
            angle = angle_at(a, b, c)
            assert 0.0 <= angle <= 180.0
            assert angle == pytest.approx(angle_at(c, b, a))

    def test_coincident_points_do_not_raise(self):
        angle = angle_at((0.5, 0.5), (0.5, 0.5), (0.5, 0.5))
        assert 0.0 <= angle <= 180.0

    def test_accepts_landmark_like_inputs(self):
        a = Landmark(1.0, 0.0, 0.9)
        b = {"x": 0.0, "y": 0.0, "visibility": 0.8}
        c = SimpleNamespace(x=0.0, y=1.0, visibility=0.7)
        assert angle_at(a, b, c) == pytest.approx(90.0)


class TestGetLandmark:
    """Test suite for the landmark accessor."""

    def test_absent_set_gives_zero_landmark(self):
        assert get_landmark(None, 11) == Landmark(0.0, 0.0, 0.0)
        assert get_landmark([], 11) == Landmark(0.0, 0.0, 0.0)

    def test_out_of_range_gives_zero_landmark(self):
        assert get_landmark([Landmark(0.5, 0.5, 1.0)], 25) == Landmark()

    def test_reads_mappings(self):
        landmarks = [{"x": 0.25, "y": 0.75, "visibility": 0.5}]
        assert get_landmark(landmarks, 0) == Landmark(0.25, 0.75, 0.5)

    def test_missing_visibility_defaults_to_zero(self):
        landmarks = [SimpleNamespace(x=0.1, y=0.2)]
        assert get_landmark(landmarks, 0) == Landmark(0.1, 0.2, 0.0)

    def test_malformed_entry_gives_zero_landmark(self):
        landmarks = [None, {"x": "left", "y": 0.2}, "??"]
        for idx in range(3):
            assert get_landmark(landmarks, idx) == Landmark()

    def test_to_landmarks_treats_empty_as_absent(self):
        assert to_landmarks(None) is None
        assert to_landmarks([]) is None
        assert to_landmarks([(0.1, 0.2)]) == [Landmark(0.1, 0.2, 0.0)]
