"""Tests for the runtime projection."""

from datetime import datetime, timedelta

from speednet.core.runtime import find_active_rotation, find_next_rotation, project
from speednet.models.networking_session import NetworkingSession
from tests.factories import build_rotation, build_signup

T0 = datetime(2026, 3, 1, 18, 0)


def _rotations():
    return [
        build_rotation(1, T0),
        build_rotation(2, T0 + timedelta(seconds=120)),
        build_rotation(3, T0 + timedelta(seconds=240)),
    ]


class TestActiveAndNext:
    """Test rotation lookup at a given instant."""

    def test_boundary_belongs_to_the_later_rotation(self):
        """Intervals are half-open: at 18:02 rotation 1 is over and 2 is running."""
        rotations = _rotations()
        now = T0 + timedelta(seconds=120)

        assert find_active_rotation(rotations, now).rotation_number == 2
        assert find_next_rotation(rotations, now).rotation_number == 3

    def test_before_the_session(self):
        rotations = _rotations()
        now = T0 - timedelta(seconds=10)

        assert find_active_rotation(rotations, now) is None
        assert find_next_rotation(rotations, now).rotation_number == 1

    def test_after_the_session(self):
        rotations = _rotations()
        now = T0 + timedelta(minutes=10)

        assert find_active_rotation(rotations, now) is None
        assert find_next_rotation(rotations, now) is None

    def test_untimed_rotations_never_match(self):
        rotations = [build_rotation(1, None), build_rotation(2, None)]

        assert find_active_rotation(rotations, T0) is None
        assert find_next_rotation(rotations, T0) is None


class TestProject:
    """Test the full runtime snapshot."""

    def test_buckets_signups_by_status(self):
        signups = [
            build_signup("registered"),
            build_signup("checked_in"),
            build_signup("checked_in"),
            build_signup("waitlisted"),
            build_signup("completed"),
            build_signup("no_show"),
            build_signup("removed"),
        ]

        snapshot = project(NetworkingSession(title="Demo"), _rotations(), signups, T0 + timedelta(seconds=30))

        assert snapshot.active_rotation.rotation_number == 1
        assert snapshot.next_rotation.rotation_number == 2
        assert len(snapshot.checked_in) == 2
        assert len(snapshot.waitlist) == 1
        assert len(snapshot.completed) == 1
        assert len(snapshot.no_shows) == 1

    def test_empty_session(self):
        snapshot = project(NetworkingSession(title="Demo"), [], [], T0)

        assert snapshot.active_rotation is None
        assert snapshot.next_rotation is None
        assert snapshot.checked_in == []
        assert snapshot.waitlist == []
