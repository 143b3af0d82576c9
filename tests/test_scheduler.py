"""Tests for rotation timetable synthesis."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from speednet.core.errors import ValidationError
from speednet.core.scheduler import build_schedule

T0 = datetime(2026, 3, 1, 18, 0)


class TestDerivedSchedule:
    """Rotations cut from the session length."""

    def test_hour_long_session_with_two_minute_slots(self):
        """60 minutes / 120 seconds gives 30 contiguous rotations."""
        plans = build_schedule(T0, 60, 120)

        assert len(plans) == 30
        assert [p.rotation_number for p in plans] == list(range(1, 31))
        assert plans[0].start_time == T0
        assert plans[-1].start_time == T0 + timedelta(seconds=3480)
        assert plans[-1].end_time == T0 + timedelta(seconds=3600)
        for previous, current in zip(plans, plans[1:]):
            assert current.start_time == previous.end_time

    def test_partial_slot_is_dropped(self):
        """7 minutes only fits three 2 minute rotations."""
        plans = build_schedule(T0, 7, 120)
        assert len(plans) == 3

    def test_at_least_one_rotation(self):
        plans = build_schedule(T0, 1, 600)
        assert len(plans) == 1
        assert plans[0].duration_seconds == 600

    def test_slot_length_is_clamped(self):
        plans = build_schedule(T0, 5, 30)

        assert len(plans) == 5
        assert all(p.duration_seconds == 60 for p in plans)

    def test_every_rotation_gets_a_fresh_pairing_seed(self):
        plans = build_schedule(T0, 30, 120)
        seeds = [p.pairing_seed for p in plans]

        assert all(seeds)
        assert len(set(seeds)) == len(seeds)

    def test_no_start_time_leaves_rotations_untimed(self):
        plans = build_schedule(None, 10, 120)

        assert len(plans) == 5
        assert all(p.start_time is None and p.end_time is None for p in plans)

    def test_aware_start_is_converted_to_naive_utc(self):
        start = datetime(2026, 3, 1, 20, 0, tzinfo=timezone(timedelta(hours=2)))
        plans = build_schedule(start, 4, 120)
        assert plans[0].start_time == T0
        assert plans[0].start_time.tzinfo is None

    def test_all_rotations_start_scheduled(self):
        assert {p.status for p in build_schedule(T0, 10, 120)} == {"scheduled"}


class TestExplicitSchedule:
    """Manual rotation entries fill their gaps from the session slot."""

    def test_gaps_are_filled_from_position_and_slot(self):
        plans = build_schedule(
            T0,
            60,
            120,
            [
                {"duration_seconds": 300},
                {"rotation_number": 5, "status": "bogus", "host_notes": "Sponsor break"},
            ],
        )

        first, second = plans
        assert first.rotation_number == 1
        assert first.duration_seconds == 300
        assert first.start_time == T0
        assert first.end_time == T0 + timedelta(seconds=120)

        assert second.rotation_number == 5
        assert second.duration_seconds == 120
        assert second.start_time == T0 + timedelta(seconds=120)
        assert second.end_time == T0 + timedelta(seconds=240)
        assert second.status == "scheduled"
        assert second.host_notes == "Sponsor break"

    def test_derived_slots_do_not_overlap(self):
        """A long entry without a start still ends where the next slot begins."""
        plans = build_schedule(T0, 60, 120, [{"duration_seconds": 300}, {}])

        assert [(p.start_time, p.end_time) for p in plans] == [
            (T0, T0 + timedelta(seconds=120)),
            (T0 + timedelta(seconds=120), T0 + timedelta(seconds=240)),
        ]
        assert plans[0].end_time <= plans[1].start_time

    def test_given_start_ends_after_entry_duration(self):
        start = T0 + timedelta(minutes=30)
        plans = build_schedule(T0, 60, 120, [{"start_time": start, "duration_seconds": 300}])

        assert plans[0].start_time == start
        assert plans[0].end_time == start + timedelta(seconds=300)

    def test_explicit_values_are_kept(self):
        start = T0 + timedelta(minutes=10)
        plans = build_schedule(
            T0,
            60,
            120,
            [
                {
                    "rotation_number": 2,
                    "start_time": start,
                    "end_time": start + timedelta(minutes=3),
                    "status": "completed",
                    "seating_plan": {"table-1": [1, 2]},
                    "pairing_seed": "seed-2",
                }
            ],
        )

        plan = plans[0]
        assert plan.start_time == start
        assert plan.end_time == start + timedelta(minutes=3)
        assert plan.status == "completed"
        assert plan.seating_plan == {"table-1": [1, 2]}
        assert plan.pairing_seed == "seed-2"

    def test_explicit_duration_is_clamped(self):
        plans = build_schedule(T0, 60, 120, [{"duration_seconds": 5000}])
        assert plans[0].duration_seconds == 600

    def test_non_positive_numbers_are_skipped(self):
        plans = build_schedule(T0, 60, 120, [{"rotation_number": 0}, {"rotation_number": 2}])
        assert [p.rotation_number for p in plans] == [2]

    def test_duplicate_numbers_rejected(self):
        with pytest.raises(ValidationError, match="more than once"):
            build_schedule(T0, 60, 120, [{"rotation_number": 1}, {"rotation_number": 1}])

    def test_empty_list_falls_back_to_derived(self):
        assert len(build_schedule(T0, 10, 120, [])) == 5

    def test_untimed_session_keeps_explicit_entries_untimed(self):
        plans = build_schedule(None, 10, 120, [{"rotation_number": 1}])
        assert plans[0].start_time is None
        assert plans[0].end_time is None

    def test_as_row_matches_columns(self):
        row = build_schedule(T0, 2, 120)[0].as_row()
        assert set(row) == {
            "rotation_number",
            "duration_seconds",
            "start_time",
            "end_time",
            "status",
            "seating_plan",
            "pairing_seed",
            "host_notes",
        }

    def test_plans_are_immutable(self):
        plan = build_schedule(T0, 2, 120)[0]

        with pytest.raises(PydanticValidationError):
            plan.rotation_number = 9
