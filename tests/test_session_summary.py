"""Tests for session list summary counters."""

from datetime import datetime, timedelta
from decimal import Decimal

from speednet.core.session_summary import summarise_sessions
from speednet.models.networking_session import NetworkingSession
from tests.factories import build_signup

NOW = datetime(2026, 3, 1, 12, 0)


def _session(status, access_type="free", start=None, end=None, join_limit=None, rotation=120, price=None, signups=()):
    return NetworkingSession(
        title="Summary",
        status=status,
        access_type=access_type,
        price_cents=price,
        start_time=start,
        end_time=end,
        join_limit=join_limit,
        rotation_duration_seconds=rotation,
        signups=list(signups),
    )


def _scored(status, score):
    signup = build_signup(status)
    signup.satisfaction_score = Decimal(score)
    return signup


class TestSummariseSessions:
    """Test aggregate counters."""

    def test_counts_statuses_signups_and_revenue(self):
        sessions = [
            _session(
                "scheduled",
                access_type="paid",
                price=1500,
                start=NOW + timedelta(days=1),
                end=NOW + timedelta(days=1, minutes=30),
                join_limit=10,
                rotation=120,
                signups=[
                    build_signup("registered"),
                    build_signup("checked_in"),
                    _scored("completed", "4.5"),
                    build_signup("waitlisted"),
                ],
            ),
            _session("draft", join_limit=5, rotation=300, signups=[_scored("registered", "3.0")]),
            _session(
                "in_progress",
                start=NOW - timedelta(minutes=10),
                end=NOW + timedelta(minutes=20),
                rotation=60,
            ),
            _session(
                "cancelled",
                start=NOW - timedelta(days=1, minutes=30),
                end=NOW - timedelta(days=1),
                rotation=120,
            ),
        ]

        summary = summarise_sessions(sessions, now=NOW)

        assert summary.total == 4
        assert summary.draft == 1
        assert summary.cancelled == 1
        assert summary.active == 1
        assert summary.completed == 1
        assert summary.upcoming == 1
        assert summary.average_join_limit == 8
        assert summary.rotation_duration_seconds == 150
        assert summary.registered == 2
        assert summary.waitlist == 1
        assert summary.checked_in == 1
        assert summary.completed_attendees == 1
        assert summary.paid == 1
        assert summary.free == 3
        assert summary.revenue_cents == 3000
        assert summary.satisfaction_average == Decimal("3.75")

    def test_empty_list(self):
        summary = summarise_sessions([], now=NOW)

        assert summary.total == 0
        assert summary.average_join_limit is None
        assert summary.rotation_duration_seconds is None
        assert summary.satisfaction_average is None
        assert summary.revenue_cents == 0

    def test_completed_status_counts_without_end_time(self):
        summary = summarise_sessions([_session("completed")], now=NOW)
        assert summary.completed == 1

    def test_scheduled_without_start_is_not_upcoming(self):
        summary = summarise_sessions([_session("scheduled")], now=NOW)
        assert summary.upcoming == 0
