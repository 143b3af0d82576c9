"""Aggregate counters for session list responses."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from speednet.models.enums import AccessType, SessionStatus, SignupStatus
from speednet.models.networking_session import NetworkingSession
from speednet.models.session_schemas import SessionSummary
from speednet.utils.datetime import now_utc

_ATTENDED = {SignupStatus.CHECKED_IN.value, SignupStatus.COMPLETED.value}


def _rounded_mean(values: list[int]) -> int | None:
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarise_sessions(
    sessions: Iterable[NetworkingSession],
    now: datetime | None = None,
) -> SessionSummary:
    """
    Summarise a list of sessions with their signups loaded.

    A session counts as completed when its status says so or its end time
    has passed. Revenue is price_cents times the attended signups
    (checked in or completed) of each paid session.
    """
    now = now or now_utc()
    summary = SessionSummary()
    join_limits: list[int] = []
    rotation_durations: list[int] = []
    scores: list[Decimal] = []

    for session in sessions:
        summary.total += 1
        status = session.status

        if status == SessionStatus.DRAFT.value:
            summary.draft += 1
        if status == SessionStatus.CANCELLED.value:
            summary.cancelled += 1
        if status == SessionStatus.IN_PROGRESS.value:
            summary.active += 1
        if status == SessionStatus.COMPLETED.value or (
            session.end_time is not None and session.end_time < now
        ):
            summary.completed += 1
        if (
            status == SessionStatus.SCHEDULED.value
            and session.start_time is not None
            and session.start_time > now
        ):
            summary.upcoming += 1

        if session.join_limit is not None:
            join_limits.append(session.join_limit)
        if session.rotation_duration_seconds is not None:
            rotation_durations.append(session.rotation_duration_seconds)

        attended = 0
        for signup in session.signups:
            if signup.status == SignupStatus.REGISTERED.value:
                summary.registered += 1
            elif signup.status == SignupStatus.WAITLISTED.value:
                summary.waitlist += 1
            elif signup.status == SignupStatus.CHECKED_IN.value:
                summary.checked_in += 1
            elif signup.status == SignupStatus.COMPLETED.value:
                summary.completed_attendees += 1

            if signup.status in _ATTENDED:
                attended += 1
            if signup.satisfaction_score is not None:
                scores.append(Decimal(signup.satisfaction_score))

        if session.access_type == AccessType.PAID.value:
            summary.paid += 1
            summary.revenue_cents += (session.price_cents or 0) * attended
        else:
            summary.free += 1

    summary.average_join_limit = _rounded_mean(join_limits)
    summary.rotation_duration_seconds = _rounded_mean(rotation_durations)
    if scores:
        summary.satisfaction_average = (sum(scores) / len(scores)).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
    return summary
