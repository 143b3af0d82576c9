"""Live view of a session: active and next rotation plus roster buckets."""

from datetime import datetime
from typing import Iterable

from speednet.models.enums import SignupStatus
from speednet.models.networking_session import NetworkingSession
from speednet.models.rotation import SessionRotation
from speednet.models.session_schemas import RotationRead, RuntimeSnapshot
from speednet.models.signup import SessionSignup
from speednet.models.signup_schemas import SignupRead
from speednet.utils.datetime import to_naive_utc


def find_active_rotation(
    rotations: Iterable[SessionRotation], now: datetime
) -> SessionRotation | None:
    """Rotation whose [start, end) contains now. Untimed rotations never match."""
    for rotation in rotations:
        if rotation.start_time is None or rotation.end_time is None:
            continue
        if rotation.start_time <= now < rotation.end_time:
            return rotation
    return None


def find_next_rotation(
    rotations: Iterable[SessionRotation], now: datetime
) -> SessionRotation | None:
    upcoming = [r for r in rotations if r.start_time is not None and r.start_time > now]
    if not upcoming:
        return None
    return min(upcoming, key=lambda r: (r.start_time, r.rotation_number))


def project(
    session: NetworkingSession,
    rotations: Iterable[SessionRotation],
    signups: Iterable[SessionSignup],
    now: datetime,
) -> RuntimeSnapshot:
    """
    Compute the runtime snapshot for a session at a given instant.

    Pure: reads only the rows it is given. Sessions without a start time have
    untimed rotations, so they report neither an active nor a next rotation.
    """
    now = to_naive_utc(now)
    rotations = list(rotations)

    active = find_active_rotation(rotations, now)
    upcoming = find_next_rotation(rotations, now)

    buckets: dict[str, list[SignupRead]] = {
        SignupStatus.CHECKED_IN.value: [],
        SignupStatus.WAITLISTED.value: [],
        SignupStatus.COMPLETED.value: [],
        SignupStatus.NO_SHOW.value: [],
    }
    for signup in signups:
        if signup.status in buckets:
            buckets[signup.status].append(SignupRead.model_validate(signup))

    return RuntimeSnapshot(
        active_rotation=RotationRead.model_validate(active) if active else None,
        next_rotation=RotationRead.model_validate(upcoming) if upcoming else None,
        checked_in=buckets[SignupStatus.CHECKED_IN.value],
        waitlist=buckets[SignupStatus.WAITLISTED.value],
        completed=buckets[SignupStatus.COMPLETED.value],
        no_shows=buckets[SignupStatus.NO_SHOW.value],
    )
