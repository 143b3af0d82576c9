"""Rotation timetable synthesis.

Pure computation: no database access. The session service persists the
returned plans as SessionRotation rows.
"""

import uuid
from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from speednet.core.errors import ValidationError
from speednet.core.validators import normalise_rotation_duration
from speednet.models.enums import RotationStatus
from speednet.models.session_schemas import RotationInput
from speednet.utils.datetime import add_seconds, to_naive_utc

_ROTATION_STATUSES = {status.value for status in RotationStatus}


class RotationPlan(BaseModel):
    """One rotation ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    rotation_number: int
    duration_seconds: int
    start_time: datetime | None
    end_time: datetime | None
    status: str = RotationStatus.SCHEDULED.value
    seating_plan: dict[str, Any] = Field(default_factory=dict)
    pairing_seed: str | None = None
    host_notes: str | None = None

    def as_row(self) -> dict[str, Any]:
        return {
            "rotation_number": self.rotation_number,
            "duration_seconds": self.duration_seconds,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "seating_plan": dict(self.seating_plan),
            "pairing_seed": self.pairing_seed,
            "host_notes": self.host_notes,
        }


def new_pairing_seed() -> str:
    return uuid.uuid4().hex


def _coerce_status(value: str | None) -> str:
    if value and value in _ROTATION_STATUSES:
        return value
    return RotationStatus.SCHEDULED.value


def _plans_from_explicit(
    start_time: datetime | None,
    slot_seconds: int,
    rotations: Iterable[RotationInput | dict[str, Any]],
) -> list[RotationPlan]:
    plans: list[RotationPlan] = []
    seen_numbers: set[int] = set()
    for index, raw in enumerate(rotations):
        entry = raw if isinstance(raw, RotationInput) else RotationInput.model_validate(raw)

        number = entry.rotation_number if entry.rotation_number is not None else index + 1
        if number < 1:
            continue
        if number in seen_numbers:
            raise ValidationError(
                f"Rotation number {number} appears more than once.",
                details={"rotation_number": number},
            )
        seen_numbers.add(number)

        duration = (
            normalise_rotation_duration(entry.duration_seconds)
            if entry.duration_seconds is not None
            else slot_seconds
        )
        given_start = to_naive_utc(entry.start_time)
        rotation_start = given_start or add_seconds(start_time, index * slot_seconds)
        # A derived slot ends where the next derived slot begins
        if given_start is not None:
            default_end = add_seconds(given_start, duration)
        else:
            default_end = add_seconds(start_time, (index + 1) * slot_seconds)
        rotation_end = to_naive_utc(entry.end_time) or default_end

        plans.append(
            RotationPlan(
                rotation_number=number,
                duration_seconds=duration,
                start_time=rotation_start,
                end_time=rotation_end,
                status=_coerce_status(entry.status),
                seating_plan=dict(entry.seating_plan or {}),
                pairing_seed=entry.pairing_seed,
                host_notes=entry.host_notes,
            )
        )
    return plans


def build_schedule(
    start_time: datetime | None,
    session_length_minutes: int,
    rotation_duration_seconds: int,
    explicit_rotations: Iterable[RotationInput | dict[str, Any]] | None = None,
) -> list[RotationPlan]:
    """
    Build the rotation set for a session.

    With explicit rotations, each entry fills its gaps from the session slot:
    number defaults to the 1-based position, start to session start plus
    index slots, end to the start of the following slot (or start plus
    duration when the entry gave its own start). Otherwise the session length is
    cut into floor(length / slot) rotations (at least one), each with a fresh
    pairing seed. A missing session start leaves every rotation untimed.

    Args:
        start_time: Session start (naive UTC) or None
        session_length_minutes: Normalised session length
        rotation_duration_seconds: Slot length, clamped to [60, 600]
        explicit_rotations: Optional manual rotation entries

    Returns:
        Rotation plans ordered as they should be persisted
    """
    slot_seconds = normalise_rotation_duration(rotation_duration_seconds)
    start_time = to_naive_utc(start_time)

    if explicit_rotations is not None:
        explicit = list(explicit_rotations)
        if explicit:
            return _plans_from_explicit(start_time, slot_seconds, explicit)

    total = max(1, (int(session_length_minutes) * 60) // slot_seconds)
    plans = []
    for number in range(1, total + 1):
        rotation_start = add_seconds(start_time, (number - 1) * slot_seconds)
        plans.append(
            RotationPlan(
                rotation_number=number,
                duration_seconds=slot_seconds,
                start_time=rotation_start,
                end_time=add_seconds(rotation_start, slot_seconds),
                pairing_seed=new_pairing_seed(),
            )
        )
    return plans
