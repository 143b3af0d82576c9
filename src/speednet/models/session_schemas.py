# File: src/speednet/models/session_schemas.py
"""Pydantic schemas for NetworkingSession and rotation API."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from speednet.core.constants import DEFAULT_LOOKBACK_DAYS
from speednet.models.enums import AccessType, SessionStatus, SessionVisibility
from speednet.models.signup_schemas import SignupRead


class RotationInput(BaseModel):
    """Manual rotation override entry. Missing values are derived by the scheduler."""

    model_config = ConfigDict(extra="forbid")

    rotation_number: int | None = None
    duration_seconds: float | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    # Unknown statuses fall back to 'scheduled' rather than failing
    status: str | None = None
    seating_plan: dict[str, Any] | None = None
    host_notes: str | None = None
    pairing_seed: str | None = Field(None, max_length=64)


class SessionCreate(BaseModel):
    """Schema for creating a networking session."""

    model_config = ConfigDict(extra="forbid")

    company_id: int | None = None
    title: str = Field(..., max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    status: SessionStatus = SessionStatus.DRAFT
    visibility: SessionVisibility = SessionVisibility.WORKSPACE
    access_type: AccessType = AccessType.FREE
    price: Decimal | None = Field(None, description="Price in major currency units")
    price_cents: int | None = Field(None, description="Price in minor currency units")
    currency: str = Field("USD", min_length=3, max_length=3)

    start_time: datetime | None = None
    end_time: datetime | None = None
    session_length_minutes: float | None = None
    rotation_duration_seconds: float | None = None

    join_limit: float | None = None
    waitlist_limit: float | None = None
    registration_opens_at: datetime | None = None
    registration_closes_at: datetime | None = None
    requires_approval: bool = False
    lobby_instructions: str | None = None

    penalty_rules: dict[str, Any] | None = None
    video_config: dict[str, Any] = Field(default_factory=dict)
    video_telemetry: dict[str, Any] = Field(default_factory=dict)
    showcase_config: dict[str, Any] = Field(default_factory=dict)
    host_controls: dict[str, Any] = Field(default_factory=dict)
    attendee_tools: dict[str, Any] = Field(default_factory=dict)
    follow_up_actions: dict[str, Any] = Field(default_factory=dict)
    monetization: dict[str, Any] = Field(default_factory=dict)

    rotations: list[RotationInput] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title must have visible content."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("A session title is required")
        return cleaned

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return v.upper()


class SessionUpdate(BaseModel):
    """Partial update. Only fields present in the payload are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    status: SessionStatus | None = None
    visibility: SessionVisibility | None = None
    access_type: AccessType | None = None
    price: Decimal | None = None
    price_cents: int | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)

    start_time: datetime | None = None
    end_time: datetime | None = None
    session_length_minutes: float | None = None
    rotation_duration_seconds: float | None = None

    join_limit: float | None = None
    waitlist_limit: float | None = None
    registration_opens_at: datetime | None = None
    registration_closes_at: datetime | None = None
    requires_approval: bool | None = None
    lobby_instructions: str | None = None

    penalty_rules: dict[str, Any] | None = None
    video_config: dict[str, Any] | None = None
    video_telemetry: dict[str, Any] | None = None
    showcase_config: dict[str, Any] | None = None
    host_controls: dict[str, Any] | None = None
    attendee_tools: dict[str, Any] | None = None
    follow_up_actions: dict[str, Any] | None = None
    monetization: dict[str, Any] | None = None

    rotations: list[RotationInput] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return None
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("A session title cannot be blank")
        return cleaned


class RotationOverride(BaseModel):
    """Parameters for regenerating a session's rotation set."""

    model_config = ConfigDict(extra="forbid")

    start_time: datetime | None = None
    session_length_minutes: float | None = None
    rotation_duration_seconds: float | None = None
    rotations: list[RotationInput] | None = None


class SessionListFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_id: int | None = None
    status: SessionStatus | None = None
    include_metrics: bool = True
    upcoming_only: bool = False
    lookback_days: int = DEFAULT_LOOKBACK_DAYS


class RotationRead(BaseModel):
    """Schema for reading a rotation."""

    id: UUID
    session_id: UUID
    rotation_number: int
    duration_seconds: int
    start_time: datetime | None
    end_time: datetime | None
    status: str
    seating_plan: dict[str, Any]
    pairing_seed: str | None
    host_notes: str | None

    model_config = ConfigDict(from_attributes=True)


class SessionRead(BaseModel):
    """Schema for reading a networking session with its rotations and signups."""

    id: UUID
    company_id: int | None
    created_by_id: int | None
    updated_by_id: int | None
    title: str
    slug: str
    description: str | None
    status: str
    visibility: str
    access_type: str
    price_cents: int | None
    currency: str

    start_time: datetime | None
    end_time: datetime | None
    session_length_minutes: int
    rotation_duration_seconds: int
    join_limit: int | None
    waitlist_limit: int
    registration_opens_at: datetime | None
    registration_closes_at: datetime | None
    requires_approval: bool
    lobby_instructions: str | None

    penalty_rules: dict[str, Any]
    video_config: dict[str, Any]
    video_telemetry: dict[str, Any]
    showcase_config: dict[str, Any]
    host_controls: dict[str, Any]
    attendee_tools: dict[str, Any]
    follow_up_actions: dict[str, Any]
    monetization: dict[str, Any]

    created_at: datetime
    updated_at: datetime

    rotations: list[RotationRead] = Field(default_factory=list)
    signups: list[SignupRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SessionSummary(BaseModel):
    """Aggregate counters over a list of sessions."""

    total: int = 0
    active: int = 0
    upcoming: int = 0
    completed: int = 0
    draft: int = 0
    cancelled: int = 0
    average_join_limit: int | None = None
    rotation_duration_seconds: int | None = None
    registered: int = 0
    waitlist: int = 0
    checked_in: int = 0
    completed_attendees: int = 0
    paid: int = 0
    free: int = 0
    revenue_cents: int = 0
    satisfaction_average: Decimal | None = None


class SessionList(BaseModel):
    sessions: list[SessionRead]
    summary: SessionSummary | None = None


class RuntimeSnapshot(BaseModel):
    """What is happening in a session right now."""

    active_rotation: RotationRead | None = None
    next_rotation: RotationRead | None = None
    checked_in: list[SignupRead] = Field(default_factory=list)
    waitlist: list[SignupRead] = Field(default_factory=list)
    completed: list[SignupRead] = Field(default_factory=list)
    no_shows: list[SignupRead] = Field(default_factory=list)


class SessionRuntime(BaseModel):
    session: SessionRead
    runtime: RuntimeSnapshot
