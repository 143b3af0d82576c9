# File: src/speednet/models/signup_schemas.py
"""Pydantic schemas for SessionSignup API."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from speednet.models.enums import SignupSource, SignupStatus


class SignupCreate(BaseModel):
    """Schema for registering for a session (public, may be anonymous)."""

    model_config = ConfigDict(extra="forbid")

    participant_email: str | None = Field(None, max_length=255)
    participant_name: str | None = Field(None, max_length=255)
    participant_id: int | None = None
    business_card_id: UUID | None = None
    source: SignupSource = SignupSource.SELF
    join_url: str | None = Field(None, max_length=500)
    profile_snapshot: dict[str, Any] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SignupUpdate(BaseModel):
    """Host-side partial update of a signup."""

    model_config = ConfigDict(extra="forbid")

    status: SignupStatus | None = None
    participant_name: str | None = Field(None, max_length=255)
    join_url: str | None = Field(None, max_length=500)
    seat_number: float | None = None
    checked_in_at: datetime | None = None
    completed_at: datetime | None = None
    business_card_id: UUID | None = None
    business_card_snapshot: dict[str, Any] | None = None
    profile_snapshot: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    profile_shared_count: float | None = None
    connections_saved: float | None = None
    messages_sent: float | None = None
    follow_ups_scheduled: float | None = None
    satisfaction_score: float | None = None
    feedback_notes: str | None = None


class SignupRead(BaseModel):
    """Schema for reading a signup from the database."""

    id: UUID
    session_id: UUID
    participant_id: int | None
    participant_email: str
    participant_name: str
    status: str
    source: str
    seat_number: int | None
    join_url: str | None
    business_card_id: UUID | None
    business_card_snapshot: dict[str, Any] | None
    profile_snapshot: dict[str, Any] | None
    checked_in_at: datetime | None
    completed_at: datetime | None
    no_show_count: int
    penalty_count: int
    last_penalty_at: datetime | None
    satisfaction_score: Decimal | None
    feedback_notes: str | None
    profile_shared_count: int
    connections_saved: int
    messages_sent: int
    follow_ups_scheduled: int
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="signup_metadata")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
