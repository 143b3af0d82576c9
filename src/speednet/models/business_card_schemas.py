# File: src/speednet/models/business_card_schemas.py
"""Pydantic schemas for BusinessCard API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from speednet.models.enums import BusinessCardStatus


class BusinessCardCreate(BaseModel):
    """Schema for creating a business card."""

    model_config = ConfigDict(extra="forbid")

    company_id: int | None = None
    owner_id: int | None = None
    title: str = Field(..., max_length=255)
    headline: str | None = Field(None, max_length=255)
    bio: str | None = None
    contact_email: str = Field(..., max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    website_url: str | None = Field(None, max_length=500)
    linkedin_url: str | None = Field(None, max_length=500)
    calendly_url: str | None = Field(None, max_length=500)
    portfolio_url: str | None = Field(None, max_length=500)
    spotlight_video_url: str | None = Field(None, max_length=500)
    attachments: list[Any] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    status: BusinessCardStatus = BusinessCardStatus.DRAFT

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("Business card title is required")
        return cleaned

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v: str) -> str:
        cleaned = v.strip().lower()
        if not cleaned:
            raise ValueError("Business card contact email is required")
        return cleaned


class BusinessCardUpdate(BaseModel):
    """Partial update of a business card."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=255)
    headline: str | None = Field(None, max_length=255)
    bio: str | None = None
    contact_email: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    website_url: str | None = Field(None, max_length=500)
    linkedin_url: str | None = Field(None, max_length=500)
    calendly_url: str | None = Field(None, max_length=500)
    portfolio_url: str | None = Field(None, max_length=500)
    spotlight_video_url: str | None = Field(None, max_length=500)
    attachments: list[Any] | None = None
    preferences: dict[str, Any] | None = None
    tags: list[str] | None = None
    status: BusinessCardStatus | None = None
    metadata: dict[str, Any] | None = None
    last_shared_at: datetime | None = None
    share_count: float | None = None


class BusinessCardFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    owner_id: int | None = None
    company_id: int | None = None


class BusinessCardRead(BaseModel):
    """Schema for reading a business card; also the snapshot embedded in signups."""

    id: UUID
    owner_id: int | None
    company_id: int | None
    title: str
    headline: str | None
    bio: str | None
    contact_email: str
    contact_phone: str | None
    website_url: str | None
    linkedin_url: str | None
    calendly_url: str | None
    portfolio_url: str | None
    spotlight_video_url: str | None
    attachments: list[Any]
    preferences: dict[str, Any]
    tags: list[str]
    status: str
    share_count: int
    last_shared_at: datetime | None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="card_metadata")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
