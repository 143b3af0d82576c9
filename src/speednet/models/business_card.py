# File: src/speednet/models/business_card.py
"""BusinessCard model - a participant's card, snapshotted onto signups."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from speednet.core.db import Base
from speednet.models.enums import BusinessCardStatus
from speednet.utils.datetime import now_utc_naive


class BusinessCard(Base):
    """Participant business card. Scoped to a workspace via company_id."""

    __tablename__ = "networking_business_cards"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    company_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    headline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    calendly_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    spotlight_video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    attachments: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    preferences: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=BusinessCardStatus.DRAFT.value
    )
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_shared_at: Mapped[datetime | None] = mapped_column(nullable=True)
    card_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc_naive)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
        index=True,
    )

    def __repr__(self) -> str:
        return self.title
