# File: src/speednet/models/networking_session.py
"""NetworkingSession model for speed-networking events."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from speednet.models.rotation import SessionRotation
    from speednet.models.signup import SessionSignup

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Integer, String, Text, UniqueConstraint, Uuid, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column, relationship

from speednet.core.constants import DEFAULT_WAITLIST_LIMIT
from speednet.core.db import Base
from speednet.models.enums import AccessType, SessionStatus, SessionVisibility
from speednet.utils.datetime import now_utc_naive


class NetworkingSession(Base):
    """
    A scheduled speed-networking event.

    A session owns its rotation set (always replaced as a whole) and its
    signups (never deleted, only transitioned to 'removed').
    """

    __tablename__ = "networking_sessions"
    __table_args__ = (
        UniqueConstraint("company_id", "slug", name="uq_networking_sessions_company_slug"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owning workspace, managed outside this service
    company_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    created_by_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updated_by_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        default=SessionStatus.DRAFT.value,
        index=True,
    )
    visibility: Mapped[str] = mapped_column(
        String(40), nullable=False, default=SessionVisibility.WORKSPACE.value
    )
    access_type: Mapped[str] = mapped_column(
        String(40), nullable=False, default=AccessType.FREE.value
    )

    # Integer minor units; only set for paid sessions
    price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    start_time: Mapped[datetime | None] = mapped_column(nullable=True, index=True)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)
    session_length_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    rotation_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)

    join_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    waitlist_limit: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_WAITLIST_LIMIT
    )
    registration_opens_at: Mapped[datetime | None] = mapped_column(nullable=True)
    registration_closes_at: Mapped[datetime | None] = mapped_column(nullable=True)
    requires_approval: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lobby_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)

    penalty_rules: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Opaque configuration owned by the video, showcase and host tooling
    video_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    video_telemetry: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    showcase_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    host_controls: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    attendee_tools: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    follow_up_actions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    monetization: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        index=True,
    )

    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    # Relationships
    rotations: Mapped[list["SessionRotation"]] = relationship(
        "SessionRotation",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionRotation.rotation_number",
        lazy="selectin",
    )

    signups: Mapped[list["SessionSignup"]] = relationship(
        "SessionSignup",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionSignup.created_at",
        lazy="selectin",
    )

    @staticmethod
    async def find_by_slug(
        slug: str,
        company_id: int | None,
        db: AsyncSession,
        exclude_session_id: uuid.UUID | None = None,
    ) -> "NetworkingSession | None":
        """Find a session using this slug within the same company scope."""
        stmt = select(NetworkingSession).where(NetworkingSession.slug == slug)
        if company_id is not None:
            stmt = stmt.where(NetworkingSession.company_id == company_id)
        else:
            stmt = stmt.where(NetworkingSession.company_id.is_(None))

        if exclude_session_id:
            stmt = stmt.where(NetworkingSession.id != exclude_session_id)

        result = await db.execute(stmt.limit(1))
        return result.scalars().first()

    def __repr__(self) -> str:
        return (
            f"<NetworkingSession(id={self.id}, company_id={self.company_id}, "
            f"slug={self.slug}, status={self.status})>"
        )
