# File: src/speednet/models/signup.py
"""SessionSignup model - a participant's registration for a networking session."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from speednet.models.networking_session import NetworkingSession

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, ForeignKey, Integer, Numeric, String, Text, Uuid, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column, relationship

from speednet.core.db import Base
from speednet.models.enums import SignupSource, SignupStatus
from speednet.utils.datetime import now_utc_naive


class SessionSignup(Base):
    """Signup record. Never deleted; 'removed' is the terminal soft state."""

    __tablename__ = "networking_session_signups"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("networking_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    session: Mapped["NetworkingSession"] = relationship(
        "NetworkingSession",
        back_populates="signups",
    )

    # Anonymous self-registration leaves participant_id empty
    participant_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    participant_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    participant_name: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[str] = mapped_column(
        String(40),
        nullable=False,
        default=SignupStatus.REGISTERED.value,
        index=True,
    )
    source: Mapped[str] = mapped_column(
        String(40), nullable=False, default=SignupSource.SELF.value
    )

    seat_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    join_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    business_card_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    business_card_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    profile_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    checked_in_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Penalty tracking
    no_show_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    penalty_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_penalty_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)

    satisfaction_score: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), nullable=True)
    feedback_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Engagement counters
    profile_shared_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    connections_saved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    messages_sent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    follow_ups_scheduled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # "metadata" is reserved on declarative classes
    signup_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc_naive)
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=now_utc_naive,
        onupdate=now_utc_naive,
    )

    @staticmethod
    async def find_active_duplicate(
        session_id: uuid.UUID,
        participant_email: str,
        participant_id: int | None,
        db: AsyncSession,
    ) -> "SessionSignup | None":
        """Find a non-removed signup of the same participant (email or id) for this session."""
        identity = SessionSignup.participant_email == participant_email.lower()
        if participant_id is not None:
            identity = or_(identity, SessionSignup.participant_id == participant_id)

        stmt = select(SessionSignup).where(
            SessionSignup.session_id == session_id,
            SessionSignup.status != SignupStatus.REMOVED.value,
            identity,
        )
        result = await db.execute(stmt.limit(1))
        return result.scalars().first()

    @staticmethod
    async def count_seated(session_id: uuid.UUID, db: AsyncSession) -> int:
        """Count signups holding a seat: everything except removed and waitlisted."""
        stmt = select(func.count(SessionSignup.id)).where(
            SessionSignup.session_id == session_id,
            SessionSignup.status.notin_(
                [SignupStatus.REMOVED.value, SignupStatus.WAITLISTED.value]
            ),
        )
        return int(await db.scalar(stmt) or 0)

    def __repr__(self) -> str:
        return (
            f"<SessionSignup(id={self.id}, session_id={self.session_id}, "
            f"email={self.participant_email}, status={self.status})>"
        )
