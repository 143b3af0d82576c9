# File: src/speednet/models/rotation.py
"""SessionRotation model - one timed pairing slot of a networking session."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from speednet.models.networking_session import NetworkingSession

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from speednet.core.db import Base
from speednet.models.enums import RotationStatus


class SessionRotation(Base):
    """Rotation slot. Rotations of a session are only ever replaced as a set."""

    __tablename__ = "networking_session_rotations"
    __table_args__ = (
        UniqueConstraint(
            "session_id", "rotation_number", name="uq_networking_rotations_session_number"
        ),
    )

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
        back_populates="rotations",
    )

    rotation_number: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[datetime | None] = mapped_column(nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)

    status: Mapped[str] = mapped_column(
        String(40), nullable=False, default=RotationStatus.SCHEDULED.value
    )

    # Consumed by the external pairing algorithm
    seating_plan: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    pairing_seed: Mapped[str | None] = mapped_column(String(64), nullable=True)
    host_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionRotation(session_id={self.session_id}, "
            f"rotation_number={self.rotation_number}, start_time={self.start_time})>"
        )
