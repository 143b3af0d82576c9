"""Factory classes for creating test objects."""

import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from speednet.models.business_card import BusinessCard
from speednet.models.networking_session import NetworkingSession
from speednet.models.rotation import SessionRotation
from speednet.models.signup import SessionSignup
from speednet.utils.datetime import now_utc


class NetworkingSessionFactory:
    """Factory for creating NetworkingSession rows without rotations."""

    @staticmethod
    async def create(
        session: AsyncSession,
        company_id: Optional[int] = 1,
        title: str = "Founders Speed Networking",
        slug: Optional[str] = None,
        status: str = "scheduled",
        access_type: str = "free",
        price_cents: Optional[int] = None,
        start_time: Optional[datetime] = None,
        session_length_minutes: int = 30,
        rotation_duration_seconds: int = 120,
        join_limit: Optional[int] = None,
        penalty_rules: Optional[dict[str, Any]] = None,
        **kwargs,
    ) -> NetworkingSession:
        """Create a test networking session."""
        networking_session = NetworkingSession(
            id=kwargs.get("id", uuid.uuid4()),
            company_id=company_id,
            title=title,
            slug=slug or f"session-{uuid.uuid4().hex[:8]}",
            status=status,
            visibility=kwargs.get("visibility", "workspace"),
            access_type=access_type,
            price_cents=price_cents,
            start_time=start_time,
            end_time=kwargs.get(
                "end_time",
                start_time + timedelta(minutes=session_length_minutes) if start_time else None,
            ),
            session_length_minutes=session_length_minutes,
            rotation_duration_seconds=rotation_duration_seconds,
            join_limit=join_limit,
            penalty_rules=penalty_rules or {"noShowThreshold": 2, "cooldownDays": 14, "penaltyWeight": 1},
        )
        if "created_at" in kwargs:
            networking_session.created_at = kwargs["created_at"]

        session.add(networking_session)
        await session.commit()
        await session.refresh(networking_session)

        return networking_session


class SessionSignupFactory:
    """Factory for creating SessionSignup rows directly (bypassing admission rules)."""

    @staticmethod
    async def create(
        session: AsyncSession,
        session_id: uuid.UUID,
        participant_email: str = "guest@example.com",
        participant_name: str = "Guest Attendee",
        participant_id: Optional[int] = None,
        status: str = "registered",
        penalty_count: int = 0,
        no_show_count: int = 0,
        last_penalty_at: Optional[datetime] = None,
        **kwargs,
    ) -> SessionSignup:
        """Create a test signup."""
        signup = SessionSignup(
            id=kwargs.get("id", uuid.uuid4()),
            session_id=session_id,
            participant_email=participant_email.lower(),
            participant_name=participant_name,
            participant_id=participant_id,
            status=status,
            penalty_count=penalty_count,
            no_show_count=no_show_count,
            last_penalty_at=last_penalty_at,
            satisfaction_score=kwargs.get("satisfaction_score"),
        )

        session.add(signup)
        await session.commit()
        await session.refresh(signup)

        return signup

    @staticmethod
    async def create_no_show(
        session: AsyncSession,
        session_id: uuid.UUID,
        participant_email: str,
        days_ago: int,
        participant_id: Optional[int] = None,
    ) -> SessionSignup:
        """A signup penalised for not showing up `days_ago` days ago."""
        return await SessionSignupFactory.create(
            session,
            session_id=session_id,
            participant_email=participant_email,
            participant_id=participant_id,
            status="no_show",
            penalty_count=1,
            no_show_count=1,
            last_penalty_at=now_utc() - timedelta(days=days_ago),
        )


class BusinessCardFactory:
    """Factory for creating BusinessCard objects."""

    @staticmethod
    async def create(
        session: AsyncSession,
        owner_id: Optional[int] = 42,
        company_id: Optional[int] = 1,
        title: str = "Ada Lovelace",
        contact_email: str = "ada@example.com",
        **kwargs,
    ) -> BusinessCard:
        """Create a test business card."""
        card = BusinessCard(
            id=kwargs.get("id", uuid.uuid4()),
            owner_id=owner_id,
            company_id=company_id,
            title=title,
            headline=kwargs.get("headline", "Analytical engines"),
            contact_email=contact_email,
            status=kwargs.get("status", "published"),
        )

        session.add(card)
        await session.commit()
        await session.refresh(card)

        return card


def build_rotation(
    rotation_number: int,
    start_time: Optional[datetime],
    duration_seconds: int = 120,
) -> SessionRotation:
    """Unsaved rotation with every field the read schema needs."""
    return SessionRotation(
        id=uuid.uuid4(),
        session_id=uuid.uuid4(),
        rotation_number=rotation_number,
        duration_seconds=duration_seconds,
        start_time=start_time,
        end_time=start_time + timedelta(seconds=duration_seconds) if start_time else None,
        status="scheduled",
        seating_plan={},
        pairing_seed=uuid.uuid4().hex,
    )


def build_signup(status: str, email: Optional[str] = None) -> SessionSignup:
    """Unsaved signup with every field the read schema needs."""
    now = now_utc()
    return SessionSignup(
        id=uuid.uuid4(),
        session_id=uuid.uuid4(),
        participant_email=email or f"{uuid.uuid4().hex[:6]}@example.com",
        participant_name="Runtime Guest",
        status=status,
        source="self",
        no_show_count=0,
        penalty_count=0,
        profile_shared_count=0,
        connections_saved=0,
        messages_sent=0,
        follow_ups_scheduled=0,
        signup_metadata={},
        created_at=now,
        updated_at=now,
    )
