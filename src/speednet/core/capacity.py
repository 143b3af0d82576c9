"""Signup admission and status transitions.

Every function here runs inside the caller's unit of work, so the duplicate
check, the penalty check and the insert share one transaction.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from speednet.core.errors import ConflictError, NotFoundError, ValidationError
from speednet.core.penalties import assert_not_blocked
from speednet.core.validators import (
    clamp_counter,
    clamp_satisfaction_score,
    normalise_email,
    normalise_seat_number,
    require_text,
)
from speednet.models.business_card import BusinessCard
from speednet.models.business_card_schemas import BusinessCardRead
from speednet.models.enums import SignupStatus
from speednet.models.networking_session import NetworkingSession
from speednet.models.signup import SessionSignup
from speednet.models.signup_schemas import SignupCreate, SignupUpdate
from speednet.utils.datetime import now_utc, to_naive_utc

ENGAGEMENT_COUNTERS = (
    "profile_shared_count",
    "connections_saved",
    "messages_sent",
    "follow_ups_scheduled",
)


def decide_admission(seated_count: int, join_limit: int | None) -> SignupStatus:
    """Waitlist once the seated count has reached the join limit. No limit means always admit."""
    if join_limit is not None and join_limit > 0 and seated_count >= join_limit:
        return SignupStatus.WAITLISTED
    return SignupStatus.REGISTERED


def snapshot_business_card(card: BusinessCard) -> dict[str, Any]:
    """JSON-ready copy of a card, frozen onto the signup."""
    return BusinessCardRead.model_validate(card).model_dump(mode="json")


async def resolve_business_card(
    db: AsyncSession,
    card_id: uuid.UUID,
    participant_id: int | None,
) -> BusinessCard:
    """
    Load a card for attachment to a signup.

    Raises:
        NotFoundError: If the card doesn't exist
        ValidationError: If a known participant tries to attach someone else's card
    """
    card = await db.get(BusinessCard, card_id)
    if card is None:
        raise NotFoundError("BusinessCard", card_id)
    if participant_id is not None and card.owner_id != participant_id:
        raise ValidationError(
            "Participants may only attach their own business card.",
            details={"business_card_id": str(card_id)},
        )
    return card


async def admit_signup(
    db: AsyncSession,
    session: NetworkingSession,
    payload: SignupCreate,
    now: datetime | None = None,
) -> SessionSignup:
    """
    Create a signup as registered or waitlisted.

    Raises:
        ValidationError: Missing email or name, or a foreign business card
        ConflictError: Participant already holds a non-removed signup
        ConflictError: Participant is inside a no-show cooldown
        NotFoundError: Business card doesn't exist
    """
    email = normalise_email(payload.participant_email)
    name = require_text(payload.participant_name, "Participant name is required.")
    participant_id = payload.participant_id

    existing = await SessionSignup.find_active_duplicate(session.id, email, participant_id, db)
    if existing is not None:
        raise ConflictError(
            "This participant is already registered for the networking session.",
            details={"signup_id": str(existing.id)},
        )

    await assert_not_blocked(db, session, participant_id, email, now=now)

    card_snapshot = None
    if payload.business_card_id is not None:
        card = await resolve_business_card(db, payload.business_card_id, participant_id)
        card_snapshot = snapshot_business_card(card)

    seated = await SessionSignup.count_seated(session.id, db)
    status = decide_admission(seated, session.join_limit)

    signup = SessionSignup(
        session_id=session.id,
        participant_id=participant_id,
        participant_email=email,
        participant_name=name,
        status=status.value,
        source=payload.source.value,
        join_url=payload.join_url,
        business_card_id=payload.business_card_id,
        business_card_snapshot=card_snapshot,
        profile_snapshot=payload.profile_snapshot,
        signup_metadata=dict(payload.metadata),
    )
    db.add(signup)
    await db.flush()
    return signup


async def apply_signup_update(
    db: AsyncSession,
    signup: SessionSignup,
    patch: SignupUpdate,
    now: datetime | None = None,
) -> list[str]:
    """
    Apply a host-side patch to a signup and return the changed field names.

    Setting checked_in_at or completed_at also sets the matching status unless
    one was given; a null timestamp means "now". Every no_show bumps the
    penalty counters and restamps last_penalty_at; removed clears the seat
    and join link.
    """
    now = now or now_utc()
    fields = patch.model_fields_set
    updates: dict[str, Any] = {}

    status: SignupStatus | None = patch.status if "status" in fields else None

    if "participant_name" in fields and patch.participant_name is not None:
        updates["participant_name"] = require_text(
            patch.participant_name, "Participant name cannot be blank."
        )
    if "join_url" in fields:
        updates["join_url"] = patch.join_url
    if "seat_number" in fields and patch.seat_number is not None:
        updates["seat_number"] = normalise_seat_number(patch.seat_number)
    if "checked_in_at" in fields:
        updates["checked_in_at"] = to_naive_utc(patch.checked_in_at) or now
        status = status or SignupStatus.CHECKED_IN
    if "completed_at" in fields:
        updates["completed_at"] = to_naive_utc(patch.completed_at) or now
        status = status or SignupStatus.COMPLETED

    if "business_card_id" in fields:
        if patch.business_card_id is None:
            updates["business_card_id"] = None
            updates["business_card_snapshot"] = None
        else:
            card = await resolve_business_card(db, patch.business_card_id, signup.participant_id)
            updates["business_card_id"] = card.id
            updates["business_card_snapshot"] = snapshot_business_card(card)
    if "business_card_snapshot" in fields:
        updates["business_card_snapshot"] = patch.business_card_snapshot
    if "profile_snapshot" in fields:
        updates["profile_snapshot"] = patch.profile_snapshot
    if "metadata" in fields:
        updates["signup_metadata"] = dict(patch.metadata or {})

    for counter in ENGAGEMENT_COUNTERS:
        value = getattr(patch, counter)
        if counter in fields and value is not None:
            updates[counter] = clamp_counter(value)

    if "satisfaction_score" in fields and patch.satisfaction_score is not None:
        updates["satisfaction_score"] = clamp_satisfaction_score(patch.satisfaction_score)
    if "feedback_notes" in fields:
        updates["feedback_notes"] = patch.feedback_notes

    if status is not None:
        updates["status"] = status.value
        if status == SignupStatus.NO_SHOW:
            updates["no_show_count"] = (signup.no_show_count or 0) + 1
            updates["penalty_count"] = (signup.penalty_count or 0) + 1
            updates["last_penalty_at"] = now
        if status == SignupStatus.REMOVED:
            updates["join_url"] = None
            updates["seat_number"] = None

    changed = []
    for field, value in updates.items():
        if getattr(signup, field) != value:
            setattr(signup, field, value)
            changed.append(field)

    if changed:
        await db.flush()
    return changed
