"""No-show penalty cooldown guard."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from speednet.core.constants import (
    DEFAULT_COOLDOWN_DAYS,
    DEFAULT_NO_SHOW_THRESHOLD,
    DEFAULT_PENALTY_WEIGHT,
)
from speednet.core.errors import ConflictError
from speednet.core.logging import get_logger
from speednet.core.validators import as_finite_number, round_half_up
from speednet.models.networking_session import NetworkingSession
from speednet.models.signup import SessionSignup
from speednet.utils.datetime import now_utc

logger = get_logger(__name__)


class PenaltyRules(BaseModel):
    """
    Penalty configuration stored on a session.

    penalty_weight is kept for weighted scoring and is not part of the
    threshold comparison.
    """

    model_config = ConfigDict(frozen=True)

    no_show_threshold: int = DEFAULT_NO_SHOW_THRESHOLD
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS
    penalty_weight: int = DEFAULT_PENALTY_WEIGHT

    def to_json(self) -> dict[str, int]:
        """Stored shape, camelCase to match the other session blobs."""
        return {
            "noShowThreshold": self.no_show_threshold,
            "cooldownDays": self.cooldown_days,
            "penaltyWeight": self.penalty_weight,
        }

def _rule_value(raw: dict[str, Any], camel: str, snake: str, default: int) -> int:
    value = raw.get(camel, raw.get(snake))
    numeric = as_finite_number(value)
    if numeric is None:
        return default
    return max(1, round_half_up(numeric))

def normalise_penalty_rules(raw: dict[str, Any] | PenaltyRules | None) -> PenaltyRules:
    """Accept camelCase or snake_case keys; missing or junk values take the defaults."""
    if isinstance(raw, PenaltyRules):
        return raw
    raw = raw or {}
    return PenaltyRules(
        no_show_threshold=_rule_value(
            raw, "noShowThreshold", "no_show_threshold", DEFAULT_NO_SHOW_THRESHOLD
        ),
        cooldown_days=_rule_value(raw, "cooldownDays", "cooldown_days", DEFAULT_COOLDOWN_DAYS),
        penalty_weight=_rule_value(
            raw, "penaltyWeight", "penalty_weight", DEFAULT_PENALTY_WEIGHT
        ),
    )

async def count_recent_penalties(
    db: AsyncSession,
    company_id: int | None,
    participant_id: int | None,
    participant_email: str | None,
    cooldown_days: int,
    now: datetime | None = None,
) -> int:
    """
    Count penalised signups for a participant inside the cooldown window.

    Matches by participant id or email across every session of the company
    (all sessions when company_id is None).
    """
    identity = []
    if participant_id is not None:
        identity.append(SessionSignup.participant_id == participant_id)
    if participant_email:
        identity.append(SessionSignup.participant_email == participant_email.lower())
    if not identity:
        return 0

    since = (now or now_utc()) - timedelta(days=cooldown_days)
    stmt = select(func.count(SessionSignup.id)).where(
        or_(*identity),
        SessionSignup.penalty_count > 0,
        SessionSignup.last_penalty_at.is_not(None),
        SessionSignup.last_penalty_at >= since,
    )
    if company_id is not None:
        stmt = stmt.join(NetworkingSession, NetworkingSession.id == SessionSignup.session_id).where(
            NetworkingSession.company_id == company_id
        )

    return int(await db.scalar(stmt) or 0)

async def is_blocked(
    db: AsyncSession,
    rules: PenaltyRules,
    company_id: int | None,
    participant_id: int | None,
    participant_email: str | None,
    now: datetime | None = None,
) -> bool:
    count = await count_recent_penalties(
        db,
        company_id,
        participant_id,
        participant_email,
        rules.cooldown_days,
        now=now,
    )
    return count >= rules.no_show_threshold

async def assert_not_blocked(
    db: AsyncSession,
    session: NetworkingSession,
    participant_id: int | None,
    participant_email: str,
    now: datetime | None = None,
) -> None:
    """Raise ConflictError when the participant is inside a penalty cooldown."""
    rules = normalise_penalty_rules(session.penalty_rules)
    if await is_blocked(db, rules, session.company_id, participant_id, participant_email, now=now):
        logger.warning(
            "signup.blocked_by_penalty",
            session_id=str(session.id),
            company_id=session.company_id,
            participant_id=participant_id,
            cooldown_days=rules.cooldown_days,
            threshold=rules.no_show_threshold,
        )
        raise ConflictError(
            "Participant is temporarily restricted due to recent no-shows.",
            details={
                "cooldown_days": rules.cooldown_days,
                "no_show_threshold": rules.no_show_threshold,
            },
        )
