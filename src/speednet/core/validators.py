# File: src/speednet/core/validators.py
"""Normalisation and validation utilities for networking session input."""

import math
import re
import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from speednet.core.constants import (
    DEFAULT_ROTATION_SECONDS,
    DEFAULT_SESSION_LENGTH_MINUTES,
    DEFAULT_SLUG_FALLBACK,
    DEFAULT_WAITLIST_LIMIT,
    MAX_ROTATION_SECONDS,
    MAX_SATISFACTION_SCORE,
    MIN_JOIN_LIMIT,
    MIN_ROTATION_SECONDS,
    SLUG_MAX_LENGTH,
)
from speednet.core.errors import ValidationError
from speednet.utils.datetime import whole_minutes_between


def as_finite_number(value: Any) -> float | None:
    """Coerce to a finite float, or None when that isn't possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def slugify(value: str | None, fallback: str = DEFAULT_SLUG_FALLBACK) -> str:
    """
    Derive a URL-safe slug.

    Lower-cases, collapses every run of non-alphanumerics into a single hyphen,
    trims edge hyphens and truncates to 80 characters. When nothing is left,
    returns '<fallback>-<8 random hex chars>'.
    """
    base = re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower()).strip("-")
    if base:
        return base[:SLUG_MAX_LENGTH]

    suffix = uuid.uuid4().hex[:8]
    return re.sub(r"[^a-z0-9-]+", "", f"{fallback}-{suffix}")[:SLUG_MAX_LENGTH]


def normalise_rotation_duration(value: Any) -> int:
    """
    Clamp a rotation duration (seconds) into [60, 600].

    Missing or non-numeric values fall back to 120 seconds.
    """
    numeric = as_finite_number(value)
    if numeric is None:
        return DEFAULT_ROTATION_SECONDS
    return min(MAX_ROTATION_SECONDS, max(MIN_ROTATION_SECONDS, round_half_up(numeric)))


def normalise_session_length_minutes(
    session_length_minutes: Any,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
) -> int:
    """
    Resolve the session length in minutes.

    Priority: explicit positive value, then whole minutes between start and
    end, then the 30 minute default.
    """
    explicit = as_finite_number(session_length_minutes)
    if explicit is not None and explicit > 0:
        return max(1, round_half_up(explicit))

    minutes = whole_minutes_between(start_time, end_time)
    if minutes is not None and minutes > 0:
        return minutes

    return DEFAULT_SESSION_LENGTH_MINUTES


def to_cents(value: Any) -> int | None:
    """Convert a decimal major-unit amount to integer minor units (nearest cent)."""
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError("Price must be a numeric value.", details={"price": str(value)}) from e
    if not amount.is_finite():
        raise ValidationError("Price must be a numeric value.", details={"price": str(value)})
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def resolve_price_cents(price: Any = None, price_cents: Any = None) -> int | None:
    """Resolve a price from either a major-unit amount or an explicit minor-unit amount."""
    if price is not None and price != "":
        return to_cents(price)
    if price_cents is None or price_cents == "":
        return None
    numeric = as_finite_number(price_cents)
    if numeric is None:
        raise ValidationError("Price must be a numeric value.", details={"price_cents": str(price_cents)})
    return round_half_up(numeric)


def require_positive_price(price_cents: int | None) -> int:
    """Paid sessions always carry a positive price."""
    if price_cents is None or price_cents <= 0:
        raise ValidationError("Paid sessions require a positive price.")
    return price_cents


def normalise_join_limit(value: Any) -> int | None:
    """Join limit is at least 2; None (or non-numeric) means unlimited."""
    numeric = as_finite_number(value)
    if numeric is None:
        return None
    return max(MIN_JOIN_LIMIT, round_half_up(numeric))


def normalise_waitlist_limit(value: Any) -> int:
    numeric = as_finite_number(value)
    if numeric is None:
        return DEFAULT_WAITLIST_LIMIT
    return max(0, round_half_up(numeric))


def normalise_seat_number(value: Any) -> int | None:
    numeric = as_finite_number(value)
    if numeric is None:
        return None
    return max(1, round_half_up(numeric))


def clamp_counter(value: Any) -> int:
    """Engagement counters are non-negative integers; junk becomes 0."""
    numeric = as_finite_number(value)
    if numeric is None:
        return 0
    return max(0, round_half_up(numeric))


def clamp_satisfaction_score(value: Any) -> Decimal:
    """
    Clamp a satisfaction score into [0, 5] with two-decimal precision.

    Raises:
        ValidationError: If the score is not a number
    """
    numeric = as_finite_number(value)
    if numeric is None:
        raise ValidationError("Satisfaction score must be a number.", details={"satisfaction_score": str(value)})
    score = Decimal(str(numeric)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return max(Decimal("0.00"), min(Decimal(MAX_SATISFACTION_SCORE).quantize(Decimal("0.01")), score))


def require_text(value: str | None, message: str) -> str:
    """Strip text and fail with ValidationError when nothing is left."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def normalise_email(value: str | None, message: str = "Participant email is required.") -> str:
    """Lower-cased, stripped email. Empty values are rejected."""
    return require_text(value, message).lower()


def validate_time_window(start: datetime | None, end: datetime | None, label: str = "Session") -> None:
    """End must not precede start when both are set."""
    if start is not None and end is not None and end < start:
        raise ValidationError(
            f"{label} end time must not be before its start time.",
            details={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )
