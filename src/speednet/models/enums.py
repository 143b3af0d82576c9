"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class SessionStatus(str, enum.Enum):
    """Networking session lifecycle states."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionVisibility(str, enum.Enum):
    PUBLIC = "public"
    WORKSPACE = "workspace"


class AccessType(str, enum.Enum):
    FREE = "free"
    PAID = "paid"


class RotationStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SignupStatus(str, enum.Enum):
    """Participant registration states."""

    REGISTERED = "registered"
    WAITLISTED = "waitlisted"
    CHECKED_IN = "checked_in"
    COMPLETED = "completed"
    NO_SHOW = "no_show"
    REMOVED = "removed"


class SignupSource(str, enum.Enum):
    SELF = "self"
    HOST = "host"
    ADMIN = "admin"
    INVITE = "invite"
    IMPORT = "import"


class BusinessCardStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
