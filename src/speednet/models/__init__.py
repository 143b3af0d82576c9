"""Domain models package."""

from speednet.models.business_card import BusinessCard
from speednet.models.business_card_schemas import (
    BusinessCardCreate,
    BusinessCardRead,
    BusinessCardUpdate,
)
from speednet.models.enums import (
    AccessType,
    BusinessCardStatus,
    RotationStatus,
    SessionStatus,
    SessionVisibility,
    SignupSource,
    SignupStatus,
)
from speednet.models.networking_session import NetworkingSession
from speednet.models.rotation import SessionRotation
from speednet.models.session_schemas import SessionCreate, SessionRead, SessionUpdate
from speednet.models.signup import SessionSignup
from speednet.models.signup_schemas import SignupCreate, SignupRead, SignupUpdate

__all__ = [
    "AccessType",
    "BusinessCard",
    "BusinessCardCreate",
    "BusinessCardRead",
    "BusinessCardStatus",
    "BusinessCardUpdate",
    "NetworkingSession",
    "RotationStatus",
    "SessionCreate",
    "SessionRead",
    "SessionRotation",
    "SessionSignup",
    "SessionStatus",
    "SessionUpdate",
    "SessionVisibility",
    "SignupCreate",
    "SignupRead",
    "SignupSource",
    "SignupStatus",
    "SignupUpdate",
]
