# File: src/speednet/api/signups.py
"""Session signup API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from speednet.api.deps import get_auth_context, get_networking_session_service
from speednet.core.authorization import AuthContext
from speednet.models.signup_schemas import SignupCreate, SignupRead, SignupUpdate
from speednet.services.networking_sessions import NetworkingSessionService

router = APIRouter(prefix="/networking/sessions/{session_id}/signups", tags=["signups"])


@router.post("", response_model=SignupRead, status_code=status.HTTP_201_CREATED)
async def register_for_session(
    session_id: UUID,
    payload: SignupCreate,
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Public registration. Admitted or waitlisted depending on capacity."""
    return await service.register_for_session(session_id, payload)


@router.patch("/{signup_id}", response_model=SignupRead)
async def update_signup(
    session_id: UUID,
    signup_id: UUID,
    patch: SignupUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Host-side update: check-in, completion, no-show, removal, engagement counters."""
    return await service.update_signup(session_id, signup_id, patch, ctx)
