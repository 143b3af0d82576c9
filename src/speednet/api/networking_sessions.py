# File: src/speednet/api/networking_sessions.py
"""Networking session API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status

from speednet.api.deps import get_auth_context, get_networking_session_service
from speednet.core.authorization import AuthContext
from speednet.core.constants import DEFAULT_LOOKBACK_DAYS
from speednet.models.enums import SessionStatus
from speednet.models.session_schemas import (
    RotationOverride,
    SessionCreate,
    SessionList,
    SessionListFilters,
    SessionRead,
    SessionRuntime,
    SessionUpdate,
)
from speednet.services.networking_sessions import NetworkingSessionService

router = APIRouter(prefix="/networking/sessions", tags=["networking-sessions"])


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Create a session together with its initial rotation set."""
    return await service.create_session(payload, ctx)


@router.get("", response_model=SessionList)
async def list_sessions(
    company_id: int | None = Query(None),
    session_status: SessionStatus | None = Query(None, alias="status"),
    include_metrics: bool = Query(True),
    upcoming_only: bool = Query(False),
    lookback_days: int = Query(DEFAULT_LOOKBACK_DAYS),
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """List sessions in the caller's scope, with summary counters unless disabled."""
    filters = SessionListFilters(
        company_id=company_id,
        status=session_status,
        include_metrics=include_metrics,
        upcoming_only=upcoming_only,
        lookback_days=lookback_days,
    )
    return await service.list_sessions(filters, ctx)


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(
    session_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    return await service.get_session(session_id, ctx)


@router.patch("/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: UUID,
    patch: SessionUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Partial update; a 'rotations' list replaces the rotation set."""
    return await service.update_session(session_id, patch, ctx)


@router.post("/{session_id}/rotations/regenerate", response_model=SessionRead)
async def regenerate_rotations(
    session_id: UUID,
    override: RotationOverride | None = Body(None),
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Destructively rebuild the rotation set."""
    return await service.regenerate_rotations(session_id, override, ctx)


@router.get("/{session_id}/runtime", response_model=SessionRuntime)
async def get_session_runtime(
    session_id: UUID,
    ctx: AuthContext = Depends(get_auth_context),
    service: NetworkingSessionService = Depends(get_networking_session_service),
):
    """Active and next rotation plus roster buckets, briefly cached."""
    return await service.get_session_runtime(session_id, ctx)
