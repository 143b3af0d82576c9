# File: src/speednet/api/deps.py
"""FastAPI dependencies: caller context, cache and services."""

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from speednet.core.authorization import AuthContext, normalise_workspace_ids
from speednet.core.cache import SessionCache
from speednet.core.db import get_session_factory
from speednet.core.errors import ValidationError
from speednet.services.business_cards import BusinessCardService
from speednet.services.networking_sessions import NetworkingSessionService


def get_auth_context(
    x_workspace_ids: str | None = Header(None),
    x_actor_id: str | None = Header(None),
) -> AuthContext:
    """
    Build the caller context from headers set by the upstream auth middleware.

    X-Workspace-Ids is a comma-separated list; absent or empty means unrestricted.
    """
    workspace_ids = normalise_workspace_ids((x_workspace_ids or "").split(","))

    actor_id = None
    if x_actor_id is not None and x_actor_id.strip():
        try:
            actor_id = int(x_actor_id.strip())
        except ValueError as e:
            raise ValidationError(
                "X-Actor-Id must be an integer.", details={"x_actor_id": x_actor_id}
            ) from e

    return AuthContext(authorized_workspace_ids=workspace_ids, actor_id=actor_id)


def get_session_cache(request: Request) -> SessionCache:
    """The application's cache, created in main.lifespan."""
    return request.app.state.session_cache


def get_networking_session_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    cache: SessionCache = Depends(get_session_cache),
) -> NetworkingSessionService:
    return NetworkingSessionService(session_factory, cache)


def get_business_card_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BusinessCardService:
    return BusinessCardService(session_factory)
