# File: src/speednet/api/business_cards.py
"""Business card API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from speednet.api.deps import get_auth_context, get_business_card_service
from speednet.core.authorization import AuthContext
from speednet.models.business_card_schemas import (
    BusinessCardCreate,
    BusinessCardFilters,
    BusinessCardRead,
    BusinessCardUpdate,
)
from speednet.services.business_cards import BusinessCardService

router = APIRouter(prefix="/networking/business-cards", tags=["business-cards"])


@router.get("", response_model=list[BusinessCardRead])
async def list_cards(
    owner_id: int | None = Query(None),
    company_id: int | None = Query(None),
    ctx: AuthContext = Depends(get_auth_context),
    service: BusinessCardService = Depends(get_business_card_service),
):
    """List cards in the caller's scope, most recently updated first."""
    filters = BusinessCardFilters(owner_id=owner_id, company_id=company_id)
    return await service.list_cards(filters, ctx)


@router.post("", response_model=BusinessCardRead, status_code=status.HTTP_201_CREATED)
async def create_card(
    payload: BusinessCardCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: BusinessCardService = Depends(get_business_card_service),
):
    """Create a card. Owner defaults to the acting user."""
    return await service.create_card(payload, ctx)


@router.patch("/{card_id}", response_model=BusinessCardRead)
async def update_card(
    card_id: UUID,
    patch: BusinessCardUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: BusinessCardService = Depends(get_business_card_service),
):
    return await service.update_card(card_id, patch, ctx)
