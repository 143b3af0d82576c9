"""Service: participant business cards, snapshotted onto signups at registration."""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from speednet.core.authorization import AuthContext, assert_workspace_permission
from speednet.core.constants import BUSINESS_CARD_LIST_LIMIT
from speednet.core.errors import NotFoundError
from speednet.core.logging import get_logger
from speednet.core.unit_of_work import UnitOfWork
from speednet.core.validation import parse_payload
from speednet.core.validators import clamp_counter, normalise_email, require_text
from speednet.models.business_card import BusinessCard
from speednet.models.business_card_schemas import (
    BusinessCardCreate,
    BusinessCardFilters,
    BusinessCardRead,
    BusinessCardUpdate,
)
from speednet.utils.datetime import to_naive_utc

logger = get_logger(__name__)

# Nullable text columns: present in the patch means overwrite, null included
_NULLABLE_TEXT_FIELDS = (
    "headline",
    "bio",
    "contact_phone",
    "website_url",
    "linkedin_url",
    "calendly_url",
    "portfolio_url",
    "spotlight_video_url",
)


class BusinessCardService:
    """Business card CRUD scoped by workspace."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._uow = UnitOfWork(session_factory)

    async def list_cards(
        self,
        filters: BusinessCardFilters | dict[str, Any] | None,
        ctx: AuthContext,
    ) -> list[BusinessCardRead]:
        """Most recently updated cards first, capped at 100."""
        data = parse_payload(BusinessCardFilters, filters)
        if data.company_id is not None:
            assert_workspace_permission(data.company_id, ctx)

        async def work(db: AsyncSession) -> list[BusinessCardRead]:
            stmt = select(BusinessCard)
            if data.owner_id is not None:
                stmt = stmt.where(BusinessCard.owner_id == data.owner_id)
            if data.company_id is not None:
                stmt = stmt.where(BusinessCard.company_id == data.company_id)
            elif not ctx.is_unrestricted:
                stmt = stmt.where(BusinessCard.company_id.in_(ctx.authorized_workspace_ids))
            stmt = stmt.order_by(BusinessCard.updated_at.desc()).limit(BUSINESS_CARD_LIST_LIMIT)

            cards = (await db.execute(stmt)).scalars().all()
            return [BusinessCardRead.model_validate(card) for card in cards]

        return await self._uow.read(work)

    async def create_card(
        self,
        payload: BusinessCardCreate | dict[str, Any],
        ctx: AuthContext,
        owner_id: int | None = None,
        company_id: int | None = None,
    ) -> BusinessCardRead:
        """
        Create a card. Explicit owner/company arguments win over the payload.

        Raises:
            ValidationError: Missing title or contact email, bad status
            AuthorizationError: Company outside the caller's scope
        """
        data = parse_payload(BusinessCardCreate, payload)
        owner_id = owner_id if owner_id is not None else (data.owner_id or ctx.actor_id)
        company_id = company_id if company_id is not None else data.company_id
        assert_workspace_permission(company_id, ctx)

        async def work(db: AsyncSession) -> BusinessCardRead:
            card = BusinessCard(
                owner_id=owner_id,
                company_id=company_id,
                title=data.title,
                headline=data.headline,
                bio=data.bio,
                contact_email=data.contact_email,
                contact_phone=data.contact_phone,
                website_url=data.website_url,
                linkedin_url=data.linkedin_url,
                calendly_url=data.calendly_url,
                portfolio_url=data.portfolio_url,
                spotlight_video_url=data.spotlight_video_url,
                attachments=list(data.attachments),
                preferences=dict(data.preferences),
                tags=list(data.tags),
                status=data.status.value,
                card_metadata={},
            )
            db.add(card)
            await db.flush()
            return BusinessCardRead.model_validate(card)

        card = await self._uow.run(work)
        logger.info(
            "business_card.created",
            card_id=str(card.id),
            owner_id=card.owner_id,
            company_id=card.company_id,
        )
        return card

    async def update_card(
        self,
        card_id: uuid.UUID,
        patch: BusinessCardUpdate | dict[str, Any],
        ctx: AuthContext,
    ) -> BusinessCardRead:
        """Partial update. Signups keep the snapshot taken when they attached the card."""
        data = parse_payload(BusinessCardUpdate, patch)
        fields = data.model_fields_set

        async def work(db: AsyncSession) -> tuple[BusinessCardRead, list[str]]:
            card = await db.get(BusinessCard, card_id)
            if card is None:
                raise NotFoundError("BusinessCard", card_id)
            assert_workspace_permission(card.company_id, ctx)

            updates: dict[str, Any] = {}
            if "title" in fields and data.title is not None:
                updates["title"] = require_text(data.title, "Business card title is required.")
            if "contact_email" in fields:
                updates["contact_email"] = normalise_email(
                    data.contact_email, "Business card contact email is required."
                )
            for field in _NULLABLE_TEXT_FIELDS:
                if field in fields:
                    updates[field] = getattr(data, field)
            if "attachments" in fields:
                updates["attachments"] = list(data.attachments or [])
            if "preferences" in fields:
                updates["preferences"] = dict(data.preferences or {})
            if "tags" in fields:
                updates["tags"] = list(data.tags or [])
            if "status" in fields and data.status is not None:
                updates["status"] = data.status.value
            if "metadata" in fields:
                updates["card_metadata"] = dict(data.metadata or {})
            if "last_shared_at" in fields:
                updates["last_shared_at"] = to_naive_utc(data.last_shared_at)
            if "share_count" in fields and data.share_count is not None:
                updates["share_count"] = clamp_counter(data.share_count)

            changed = []
            for field, value in updates.items():
                if getattr(card, field) != value:
                    setattr(card, field, value)
                    changed.append(field)
            if changed:
                await db.flush()
            return BusinessCardRead.model_validate(card), changed

        card, changed = await self._uow.run(work)
        if changed:
            logger.info(
                "business_card.updated",
                card_id=str(card.id),
                company_id=card.company_id,
                fields=changed,
            )
        return card
