"""Tests for the business card service."""

import uuid

import pytest

from speednet.core.authorization import AuthContext
from speednet.core.errors import AuthorizationError, NotFoundError, ValidationError
from tests.factories import BusinessCardFactory


def card_payload(**overrides):
    payload = {
        "company_id": 1,
        "title": "Grace Hopper",
        "contact_email": "  Grace@Navy.MIL ",
        "tags": ["compilers"],
    }
    payload.update(overrides)
    return payload


class TestCreateCard:
    """Test card creation."""

    async def test_owner_defaults_to_actor(self, card_service, ctx):
        card = await card_service.create_card(card_payload(), ctx)

        assert card.owner_id == 7
        assert card.company_id == 1
        assert card.contact_email == "grace@navy.mil"
        assert card.status == "draft"
        assert card.tags == ["compilers"]
        assert card.share_count == 0

    async def test_explicit_arguments_win(self, card_service, ctx):
        card = await card_service.create_card(card_payload(owner_id=11), ctx, owner_id=12, company_id=2)

        assert card.owner_id == 12
        assert card.company_id == 2

    async def test_payload_owner_used_when_no_argument(self, card_service, ctx):
        card = await card_service.create_card(card_payload(owner_id=11), ctx)
        assert card.owner_id == 11

    async def test_blank_title_rejected(self, card_service, ctx):
        with pytest.raises(ValidationError, match="title is required"):
            await card_service.create_card(card_payload(title=" "), ctx)

    async def test_invalid_status_rejected(self, card_service, ctx):
        with pytest.raises(ValidationError):
            await card_service.create_card(card_payload(status="famous"), ctx)

    async def test_company_outside_scope(self, card_service, scoped_ctx):
        with pytest.raises(AuthorizationError):
            await card_service.create_card(card_payload(company_id=3), scoped_ctx)


class TestListCards:
    """Test card listing."""

    async def test_filters_by_owner(self, card_service, ctx, db_session):
        await BusinessCardFactory.create(db_session, owner_id=1, title="Mine")
        await BusinessCardFactory.create(db_session, owner_id=2, title="Theirs")

        cards = await card_service.list_cards({"owner_id": 1}, ctx)

        assert [c.title for c in cards] == ["Mine"]

    async def test_scoped_caller_sees_own_workspaces(self, card_service, scoped_ctx, db_session):
        await BusinessCardFactory.create(db_session, company_id=1, title="In scope")
        await BusinessCardFactory.create(db_session, company_id=5, title="Out of scope")

        cards = await card_service.list_cards(None, scoped_ctx)

        assert [c.title for c in cards] == ["In scope"]

    async def test_unknown_filter_rejected(self, card_service, ctx):
        with pytest.raises(ValidationError):
            await card_service.list_cards({"colour": "red"}, ctx)


class TestUpdateCard:
    """Test partial card updates."""

    async def test_updates_present_fields_only(self, card_service, ctx, db_session):
        card = await BusinessCardFactory.create(db_session)

        updated = await card_service.update_card(
            card.id,
            {"headline": None, "share_count": 2.4, "metadata": {"source": "import"}},
            ctx,
        )

        assert updated.headline is None
        assert updated.share_count == 2
        assert updated.metadata == {"source": "import"}
        assert updated.title == "Ada Lovelace"

    async def test_blank_email_rejected(self, card_service, ctx, db_session):
        card = await BusinessCardFactory.create(db_session)

        with pytest.raises(ValidationError, match="contact email is required"):
            await card_service.update_card(card.id, {"contact_email": ""}, ctx)

    async def test_missing_card(self, card_service, ctx):
        with pytest.raises(NotFoundError, match="BusinessCard"):
            await card_service.update_card(uuid.uuid4(), {"title": "Nobody"}, ctx)

    async def test_foreign_workspace(self, card_service, db_session):
        card = await BusinessCardFactory.create(db_session, company_id=4)

        with pytest.raises(AuthorizationError):
            await card_service.update_card(
                card.id, {"title": "Hijack"}, AuthContext(authorized_workspace_ids=[1])
            )
