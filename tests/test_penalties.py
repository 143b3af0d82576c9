"""Tests for the no-show penalty cooldown."""

import pytest

from speednet.core.errors import ConflictError
from speednet.core.penalties import (
    PenaltyRules,
    count_recent_penalties,
    is_blocked,
    normalise_penalty_rules,
)
from tests.factories import NetworkingSessionFactory, SessionSignupFactory


class TestNormalisePenaltyRules:
    """Test rule parsing."""

    def test_defaults(self):
        expected = PenaltyRules(no_show_threshold=2, cooldown_days=14, penalty_weight=1)
        assert normalise_penalty_rules(None) == expected

    def test_camel_and_snake_case_keys(self):
        rules = normalise_penalty_rules({"noShowThreshold": 3, "cooldown_days": 7})
        assert rules == PenaltyRules(no_show_threshold=3, cooldown_days=7, penalty_weight=1)

    def test_values_floor_at_one_and_junk_uses_default(self):
        rules = normalise_penalty_rules({"noShowThreshold": 0, "cooldownDays": "soon", "penaltyWeight": 2.6})
        assert rules == PenaltyRules(no_show_threshold=1, cooldown_days=14, penalty_weight=3)

    def test_to_json_is_camel_case(self):
        assert PenaltyRules().to_json() == {"noShowThreshold": 2, "cooldownDays": 14, "penaltyWeight": 1}


class TestCooldown:
    """Test penalty counting against stored signups."""

    async def test_two_recent_no_shows_block(self, db_session):
        """Two no-shows inside 14 days reach the default threshold."""
        past = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=3)
        other = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, other.id, "late@example.com", days_ago=10)

        assert await is_blocked(db_session, PenaltyRules(), 1, None, "LATE@example.com")

    async def test_old_no_show_is_outside_the_window(self, db_session):
        past = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=3)
        older = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, older.id, "late@example.com", days_ago=20)

        assert await count_recent_penalties(db_session, 1, None, "late@example.com", 14) == 1
        assert not await is_blocked(db_session, PenaltyRules(), 1, None, "late@example.com")

    async def test_other_company_penalties_do_not_count(self, db_session):
        elsewhere = await NetworkingSessionFactory.create(db_session, company_id=2)
        await SessionSignupFactory.create_no_show(db_session, elsewhere.id, "late@example.com", days_ago=1)
        await SessionSignupFactory.create_no_show(db_session, elsewhere.id, "late@example.com", days_ago=2)

        assert not await is_blocked(db_session, PenaltyRules(), 1, None, "late@example.com")
        assert await is_blocked(db_session, PenaltyRules(), 2, None, "late@example.com")

    async def test_matches_by_participant_id(self, db_session):
        past = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "old@example.com", days_ago=1, participant_id=55)
        await SessionSignupFactory.create_no_show(db_session, past.id, "older@example.com", days_ago=2, participant_id=55)

        assert await is_blocked(db_session, PenaltyRules(), 1, 55, "new@example.com")

    async def test_higher_threshold_allows_registration(self, db_session):
        past = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=2)

        assert not await is_blocked(db_session, PenaltyRules(no_show_threshold=3), 1, None, "late@example.com")

    async def test_no_identity_counts_nothing(self, db_session):
        assert await count_recent_penalties(db_session, 1, None, None, 14) == 0

    async def test_registration_rejected_during_cooldown(self, db_session, session_service):
        past = await NetworkingSessionFactory.create(db_session, company_id=1)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=3)
        await SessionSignupFactory.create_no_show(db_session, past.id, "late@example.com", days_ago=5)
        upcoming = await NetworkingSessionFactory.create(db_session, company_id=1)

        with pytest.raises(ConflictError, match="temporarily restricted"):
            await session_service.register_for_session(
                upcoming.id,
                {"participant_email": "late@example.com", "participant_name": "Late Larry"},
            )
