"""create_networking_tables

Revision ID: 3c7d1e9a4b20
Revises:
Create Date: 2026-10-17 09:12:44.310552

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c7d1e9a4b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'networking_sessions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), nullable=True),
        sa.Column('updated_by_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(40), nullable=False, server_default='draft'),
        sa.Column('visibility', sa.String(40), nullable=False, server_default='workspace'),
        sa.Column('access_type', sa.String(40), nullable=False, server_default='free'),
        sa.Column('price_cents', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('start_time', sa.DateTime(), nullable=True),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('session_length_minutes', sa.Integer(), nullable=False),
        sa.Column('rotation_duration_seconds', sa.Integer(), nullable=False),
        sa.Column('join_limit', sa.Integer(), nullable=True),
        sa.Column('waitlist_limit', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('registration_opens_at', sa.DateTime(), nullable=True),
        sa.Column('registration_closes_at', sa.DateTime(), nullable=True),
        sa.Column('requires_approval', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('lobby_instructions', sa.Text(), nullable=True),
        sa.Column('penalty_rules', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('video_config', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('video_telemetry', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('showcase_config', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('host_controls', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('attendee_tools', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('follow_up_actions', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('monetization', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'slug', name='uq_networking_sessions_company_slug'),
    )
    op.create_index(op.f('ix_networking_sessions_company_id'), 'networking_sessions', ['company_id'], unique=False)
    op.create_index(op.f('ix_networking_sessions_slug'), 'networking_sessions', ['slug'], unique=False)
    op.create_index(op.f('ix_networking_sessions_status'), 'networking_sessions', ['status'], unique=False)
    op.create_index(op.f('ix_networking_sessions_start_time'), 'networking_sessions', ['start_time'], unique=False)
    op.create_index(op.f('ix_networking_sessions_created_at'), 'networking_sessions', ['created_at'], unique=False)

    op.create_table(
        'networking_session_rotations',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('session_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rotation_number', sa.Integer(), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=True),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(40), nullable=False, server_default='scheduled'),
        sa.Column('seating_plan', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('pairing_seed', sa.String(64), nullable=True),
        sa.Column('host_notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['networking_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'rotation_number', name='uq_networking_rotations_session_number'),
    )
    op.create_index(op.f('ix_networking_session_rotations_session_id'), 'networking_session_rotations', ['session_id'], unique=False)

    op.create_table(
        'networking_session_signups',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('session_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('participant_id', sa.Integer(), nullable=True),
        sa.Column('participant_email', sa.String(255), nullable=False),
        sa.Column('participant_name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(40), nullable=False, server_default='registered'),
        sa.Column('source', sa.String(40), nullable=False, server_default='self'),
        sa.Column('seat_number', sa.Integer(), nullable=True),
        sa.Column('join_url', sa.String(500), nullable=True),
        sa.Column('business_card_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('business_card_snapshot', sa.JSON(), nullable=True),
        sa.Column('profile_snapshot', sa.JSON(), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('no_show_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('penalty_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_penalty_at', sa.DateTime(), nullable=True),
        sa.Column('satisfaction_score', sa.Numeric(3, 2), nullable=True),
        sa.Column('feedback_notes', sa.Text(), nullable=True),
        sa.Column('profile_shared_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('connections_saved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('messages_sent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('follow_ups_scheduled', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['session_id'], ['networking_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'satisfaction_score IS NULL OR (satisfaction_score >= 0 AND satisfaction_score <= 5)',
            name='ck_networking_signups_satisfaction_range',
        ),
    )
    op.create_index(op.f('ix_networking_session_signups_session_id'), 'networking_session_signups', ['session_id'], unique=False)
    op.create_index(op.f('ix_networking_session_signups_participant_id'), 'networking_session_signups', ['participant_id'], unique=False)
    op.create_index(op.f('ix_networking_session_signups_participant_email'), 'networking_session_signups', ['participant_email'], unique=False)
    op.create_index(op.f('ix_networking_session_signups_status'), 'networking_session_signups', ['status'], unique=False)
    op.create_index(op.f('ix_networking_session_signups_last_penalty_at'), 'networking_session_signups', ['last_penalty_at'], unique=False)

    op.create_table(
        'networking_business_cards',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('headline', sa.String(255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('website_url', sa.String(500), nullable=True),
        sa.Column('linkedin_url', sa.String(500), nullable=True),
        sa.Column('calendly_url', sa.String(500), nullable=True),
        sa.Column('portfolio_url', sa.String(500), nullable=True),
        sa.Column('spotlight_video_url', sa.String(500), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('preferences', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('status', sa.String(40), nullable=False, server_default='draft'),
        sa.Column('share_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_shared_at', sa.DateTime(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_networking_business_cards_owner_id'), 'networking_business_cards', ['owner_id'], unique=False)
    op.create_index(op.f('ix_networking_business_cards_company_id'), 'networking_business_cards', ['company_id'], unique=False)
    op.create_index(op.f('ix_networking_business_cards_updated_at'), 'networking_business_cards', ['updated_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_networking_business_cards_updated_at'), table_name='networking_business_cards')
    op.drop_index(op.f('ix_networking_business_cards_company_id'), table_name='networking_business_cards')
    op.drop_index(op.f('ix_networking_business_cards_owner_id'), table_name='networking_business_cards')
    op.drop_table('networking_business_cards')

    op.drop_index(op.f('ix_networking_session_signups_last_penalty_at'), table_name='networking_session_signups')
    op.drop_index(op.f('ix_networking_session_signups_status'), table_name='networking_session_signups')
    op.drop_index(op.f('ix_networking_session_signups_participant_email'), table_name='networking_session_signups')
    op.drop_index(op.f('ix_networking_session_signups_participant_id'), table_name='networking_session_signups')
    op.drop_index(op.f('ix_networking_session_signups_session_id'), table_name='networking_session_signups')
    op.drop_table('networking_session_signups')

    op.drop_index(op.f('ix_networking_session_rotations_session_id'), table_name='networking_session_rotations')
    op.drop_table('networking_session_rotations')

    op.drop_index(op.f('ix_networking_sessions_created_at'), table_name='networking_sessions')
    op.drop_index(op.f('ix_networking_sessions_start_time'), table_name='networking_sessions')
    op.drop_index(op.f('ix_networking_sessions_status'), table_name='networking_sessions')
    op.drop_index(op.f('ix_networking_sessions_slug'), table_name='networking_sessions')
    op.drop_index(op.f('ix_networking_sessions_company_id'), table_name='networking_sessions')
    op.drop_table('networking_sessions')
