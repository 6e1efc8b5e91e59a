"""create_portal_tables

Revision ID: 4c1d7e9a2b60
Revises:
Create Date: 2026-10-18 19:40:12.418230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d7e9a2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, agencies, memberships, invites and submissions."""
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='creator'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_submissions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('approved_submissions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('creator', 'admin')", name='ck_profiles_role'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=False)

    op.create_table('agencies',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(length=100), nullable=True),
        sa.Column('social_media', postgresql.JSONB(), server_default='{}', nullable=False),
        sa.Column('settings', postgresql.JSONB(), server_default='{}', nullable=False),
        sa.Column('allow_public_join', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('member_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('active_invites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    # Public directory listing
    op.create_index(
        'ix_agencies_allow_public_join', 'agencies', ['allow_public_join'], unique=False
    )

    op.create_table('memberships',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('agency_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='creator'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.Column('invited_by', sa.UUID(), nullable=True),
        sa.CheckConstraint("role IN ('owner', 'admin', 'creator')", name='ck_memberships_role'),
        sa.CheckConstraint("status IN ('pending', 'active')", name='ck_memberships_status'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['invited_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        # One agency per user
        sa.UniqueConstraint('user_id'),
    )
    op.create_index('ix_memberships_agency_id', 'memberships', ['agency_id'], unique=False)

    op.create_table('invites',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('agency_id', sa.UUID(), nullable=False),
        sa.Column('invite_code', sa.String(length=16), nullable=False),
        sa.Column('invite_link', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('created_by', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='creator'),
        sa.Column('max_uses', sa.Integer(), nullable=True),
        sa.Column('current_uses', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('creator', 'admin')", name='ck_invites_role'),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invites_agency_id', 'invites', ['agency_id'], unique=False)
    # Redemption looks up active invites by code
    op.create_index('ix_invites_code_active', 'invites', ['invite_code', 'is_active'], unique=False)

    op.create_table('submissions',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('creator_id', sa.UUID(), nullable=False),
        sa.Column('creator_username', sa.String(length=100), nullable=False),
        sa.Column('video_url', sa.String(length=1000), nullable=False),
        sa.Column('platform', sa.String(length=30), nullable=False),
        sa.Column('caption', sa.Text(), nullable=False, server_default=''),
        sa.Column('hashtags', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('admin_id', sa.UUID(), nullable=True),
        sa.Column('admin_feedback', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')", name='ck_submissions_status'
        ),
        sa.ForeignKeyConstraint(['creator_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['admin_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        # A video can only be submitted once, by anyone
        sa.UniqueConstraint('video_url'),
    )
    op.create_index('ix_submissions_creator_id', 'submissions', ['creator_id'], unique=False)
    op.create_index('ix_submissions_status', 'submissions', ['status'], unique=False)
    op.create_index('ix_submissions_submitted_at', 'submissions', ['submitted_at'], unique=False)


def downgrade() -> None:
    """Drop the portal tables."""
    op.drop_index('ix_submissions_submitted_at', table_name='submissions')
    op.drop_index('ix_submissions_status', table_name='submissions')
    op.drop_index('ix_submissions_creator_id', table_name='submissions')
    op.drop_table('submissions')
    op.drop_index('ix_invites_code_active', table_name='invites')
    op.drop_index('ix_invites_agency_id', table_name='invites')
    op.drop_table('invites')
    op.drop_index('ix_memberships_agency_id', table_name='memberships')
    op.drop_table('memberships')
    op.drop_index('ix_agencies_allow_public_join', table_name='agencies')
    op.drop_table('agencies')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
