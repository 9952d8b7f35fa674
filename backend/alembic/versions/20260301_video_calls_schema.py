"""
Video Calls Schema - Initial tables

This migration creates:
1. users - Workspace members (client or freelancer)
2. workspaces - One client paired with one freelancer
3. video_calls - Scheduled and instant call records
4. video_call_participants - Per-participant call metadata

Revision ID: 20260301_video_calls_schema
Revises:
Create Date: 2026-03-01
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20260301_video_calls_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================
    # CREATE USERS TABLE
    # ============================================
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('client', 'freelancer')", name='ck_user_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # ============================================
    # CREATE WORKSPACES TABLE
    # ============================================
    op.create_table(
        'workspaces',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('client_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('freelancer_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_workspaces_client_id', 'workspaces', ['client_id'])
    op.create_index('ix_workspaces_freelancer_id', 'workspaces', ['freelancer_id'])

    # ============================================
    # CREATE VIDEO_CALLS TABLE
    # ============================================
    op.create_table(
        'video_calls',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('workspace_id', sa.String(length=36), sa.ForeignKey('workspaces.id', ondelete='CASCADE'), nullable=False),
        sa.Column('scheduled_by', sa.String(length=36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('scheduled_time', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('actual_duration_minutes', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('is_instant', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('room_url', sa.String(length=500), nullable=False),
        sa.Column('room_name', sa.String(length=255), nullable=False),
        sa.Column('room_data', sa.JSON(), nullable=True),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('cancel_reason', sa.String(length=500), nullable=True),
        sa.Column('cancelled_by', sa.String(length=36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_video_calls_workspace_scheduled', 'video_calls', ['workspace_id', 'scheduled_time'])
    op.create_index('ix_video_calls_scheduled_by', 'video_calls', ['scheduled_by'])
    op.create_index('ix_video_calls_status', 'video_calls', ['status'])

    # ============================================
    # CREATE VIDEO_CALL_PARTICIPANTS TABLE
    # ============================================
    op.create_table(
        'video_call_participants',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('call_id', sa.String(length=36), sa.ForeignKey('video_calls.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
        sa.Column('left_at', sa.DateTime(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.UniqueConstraint('call_id', 'user_id', name='uq_call_participant_user'),
        sa.UniqueConstraint('call_id', 'role', name='uq_call_participant_role'),
    )
    op.create_index('ix_video_call_participants_call_id', 'video_call_participants', ['call_id'])
    op.create_index('ix_video_call_participants_user_id', 'video_call_participants', ['user_id'])


def downgrade():
    op.drop_table('video_call_participants')
    op.drop_table('video_calls')
    op.drop_table('workspaces')
    op.drop_table('users')
