"""initial_social_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the social graph, messaging and notification tables.

    Uniqueness that the services rely on for race-free creation:
    - friendships: one row per unordered pair (user_low_id, user_high_id)
    - conversations: one row per pair_key
    - push_tokens: one row per (user_id, token)
    """
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'friendships',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('requester_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('addressee_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_low_id', sa.String(36), nullable=False),
        sa.Column('user_high_id', sa.String(36), nullable=False),
        sa.Column('status', sa.String(8), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('user_low_id', 'user_high_id', name='uq_friendships_pair'),
        sa.CheckConstraint('requester_id <> addressee_id', name='ck_friendships_not_self'),
    )
    op.create_index('idx_friendships_requester', 'friendships', ['requester_id', 'status'])
    op.create_index('idx_friendships_addressee', 'friendships', ['addressee_id', 'status'])

    op.create_table(
        'user_blocks',
        sa.Column('blocker_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('blocked_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('blocker_id <> blocked_id', name='ck_user_blocks_not_self'),
    )
    op.create_index('idx_user_blocks_blocked', 'user_blocks', ['blocked_id'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('pair_key', sa.String(80), nullable=False, unique=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_message_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_conversations_last_message_at', 'conversations', ['last_message_at'])

    op.create_table(
        'conversation_participants',
        sa.Column('conversation_id', sa.String(36), sa.ForeignKey('conversations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('last_read_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_conversation_participants_user', 'conversation_participants', ['user_id'])

    op.create_table(
        'messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('conversation_id', sa.String(36), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    # History paging walks (created_at, id) backwards within a conversation
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_messages_conversation_created_id
        ON messages(conversation_id, created_at DESC, id DESC);
    """)

    op.create_table(
        'push_tokens',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(255), nullable=False),
        sa.Column('platform', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('user_id', 'token', name='uq_push_tokens_user_token'),
    )
    op.create_index('ix_push_tokens_user_id', 'push_tokens', ['user_id'])
    op.create_index('ix_push_tokens_token', 'push_tokens', ['token'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(15), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_notifications_user_created
        ON notifications(user_id, created_at DESC);
    """)

    op.create_table(
        'parks',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('state', sa.String(100), nullable=True),
    )

    op.create_table(
        'check_ins',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('park_id', sa.String(36), sa.ForeignKey('parks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_check_ins_user_id', 'check_ins', ['user_id'])
    op.create_index('ix_check_ins_park_id', 'check_ins', ['park_id'])

    op.create_table(
        'park_reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('park_id', sa.String(36), sa.ForeignKey('parks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_id', sa.String(36), sa.ForeignKey('park_reviews.id', ondelete='CASCADE'), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_park_reviews_park_id', 'park_reviews', ['park_id'])
    op.create_index('ix_park_reviews_parent_id', 'park_reviews', ['parent_id'])


def downgrade() -> None:
    """Drop everything created by upgrade()."""
    op.drop_table('park_reviews')
    op.drop_table('check_ins')
    op.drop_table('parks')
    op.execute("DROP INDEX IF EXISTS idx_notifications_user_created")
    op.drop_table('notifications')
    op.drop_table('push_tokens')
    op.execute("DROP INDEX IF EXISTS idx_messages_conversation_created_id")
    op.drop_table('messages')
    op.drop_table('conversation_participants')
    op.drop_table('conversations')
    op.drop_table('user_blocks')
    op.drop_table('friendships')
    op.drop_table('profiles')
