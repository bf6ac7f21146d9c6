"""Create coin ledger tables.

Revision ID: 0001_initial_ledger
Revises:
Create Date: 2026-10-17

Coin accounts, the transaction log, daily task definitions, per-day task
progress, streaks, premium subscriptions and reward notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from coinledger.migrations.util import bool_default, get_timestamp_default, get_uuid_type


# revision identifiers, used by Alembic.
revision: str = "0001_initial_ledger"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create ledger tables."""
    uuid_type = get_uuid_type()
    now = get_timestamp_default()

    op.create_table(
        'user_coins',
        sa.Column('account_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('balance', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('account_id'),
    )
    op.create_index('ix_user_coins_user_id', 'user_coins', ['user_id'], unique=True)

    op.create_table(
        'coin_transactions',
        sa.Column('transaction_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(50), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('balance_after', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('transaction_id'),
    )
    op.create_index('ix_coin_transactions_user_id', 'coin_transactions', ['user_id'])
    op.create_index('ix_coin_transactions_transaction_type', 'coin_transactions', ['transaction_type'])
    op.create_index('ix_coin_transactions_created_at', 'coin_transactions', ['created_at'])
    op.create_index('ix_coin_transactions_user_created', 'coin_transactions', ['user_id', 'created_at'])

    op.create_table(
        'daily_tasks',
        sa.Column('task_id', uuid_type, nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('reward_coins', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('task_type', sa.String(50), nullable=False),
        sa.Column('required_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=bool_default(True)),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('task_id'),
    )
    op.create_index('ix_daily_tasks_task_type', 'daily_tasks', ['task_type'])
    op.create_index('ix_daily_tasks_is_active', 'daily_tasks', ['is_active'])

    op.create_table(
        'user_task_progress',
        sa.Column('progress_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('task_id', uuid_type, nullable=False),
        sa.Column('current_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=bool_default(False)),
        sa.Column('is_claimed', sa.Boolean(), nullable=False, server_default=bool_default(False)),
        sa.Column('reset_date', sa.Date(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.ForeignKeyConstraint(['task_id'], ['daily_tasks.task_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('progress_id'),
        sa.UniqueConstraint('user_id', 'task_id', 'reset_date', name='uq_user_task_progress_day'),
    )
    op.create_index('ix_user_task_progress_user_id', 'user_task_progress', ['user_id'])
    op.create_index('ix_user_task_progress_user_date', 'user_task_progress', ['user_id', 'reset_date'])

    op.create_table(
        'user_streaks',
        sa.Column('streak_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_completed_date', sa.Date(), nullable=True),
        sa.Column('weekly_bonus_last_claimed', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('streak_id'),
    )
    op.create_index('ix_user_streaks_user_id', 'user_streaks', ['user_id'], unique=True)

    op.create_table(
        'user_subscriptions',
        sa.Column('subscription_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=bool_default(False)),
        sa.Column('purchased_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('subscription_id'),
    )
    op.create_index('ix_user_subscriptions_user_id', 'user_subscriptions', ['user_id'], unique=True)

    op.create_table(
        'notifications',
        sa.Column('notification_id', uuid_type, nullable=False),
        sa.Column('user_id', uuid_type, nullable=False),
        sa.Column('notification_type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(120), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=bool_default(False)),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=now),
        sa.PrimaryKeyConstraint('notification_id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_user_created', 'notifications', ['user_id', 'created_at'])


def downgrade() -> None:
    """Drop ledger tables."""
    op.drop_index('ix_notifications_user_created', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_user_subscriptions_user_id', table_name='user_subscriptions')
    op.drop_table('user_subscriptions')

    op.drop_index('ix_user_streaks_user_id', table_name='user_streaks')
    op.drop_table('user_streaks')

    op.drop_index('ix_user_task_progress_user_date', table_name='user_task_progress')
    op.drop_index('ix_user_task_progress_user_id', table_name='user_task_progress')
    op.drop_table('user_task_progress')

    op.drop_index('ix_daily_tasks_is_active', table_name='daily_tasks')
    op.drop_index('ix_daily_tasks_task_type', table_name='daily_tasks')
    op.drop_table('daily_tasks')

    op.drop_index('ix_coin_transactions_user_created', table_name='coin_transactions')
    op.drop_index('ix_coin_transactions_created_at', table_name='coin_transactions')
    op.drop_index('ix_coin_transactions_transaction_type', table_name='coin_transactions')
    op.drop_index('ix_coin_transactions_user_id', table_name='coin_transactions')
    op.drop_table('coin_transactions')

    op.drop_index('ix_user_coins_user_id', table_name='user_coins')
    op.drop_table('user_coins')
