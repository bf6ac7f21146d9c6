"""Dialect-aware column helpers for Alembic migrations."""
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from alembic import op


def get_uuid_type():
    """UUID column type for the current dialect.

    PostgreSQL gets the native UUID type; SQLite stores the 32-char hex form
    written by ``coinledger.models.base.AdaptiveUUID`` in a String(36).
    """
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        return UUID(as_uuid=True)
    return sa.String(length=36)


def bool_default(value: bool):
    """Server default for a boolean column (``true``/``false`` on PostgreSQL, ``1``/``0`` on SQLite)."""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        return sa.text('true' if value else 'false')
    return sa.text('1' if value else '0')


def get_timestamp_default():
    """Server default for created_at columns."""
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        return sa.text('NOW()')
    return sa.text('CURRENT_TIMESTAMP')
