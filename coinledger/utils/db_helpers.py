"""Dialect-aware insert helpers."""
import logging
from typing import Any, Sequence

from sqlalchemy.dialects.postgresql import insert as postgres_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def insert_if_absent(
    db: AsyncSession,
    model: Any,
    index_elements: Sequence[str],
    **values: Any,
) -> bool:
    """Insert a row unless one already exists for ``index_elements``.

    Uses ``ON CONFLICT DO NOTHING`` so two callers creating the same lazily
    seeded row cannot fail each other.

    Returns:
        True if this call inserted the row.
    """
    bind = db.get_bind()
    dialect_name = (bind.dialect.name if bind is not None else "").lower()
    if "sqlite" in dialect_name:
        insert_stmt = sqlite_insert(model)
    else:
        insert_stmt = postgres_insert(model)

    stmt = insert_stmt.values(**values).on_conflict_do_nothing(index_elements=list(index_elements))

    try:
        result = await db.execute(stmt)
    except IntegrityError as exc:
        logger.warning(f"Integrity error while inserting {model.__tablename__} row: {exc}")
        return False

    return getattr(result, "rowcount", None) == 1
