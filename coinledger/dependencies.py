"""FastAPI dependencies."""
import logging
import secrets
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from coinledger.config import get_settings
from coinledger.database import get_db
from coinledger.services.ledger_service import CoinLedgerService

logger = logging.getLogger(__name__)


def _mask_identifier(identifier: str) -> str:
    """Mask a sensitive identifier for logging."""
    if not identifier:
        return "<missing>"
    if len(identifier) <= 8:
        return f"{identifier[:2]}...{identifier[-2:]}"
    return f"{identifier[:4]}...{identifier[-4:]}"


async def get_current_user_id(
        x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> UUID:
    """Resolve the authenticated user id forwarded by the auth gateway."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="missing_credentials")
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        logger.warning(f"Rejected malformed user id header {_mask_identifier(x_user_id)!r}")
        raise HTTPException(status_code=401, detail="invalid_user_id") from exc


async def require_internal_key(
        x_internal_key: str | None = Header(default=None, alias="X-Internal-Key"),
) -> None:
    """Guard internal endpoints. Disabled entirely when no key is configured."""
    expected = get_settings().internal_api_key
    if not expected:
        raise HTTPException(status_code=403, detail="internal_endpoint_disabled")
    if not x_internal_key or not secrets.compare_digest(x_internal_key, expected):
        logger.warning(f"Rejected internal call with key {_mask_identifier(x_internal_key or '')!r}")
        raise HTTPException(status_code=403, detail="forbidden")


async def get_ledger_service(db: AsyncSession = Depends(get_db)) -> CoinLedgerService:
    return CoinLedgerService(db)
