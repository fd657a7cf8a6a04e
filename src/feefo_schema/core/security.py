# src/feefo_schema/core/security.py
import logging
import secrets

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from feefo_schema.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_OPERATOR_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=True)


def resolve_operator(api_key: str, api_keys: dict[str, str]) -> str | None:
    """Looks up the operator of a key, comparing every configured key in constant time."""
    operator = None
    presented = api_key.encode()
    for key, name in api_keys.items():
        if secrets.compare_digest(presented, key.encode()):
            operator = name
    return operator


async def get_operator(
    api_key: str = Security(_OPERATOR_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> str:
    """Guards the refresh endpoints: only configured operators may trigger or inspect jobs."""
    operator = resolve_operator(api_key, settings.api_keys)
    if operator is None:
        logger.warning("Rejected refresh request with an unknown operator key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown operator key.",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    logger.debug("Operator %s authenticated", operator)
    return operator
