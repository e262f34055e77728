"""Admin bearer-token check for catalog, settings and order management routes."""
from typing import NoReturn, Optional
from fastapi import Header, HTTPException
import logging

from config import VALID_TOKENS
from monitoring import auth_failures_counter, auth_attempts_counter

logger = logging.getLogger(__name__)


def _reject(reason: str, detail: str, **extra) -> NoReturn:
    auth_failures_counter.add(1, {"reason": reason})
    logger.warning("Admin request rejected", extra={"reason": reason, **extra})
    raise HTTPException(status_code=401, detail=detail)


def _masked(value: str, keep: int) -> str:
    return value[:keep] + "..." if len(value) > keep else value


def verify_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Require ``Authorization: Bearer <admin token>``.

    Returns the token; anything else is a 401 with an ``{error}`` body.
    """
    auth_attempts_counter.add(1, {"type": "admin_bearer"})

    if authorization is None:
        _reject("missing_header", "Missing authorization header")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        _reject("invalid_format", "Invalid authorization header format",
                auth_header=_masked(authorization, 20))

    if token not in VALID_TOKENS:
        _reject("invalid_token", "Invalid token", token_prefix=_masked(token, 4))

    logger.debug("Admin request authenticated")
    return token
