"""Shared dependencies for API endpoints.

The session gate: every protected route depends on get_current_account,
which validates the bearer token and then re-reads the account from the
database on every call. A signed, unexpired token grants nothing once the
account is deleted or blocked.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    SessionTokenExpired,
    SessionTokenInvalid,
    decode_session_token,
)
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import (
    AccountGoneError,
    InvalidSessionError,
    SessionBlockedError,
    SessionExpiredError,
    UnauthorizedError,
)
from app.models import Account
from app.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)

_BEARER_SCHEME = "bearer"


def _bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != _BEARER_SCHEME or not token.strip():
        return None
    return token.strip()


async def get_current_account(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Account:
    """Resolve the account behind the request's bearer session.

    Validation steps:
    1. Read bearer token from the Authorization header
    2. Decode + verify signature, exp, aud, iss
    3. Re-fetch the account by id (no caching)
    4. Refuse blocked accounts

    Args:
        request: HTTP request (injected by FastAPI).
        db: Database session (injected).

    Returns:
        The live Account row.

    Raises:
        UnauthorizedError: No bearer token (no redirect).
        InvalidSessionError: Malformed or wrongly signed token.
        SessionExpiredError: Token has expired.
        AccountGoneError: Account no longer exists.
        SessionBlockedError: Account is blocked.
    """
    token = _bearer_token(request)
    if token is None:
        raise UnauthorizedError()

    try:
        account_id = decode_session_token(
            token, secret=settings.auth_secret.get_secret_value()
        )
    except SessionTokenExpired as exc:
        raise SessionExpiredError() from exc
    except SessionTokenInvalid as exc:
        raise InvalidSessionError() from exc

    account = await AccountRepository.get_by_id(db, account_id)
    if account is None:
        logger.info("Session rejected: account %s no longer exists", account_id)
        raise AccountGoneError()

    if account.is_blocked:
        logger.info("Session rejected: account %s is blocked", account_id)
        raise SessionBlockedError()

    return account


# Type aliases for cleaner endpoint signatures
CurrentAccount = Annotated[Account, Depends(get_current_account)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
