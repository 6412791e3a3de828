"""Email verification token protocol.

issue() stores a hashed, time-limited token for a new account; redeem()
consumes it exactly once and moves the account to active, unless the
account was blocked in the meantime (blocking outranks verification).
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import hash_verification_token, new_verification_token
from app.core.config import settings
from app.core.errors import InvalidOrExpiredTokenError
from app.models.account import Account
from app.repositories.account_repository import AccountRepository
from app.repositories.verification_token_repository import VerificationTokenRepository

logger = logging.getLogger(__name__)


class VerificationService:
    """Issue and redeem email verification tokens.

    Args:
        db: Async database session. issue() joins the caller's
            transaction; redeem() commits its own.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def issue(self, account: Account) -> str:
        """Create a verification token for an account.

        The token row is flushed but not committed, so it lands in the
        same transaction as the account insert.

        Args:
            account: Newly created account.

        Returns:
            Plain token for the emailed link. Only its hash is stored.
        """
        plain_token, token_hash = new_verification_token()
        expires_at = datetime.now(UTC) + timedelta(
            hours=settings.verification_token_ttl_hours
        )
        await VerificationTokenRepository.create(
            self._db,
            account_id=account.id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        return plain_token

    async def redeem(self, token: str) -> Account:
        """Consume a verification token and activate its account.

        Args:
            token: Plain token from the verification link.

        Returns:
            The account after activation. Its status is blocked if it
            was blocked before redemption.

        Raises:
            InvalidOrExpiredTokenError: Token is unknown, already used,
                expired, or its account has been deleted.
        """
        if not token:
            raise InvalidOrExpiredTokenError()

        account_id = await VerificationTokenRepository.consume(
            self._db, token_hash=hash_verification_token(token)
        )
        if account_id is None:
            logger.info("Verification rejected: unknown or expired token")
            raise InvalidOrExpiredTokenError()

        activated = await AccountRepository.activate_unless_blocked(
            self._db, account_id
        )
        account = (
            await AccountRepository.get_by_id(self._db, account_id)
            if activated
            else None
        )
        # Token stays consumed even when its account is gone
        await self._db.commit()

        if account is None:
            logger.info("Verification token consumed for missing account")
            raise InvalidOrExpiredTokenError()

        logger.info(
            "Account %s verified (status=%s)", account.id, account.status
        )
        return account
