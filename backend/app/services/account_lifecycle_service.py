"""Account lifecycle service.

Owns the account status state machine:

    unverified --verify--> active
    any        --block---> blocked
    blocked    --unblock-> active

Deletion is the only terminal transition. Unblock leaves non-blocked
accounts alone, including unverified ones.
"""

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    DUMMY_HASH,
    create_session_token,
    hash_password,
    verify_password,
)
from app.core.config import settings
from app.core.errors import (
    AccountBlockedError,
    EmailTakenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from app.models.account import Account
from app.repositories.account_repository import AccountRepository
from app.services.verification_service import VerificationService

logger = logging.getLogger(__name__)


def _require(**fields: str) -> None:
    """Reject empty string fields."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(
            "All fields are required",
            details=[{"field": name, "error": "required"} for name in missing],
        )


def _unique_ids(account_ids: Sequence[uuid.UUID]) -> list[uuid.UUID]:
    if not account_ids:
        raise ValidationError("accountIds must be a non-empty array")
    return list(dict.fromkeys(account_ids))


class AccountLifecycleService:
    """Registration, login, listing, and bulk admin transitions.

    Args:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # -----------------------------------------------------------------------
    # Registration & login
    # -----------------------------------------------------------------------

    async def register(
        self, *, name: str, email: str, password: str
    ) -> tuple[Account, str]:
        """Create an unverified account and its verification token.

        Both rows are committed together. The caller is responsible for
        dispatching the verification email.

        Returns:
            (account, plain_token)

        Raises:
            ValidationError: A field is missing or blank.
            EmailTakenError: The email is already registered.
        """
        _require(name=name, email=email, password=password)

        password_hash = hash_password(password)
        try:
            account = await AccountRepository.create(
                self._db,
                name=name,
                email=email,
                password_hash=password_hash,
            )
        except IntegrityError as exc:
            await self._db.rollback()
            logger.info("Registration rejected: email already registered")
            raise EmailTakenError() from exc

        plain_token = await VerificationService(self._db).issue(account)
        await self._db.commit()

        logger.info("Account %s registered", account.id)
        return account, plain_token

    async def login(self, *, email: str, password: str) -> tuple[str, Account]:
        """Authenticate by email and password.

        Blocked accounts are refused before the password is compared.
        Unverified accounts may log in.

        Returns:
            (session_token, account)

        Raises:
            ValidationError: A field is missing or blank.
            InvalidCredentialsError: Unknown email or wrong password.
            AccountBlockedError: Account is blocked.
        """
        _require(email=email, password=password)

        account = await AccountRepository.get_by_email(self._db, email)
        if account is None:
            # Equalize timing with the wrong-password path
            verify_password(password, DUMMY_HASH)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if account.is_blocked:
            logger.info("Login refused for blocked account %s", account.id)
            raise AccountBlockedError()

        if not verify_password(password, account.password_hash):
            logger.info("Login failed: wrong password for account %s", account.id)
            raise InvalidCredentialsError()

        await AccountRepository.record_login(self._db, account)
        await self._db.commit()

        token = create_session_token(
            account_id=account.id,
            secret=settings.auth_secret.get_secret_value(),
            expires_delta=settings.session_ttl,
        )
        logger.info("Account %s logged in", account.id)
        return token, account

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def list_accounts(self) -> list[Account]:
        """All accounts, latest login first, never-logged-in last."""
        return await AccountRepository.list_ordered(self._db)

    async def get_account(self, account_id: uuid.UUID) -> Account:
        """Fetch one account.

        Raises:
            NotFoundError: No account with that id.
        """
        account = await AccountRepository.get_by_id(self._db, account_id)
        if account is None:
            raise NotFoundError("User", str(account_id))
        return account

    # -----------------------------------------------------------------------
    # Bulk transitions
    # -----------------------------------------------------------------------

    async def block_many(self, account_ids: Sequence[uuid.UUID]) -> int:
        """Block every listed account. Self-block is allowed.

        Returns:
            Number of distinct ids requested.
        """
        ids = _unique_ids(account_ids)
        affected = await AccountRepository.block_many(self._db, ids)
        await self._db.commit()
        logger.info("Blocked accounts: requested=%d affected=%d", len(ids), affected)
        return len(ids)

    async def unblock_many(self, account_ids: Sequence[uuid.UUID]) -> int:
        """Return blocked accounts to active.

        Returns:
            Number of distinct ids requested.
        """
        ids = _unique_ids(account_ids)
        affected = await AccountRepository.unblock_many(self._db, ids)
        await self._db.commit()
        logger.info(
            "Unblocked accounts: requested=%d affected=%d", len(ids), affected
        )
        return len(ids)

    async def delete_many(self, account_ids: Sequence[uuid.UUID]) -> int:
        """Hard-delete the listed accounts.

        Returns:
            Number of rows actually removed.
        """
        ids = _unique_ids(account_ids)
        removed = await AccountRepository.delete_many(self._db, ids)
        await self._db.commit()
        logger.info("Deleted accounts: requested=%d removed=%d", len(ids), removed)
        return removed

    async def delete_unverified(self) -> int:
        """Hard-delete every unverified account regardless of age.

        Returns:
            Number of rows removed.
        """
        removed = await AccountRepository.delete_unverified(self._db)
        await self._db.commit()
        logger.info("Deleted unverified accounts: removed=%d", removed)
        return removed
