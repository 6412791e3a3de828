"""Repository for Account CRUD and bulk status operations.

Every bulk mutation is a single set-oriented statement so that no request
can observe a partially applied block, unblock, or delete.
"""

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import case, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account, AccountStatus


class AccountRepository:
    """Stateless repository for Account table operations.

    All methods are static, no instance state. Pass an AsyncSession
    for every call so the caller controls transaction boundaries.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        email: str,
        password_hash: str,
    ) -> Account:
        """Insert a new unverified account.

        Email is normalized to lowercase before storage.

        Args:
            db: Async database session.
            name: Display name.
            email: Email address.
            password_hash: bcrypt hash of the password.

        Returns:
            Created Account with id and registration_time populated.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email already exists.
        """
        account = Account(
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            status=AccountStatus.UNVERIFIED.value,
        )
        db.add(account)
        await db.flush()
        await db.refresh(account)
        return account

    @staticmethod
    async def get_by_id(db: AsyncSession, account_id: uuid.UUID) -> Account | None:
        """Fetch an account by primary key.

        Bypasses the identity map so a status change made by another
        request is always seen.
        """
        stmt = (
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Account | None:
        """Fetch an account by email address (case-insensitive)."""
        stmt = select(Account).where(Account.email == email.lower())
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_ordered(db: AsyncSession) -> list[Account]:
        """List every account, most recently active first.

        Accounts that have logged in come first (latest login first),
        followed by never-logged-in accounts (newest registration first).
        """
        stmt = select(Account).order_by(
            Account.last_login_time.desc().nulls_last(),
            Account.registration_time.desc(),
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def record_login(db: AsyncSession, account: Account) -> Account:
        """Stamp last_login_time on a successful login."""
        account.last_login_time = datetime.now(UTC)
        await db.flush()
        return account

    @staticmethod
    async def block_many(db: AsyncSession, account_ids: Sequence[uuid.UUID]) -> int:
        """Set status to blocked for every listed account.

        Unknown ids are ignored.

        Returns:
            Number of rows updated.
        """
        stmt = (
            update(Account)
            .where(Account.id.in_(account_ids))
            .values(status=AccountStatus.BLOCKED.value)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count

    @staticmethod
    async def unblock_many(db: AsyncSession, account_ids: Sequence[uuid.UUID]) -> int:
        """Set blocked accounts back to active.

        Accounts in any other status are left untouched, so unverified
        accounts stay unverified.

        Returns:
            Number of rows updated.
        """
        stmt = (
            update(Account)
            .where(
                Account.id.in_(account_ids),
                Account.status == AccountStatus.BLOCKED.value,
            )
            .values(status=AccountStatus.ACTIVE.value)
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count

    @staticmethod
    async def activate_unless_blocked(
        db: AsyncSession, account_id: uuid.UUID
    ) -> bool:
        """Mark an account active unless it is blocked.

        Args:
            db: Async database session.
            account_id: Account to activate.

        Returns:
            True if the account exists, False otherwise.
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(
                status=case(
                    (
                        Account.status == AccountStatus.BLOCKED.value,
                        AccountStatus.BLOCKED.value,
                    ),
                    else_=AccountStatus.ACTIVE.value,
                )
            )
        )
        result = await db.execute(stmt)
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count > 0

    @staticmethod
    async def delete_many(db: AsyncSession, account_ids: Sequence[uuid.UUID]) -> int:
        """Hard-delete the listed accounts.

        Pending verification tokens go with them (ON DELETE CASCADE).

        Returns:
            Number of rows actually removed.
        """
        stmt = (
            delete(Account).where(Account.id.in_(account_ids)).returning(Account.id)
        )
        result = await db.execute(stmt)
        return len(result.scalars().all())

    @staticmethod
    async def delete_unverified(db: AsyncSession) -> int:
        """Hard-delete every account still in unverified status.

        Returns:
            Number of rows removed.
        """
        stmt = (
            delete(Account)
            .where(Account.status == AccountStatus.UNVERIFIED.value)
            .returning(Account.id)
        )
        result = await db.execute(stmt)
        return len(result.scalars().all())
