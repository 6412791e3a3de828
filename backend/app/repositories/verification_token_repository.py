"""Repository for VerificationToken operations.

Single-use email verification tokens stored as SHA-256 hashes with a
time-limited expiry.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.verification_token import VerificationToken


class VerificationTokenRepository:
    """Stateless repository for VerificationToken table operations.

    All methods are static, no instance state.
    """

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        account_id: uuid.UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> VerificationToken:
        """Store a new verification token.

        Args:
            db: Async database session.
            account_id: Account the token verifies.
            token_hash: SHA-256 hash of the plain token.
            expires_at: Token expiry timestamp.

        Returns:
            Created VerificationToken.
        """
        vt = VerificationToken(
            token_hash=token_hash,
            account_id=account_id,
            expires_at=expires_at,
        )
        db.add(vt)
        await db.flush()
        return vt

    @staticmethod
    async def consume(db: AsyncSession, *, token_hash: str) -> uuid.UUID | None:
        """Delete an unexpired token and return the account it belongs to.

        The delete-with-returning is atomic: of several concurrent callers
        presenting the same token, exactly one gets the account id.

        Args:
            db: Async database session.
            token_hash: SHA-256 hash of the plain token.

        Returns:
            Account id if a live token was consumed, None otherwise.
        """
        stmt = (
            delete(VerificationToken)
            .where(
                VerificationToken.token_hash == token_hash,
                VerificationToken.expires_at > datetime.now(UTC),
            )
            .returning(VerificationToken.account_id)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()
