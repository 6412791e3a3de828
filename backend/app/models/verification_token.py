"""Verification token model - email verification links.

Single-use, time-limited. Only the SHA-256 hash of the token is stored;
the plain value exists only in the emailed link.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.account import Account


class VerificationToken(Base):
    """Pending email verification for an account.

    Rows are deleted on redemption. Expired rows are never redeemable and
    are removed with the account (ON DELETE CASCADE).

    Attributes:
        token_hash: SHA-256 hex digest of the plain token.
        account_id: FK to accounts table.
        expires_at: Token expiry timestamp.
        created_at: Insert timestamp.
    """

    __tablename__ = "verification_tokens"

    token_hash: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )

    account: Mapped["Account"] = relationship(
        "Account",
        back_populates="verification_tokens",
    )
