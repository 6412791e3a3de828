"""Account model - the user directory.

One row per registered person. ``status`` is the only gate for access:
a valid session grants nothing once the row is gone or blocked.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Index, String, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.verification_token import VerificationToken

_DEFAULT_UUID = text("gen_random_uuid()")


class AccountStatus(str, Enum):
    """Lifecycle state of an account.

    unverified -> active (email verified, or unblocked)
    any        -> blocked (admin block)
    blocked    -> active (admin unblock)
    """

    UNVERIFIED = "unverified"
    ACTIVE = "active"
    BLOCKED = "blocked"


class Account(Base):
    """Registered account.

    Attributes:
        id: UUID primary key, assigned by the database.
        name: Display name given at registration.
        email: Unique email address, stored lowercase.
        password_hash: bcrypt hash. Never serialized.
        status: One of AccountStatus values. New rows start unverified.
        registration_time: Set once on insert.
        last_login_time: Set by each successful login. NULL = never logged in.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            "status IN ('unverified', 'active', 'blocked')",
            name="ck_accounts_status",
        ),
        Index(
            "idx_accounts_last_login_registration",
            "last_login_time",
            "registration_time",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        server_default=_DEFAULT_UUID,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        server_default=AccountStatus.UNVERIFIED.value,
        default=AccountStatus.UNVERIFIED.value,
    )
    registration_time: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    last_login_time: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    # Relationships
    verification_tokens: Mapped[list["VerificationToken"]] = relationship(
        "VerificationToken",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_blocked(self) -> bool:
        """True when the account may not log in or use a session."""
        return self.status == AccountStatus.BLOCKED.value
