"""Create accounts and verification_tokens tables.

Revision ID: 001_accounts_and_verification_tokens
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_accounts_and_verification_tokens"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # gen_random_uuid() is built in from PostgreSQL 13; pgcrypto covers older servers
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default="unverified",
        ),
        sa.Column(
            "registration_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("last_login_time", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('unverified', 'active', 'blocked')",
            name="ck_accounts_status",
        ),
        sa.UniqueConstraint("email", name="accounts_email_key"),
    )
    # Directory listing order: last login, then registration
    op.create_index(
        "idx_accounts_last_login_registration",
        "accounts",
        ["last_login_time", "registration_time"],
    )

    op.create_table(
        "verification_tokens",
        sa.Column("token_hash", sa.String(64), primary_key=True),
        sa.Column(
            "account_id",
            sa.UUID(),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_verification_tokens_account_id",
        "verification_tokens",
        ["account_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_verification_tokens_account_id", "verification_tokens")
    op.drop_table("verification_tokens")
    op.drop_index("idx_accounts_last_login_registration", "accounts")
    op.drop_table("accounts")
