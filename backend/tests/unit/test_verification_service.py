"""Tests for VerificationService with mocked repositories."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from app.core.auth import hash_verification_token
from app.core.errors import InvalidOrExpiredTokenError
from app.models import Account, AccountStatus
from app.services.verification_service import VerificationService

_TOKENS = "app.services.verification_service.VerificationTokenRepository"
_ACCOUNTS = "app.services.verification_service.AccountRepository"


def _account(status: str) -> Account:
    return Account(
        id=uuid.uuid4(),
        name="V",
        email="v@example.com",
        password_hash="x",
        status=status,
    )


class TestIssue:
    async def test_stores_hash_with_24_hour_expiry(self):
        db = AsyncMock()
        account = _account(AccountStatus.UNVERIFIED.value)
        with patch(f"{_TOKENS}.create", new_callable=AsyncMock) as create:
            plain = await VerificationService(db).issue(account)

        kwargs = create.await_args.kwargs
        assert kwargs["account_id"] == account.id
        assert kwargs["token_hash"] == hash_verification_token(plain)
        assert kwargs["token_hash"] != plain
        expected = datetime.now(UTC) + timedelta(hours=24)
        assert abs((kwargs["expires_at"] - expected).total_seconds()) < 5

    async def test_does_not_commit(self):
        """The token joins the registration transaction."""
        db = AsyncMock()
        with patch(f"{_TOKENS}.create", new_callable=AsyncMock):
            await VerificationService(db).issue(_account(AccountStatus.UNVERIFIED.value))
        db.commit.assert_not_awaited()


class TestRedeem:
    async def test_valid_token_activates_account(self):
        db = AsyncMock()
        account = _account(AccountStatus.ACTIVE.value)
        with (
            patch(f"{_TOKENS}.consume", new_callable=AsyncMock, return_value=account.id) as consume,
            patch(f"{_ACCOUNTS}.activate_unless_blocked", new_callable=AsyncMock, return_value=True) as activate,
            patch(f"{_ACCOUNTS}.get_by_id", new_callable=AsyncMock, return_value=account),
        ):
            result = await VerificationService(db).redeem("plain")

        assert result is account
        consume.assert_awaited_once_with(db, token_hash=hash_verification_token("plain"))
        activate.assert_awaited_once_with(db, account.id)
        db.commit.assert_awaited_once()

    async def test_unknown_token_rejected(self):
        db = AsyncMock()
        with (
            patch(f"{_TOKENS}.consume", new_callable=AsyncMock, return_value=None),
            patch(f"{_ACCOUNTS}.activate_unless_blocked", new_callable=AsyncMock) as activate,
        ):
            with pytest.raises(InvalidOrExpiredTokenError):
                await VerificationService(db).redeem("plain")
        activate.assert_not_called()

    async def test_empty_token_rejected(self):
        db = AsyncMock()
        with patch(f"{_TOKENS}.consume", new_callable=AsyncMock) as consume:
            with pytest.raises(InvalidOrExpiredTokenError):
                await VerificationService(db).redeem("")
        consume.assert_not_called()

    async def test_deleted_account_consumes_token_and_rejects(self):
        db = AsyncMock()
        with (
            patch(f"{_TOKENS}.consume", new_callable=AsyncMock, return_value=uuid.uuid4()),
            patch(f"{_ACCOUNTS}.activate_unless_blocked", new_callable=AsyncMock, return_value=False),
        ):
            with pytest.raises(InvalidOrExpiredTokenError):
                await VerificationService(db).redeem("plain")
        # Consumption is committed even though redemption failed
        db.commit.assert_awaited_once()
