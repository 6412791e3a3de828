"""Tests for the session gate dependency (get_current_account).

Token validation runs without a database; the live account lookup is
mocked so each rejection path can be exercised in isolation.
"""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.api.deps import get_current_account
from app.core.errors import (
    AccountGoneError,
    InvalidSessionError,
    SessionBlockedError,
    SessionExpiredError,
    UnauthorizedError,
)
from app.models import Account, AccountStatus
from tests.conftest import create_test_jwt

_ACCOUNT_ID = uuid.UUID("00000000-0000-0000-0000-0000000000b1")
_GET_BY_ID = "app.api.deps.AccountRepository.get_by_id"


def _request(authorization: str | None = None) -> MagicMock:
    request = MagicMock()
    headers = {} if authorization is None else {"authorization": authorization}
    request.headers = headers
    return request


def _account(status: str = AccountStatus.ACTIVE.value) -> Account:
    return Account(
        id=_ACCOUNT_ID,
        name="Gate",
        email="gate@example.com",
        password_hash="x",
        status=status,
    )


class TestMissingCredentials:
    """No bearer header: 401 without redirect."""

    async def test_no_header(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            await get_current_account(_request(), AsyncMock())
        assert exc_info.value.redirect_to_login is False

    async def test_non_bearer_scheme(self):
        with pytest.raises(UnauthorizedError):
            await get_current_account(_request("Basic dXNlcjpwYXNz"), AsyncMock())

    async def test_bearer_without_token(self):
        with pytest.raises(UnauthorizedError):
            await get_current_account(_request("Bearer   "), AsyncMock())


class TestBadTokens:
    """Malformed or expired tokens: 401 with redirect."""

    async def test_malformed_token(self):
        with pytest.raises(InvalidSessionError) as exc_info:
            await get_current_account(_request("Bearer garbage"), AsyncMock())
        assert exc_info.value.redirect_to_login is True

    async def test_wrong_signature(self):
        token = create_test_jwt(_ACCOUNT_ID, secret="z" * 48)
        with pytest.raises(InvalidSessionError):
            await get_current_account(_request(f"Bearer {token}"), AsyncMock())

    async def test_expired_token(self):
        token = create_test_jwt(_ACCOUNT_ID, expires_delta=timedelta(seconds=-5))
        with pytest.raises(SessionExpiredError) as exc_info:
            await get_current_account(_request(f"Bearer {token}"), AsyncMock())
        assert exc_info.value.code == "TOKEN_EXPIRED"

    async def test_bad_token_never_touches_database(self):
        with patch(_GET_BY_ID, new_callable=AsyncMock) as get_by_id:
            with pytest.raises(InvalidSessionError):
                await get_current_account(_request("Bearer nope"), AsyncMock())
        get_by_id.assert_not_called()


class TestLiveAccountCheck:
    """A valid token is re-checked against the current account row."""

    async def test_deleted_account(self):
        token = create_test_jwt(_ACCOUNT_ID)
        with patch(_GET_BY_ID, new_callable=AsyncMock, return_value=None):
            with pytest.raises(AccountGoneError) as exc_info:
                await get_current_account(_request(f"Bearer {token}"), AsyncMock())
        assert exc_info.value.status_code == 401
        assert exc_info.value.redirect_to_login is True

    async def test_blocked_account(self):
        token = create_test_jwt(_ACCOUNT_ID)
        blocked = _account(AccountStatus.BLOCKED.value)
        with patch(_GET_BY_ID, new_callable=AsyncMock, return_value=blocked):
            with pytest.raises(SessionBlockedError) as exc_info:
                await get_current_account(_request(f"Bearer {token}"), AsyncMock())
        assert exc_info.value.status_code == 403
        assert exc_info.value.redirect_to_login is True

    @pytest.mark.parametrize(
        "status", [AccountStatus.ACTIVE.value, AccountStatus.UNVERIFIED.value]
    )
    async def test_active_or_unverified_account_passes(self, status):
        token = create_test_jwt(_ACCOUNT_ID)
        account = _account(status)
        db = AsyncMock()
        with patch(_GET_BY_ID, new_callable=AsyncMock, return_value=account) as get_by_id:
            result = await get_current_account(_request(f"Bearer {token}"), db)
        assert result is account
        get_by_id.assert_awaited_once_with(db, _ACCOUNT_ID)

    async def test_scheme_is_case_insensitive(self):
        token = create_test_jwt(_ACCOUNT_ID)
        with patch(_GET_BY_ID, new_callable=AsyncMock, return_value=_account()):
            result = await get_current_account(_request(f"bearer {token}"), AsyncMock())
        assert result.id == _ACCOUNT_ID
