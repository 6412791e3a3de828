"""Tests for rate limit keying."""

import uuid
from datetime import timedelta
from unittest.mock import MagicMock

from app.core.rate_limiting import _rate_limit_key_func
from tests.conftest import create_test_jwt

_ACCOUNT_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")


def _request(authorization: str | None = None) -> MagicMock:
    request = MagicMock()
    request.headers = {} if authorization is None else {"authorization": authorization}
    request.client.host = "203.0.113.7"
    return request


class TestRateLimitKeyFunc:
    def test_valid_session_keys_on_account(self):
        token = create_test_jwt(_ACCOUNT_ID)
        key = _rate_limit_key_func(_request(f"Bearer {token}"))
        assert key == f"account:{_ACCOUNT_ID}"

    def test_no_header_keys_on_ip(self):
        assert _rate_limit_key_func(_request()) == "unauth:203.0.113.7"

    def test_invalid_token_keys_on_ip(self):
        assert _rate_limit_key_func(_request("Bearer junk")) == "unauth:203.0.113.7"

    def test_expired_token_keys_on_ip(self):
        token = create_test_jwt(_ACCOUNT_ID, expires_delta=timedelta(seconds=-1))
        key = _rate_limit_key_func(_request(f"Bearer {token}"))
        assert key == "unauth:203.0.113.7"
