"""Credential hashing and token issuance.

Pipeline:
- hash_password / verify_password: bcrypt, never raises on mismatch
- new_verification_token / hash_verification_token: single-use email tokens
- create_session_token / decode_session_token: signed JWT bearer sessions
- DUMMY_HASH: Timing-safe constant for user enumeration defense

The signing secret is passed in by the caller on every call. Callers read
it once from settings; nothing in here looks it up.
"""

import hashlib
import secrets
import uuid
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from app.core.config import settings

# Default session lifetime: 24 hours
_DEFAULT_SESSION_EXPIRATION = timedelta(hours=24)

_JWT_ALGORITHM = "HS256"

# 32 bytes = 256 bits of entropy
_VERIFICATION_TOKEN_BYTES = 32

# Pre-computed bcrypt hash for timing-safe comparison on user-not-found.
# Security: prevents user enumeration via response time differences.
# Pre-generated to avoid ~300ms bcrypt computation on every app startup.
DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"


class SessionTokenError(Exception):
    """Base class for session token decode failures."""


class SessionTokenExpired(SessionTokenError):
    """Token signature is valid but its exp claim has passed."""


class SessionTokenInvalid(SessionTokenError):
    """Token is malformed, unsigned, wrongly signed, or missing claims."""


# ===================================================================
# Credential hasher
# ===================================================================


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash a password with bcrypt and a fresh random salt.

    No length or complexity rules are applied; any non-empty password is
    accepted.

    Args:
        password: Plain-text password.
        rounds: bcrypt cost factor. Defaults to settings.bcrypt_rounds.

    Returns:
        bcrypt hash as a UTF-8 string.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, password_hash: str | bytes) -> bool:
    """Check a password against a bcrypt hash.

    Returns False on mismatch or on a hash that bcrypt cannot parse.
    """
    hashed = password_hash.encode() if isinstance(password_hash, str) else password_hash
    try:
        return bcrypt.checkpw(password.encode(), hashed)
    except ValueError:
        return False


# ===================================================================
# Verification tokens
# ===================================================================


def hash_verification_token(plain_token: str) -> str:
    """SHA-256 digest stored in place of the plain token."""
    return hashlib.sha256(plain_token.encode()).hexdigest()


def new_verification_token() -> tuple[str, str]:
    """Generate a verification token and its SHA-256 hash.

    Returns:
        (plain_token, token_hash) - plain for email, hash for DB storage.
    """
    plain = secrets.token_urlsafe(_VERIFICATION_TOKEN_BYTES)
    return plain, hash_verification_token(plain)


# ===================================================================
# Session tokens
# ===================================================================


def create_session_token(
    *,
    account_id: uuid.UUID | str,
    secret: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT asserting an account id.

    Args:
        account_id: Account UUID for the sub claim.
        secret: HMAC signing secret.
        expires_delta: Time until expiration. Defaults to 24 hours.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(account_id),
        "aud": settings.auth_audience,
        "iss": settings.auth_issuer,
        "exp": now + (expires_delta or _DEFAULT_SESSION_EXPIRATION),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALGORITHM)


def decode_session_token(token: str, *, secret: str) -> uuid.UUID:
    """Verify a session JWT and return the account id it asserts.

    Only HS256 is accepted, so unsigned (alg=none) tokens are rejected.

    Args:
        token: Encoded JWT string.
        secret: HMAC signing secret.

    Returns:
        Account UUID from the sub claim.

    Raises:
        SessionTokenExpired: Signature valid but exp has passed.
        SessionTokenInvalid: Anything else wrong with the token.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[_JWT_ALGORITHM],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise SessionTokenExpired from exc
    except jwt.InvalidTokenError as exc:
        raise SessionTokenInvalid from exc

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise SessionTokenInvalid from exc
