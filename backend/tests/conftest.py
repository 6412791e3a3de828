import socket
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from datetime import UTC, datetime, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.auth import hash_password
from app.core.config import settings
from app.models import Account, AccountStatus
from app.models.base import Base

# Use separate test database
TEST_DATABASE_URL = settings.database_url.replace(
    settings.database_name, f"{settings.database_name}_test"
)

# Test account ID (consistent across tests for predictable auth)
TEST_ACCOUNT_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

TEST_PASSWORD = "correct-horse"  # nosec B105


def create_test_jwt(
    account_id: uuid.UUID | str = TEST_ACCOUNT_ID,
    *,
    secret: str = TEST_AUTH_SECRET,
    expires_delta: timedelta | None = None,
    iat: datetime | None = None,
    audience: str | None = None,
    issuer: str | None = None,
) -> str:
    """Create a signed session JWT for test authentication.

    Args:
        account_id: Account UUID to encode in the sub claim.
        secret: Signing secret (must match settings.auth_secret in tests).
        expires_delta: Time until expiration. Defaults to 1 hour. Negative
            values produce an already-expired token.
        iat: Issued-at time. Defaults to now.
        audience: aud claim. Defaults to settings.auth_audience.
        issuer: iss claim. Defaults to settings.auth_issuer.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(account_id),
        "aud": audience or settings.auth_audience,
        "iss": issuer or settings.auth_issuer,
        "exp": now + (expires_delta if expires_delta is not None else timedelta(hours=1)),
        "iat": iat or now,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    """Authorization header for a session token."""
    return {"Authorization": f"Bearer {token}"}


def _is_postgres_available() -> bool:
    """Check if PostgreSQL is accepting connections.

    Returns:
        True if PostgreSQL is reachable on port 5432, False otherwise.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("127.0.0.1", 5432))
        sock.close()
        return result == 0
    except OSError:
        return False


# Check once at module load time
_POSTGRES_AVAILABLE = _is_postgres_available()


def skip_if_no_postgres() -> None:
    """Skip test if PostgreSQL is not available.

    Called by fixtures that require database connection.
    """
    if not _POSTGRES_AVAILABLE:
        pytest.skip(
            "PostgreSQL not available on port 5432. "
            "Start database with: docker compose up -d"
        )


# =============================================================================
# Settings overrides (all tests)
# =============================================================================


@pytest.fixture(autouse=True)
def test_auth_settings() -> Iterator[None]:
    """Use the test signing secret and a low bcrypt cost in every test."""
    original_secret = settings.auth_secret
    original_rounds = settings.bcrypt_rounds
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)
    settings.bcrypt_rounds = 4

    yield

    settings.auth_secret = original_secret
    settings.bcrypt_rounds = original_rounds


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Disable rate limiting for all tests.

    The 429 path is tested in test_api_main.py, which re-enables the
    limiter for one request pair.
    """
    from app.core.rate_limiting import limiter

    original_enabled = limiter.enabled
    limiter.enabled = False

    yield

    limiter.enabled = original_enabled


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine.

    Skips test if PostgreSQL is not available (e.g., Docker not running).
    """
    skip_if_no_postgres()

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


AccountFactory = Callable[..., Awaitable[Account]]


@pytest_asyncio.fixture
async def make_account(db_session: AsyncSession) -> AccountFactory:
    """Factory fixture that inserts committed accounts.

    Usage:
        blocked = await make_account(email="b@example.com", status="blocked")
    """
    password_hash = hash_password(TEST_PASSWORD)

    async def _make(
        *,
        email: str | None = None,
        name: str = "Test Account",
        status: str = AccountStatus.ACTIVE.value,
        account_id: uuid.UUID | None = None,
        last_login_time: datetime | None = None,
        registration_time: datetime | None = None,
    ) -> Account:
        account = Account(
            name=name,
            email=email or f"{uuid.uuid4().hex[:12]}@example.com",
            password_hash=password_hash,
            status=status,
            last_login_time=last_login_time,
        )
        if account_id is not None:
            account.id = account_id
        if registration_time is not None:
            account.registration_time = registration_time
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _make


@pytest_asyncio.fixture
async def test_account(make_account: AccountFactory) -> Account:
    """Active account with the fixed TEST_ACCOUNT_ID."""
    return await make_account(
        email="admin@example.com",
        name="Admin",
        account_id=TEST_ACCOUNT_ID,
    )


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def api_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test database, with no credentials.

    Sets up:
    - Test database connection via dependency override
    - httpx.AsyncClient with ASGI transport
    """
    from app.core.database import get_db
    from app.main import app

    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    api_client: AsyncClient,
    test_account: Account,  # noqa: ARG001 - ensures account exists
) -> AsyncClient:
    """Async HTTP client authenticated as TEST_ACCOUNT_ID."""
    api_client.headers.update(bearer(create_test_jwt(TEST_ACCOUNT_ID)))
    return api_client
