"""Application configuration loaded from environment variables.

Settings for the database connection, session signing, verification emails
and the HTTP listener. Uses pydantic-settings for validation and .env file
support.
"""

from datetime import timedelta

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure defaults that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "postgres"  # nosec B105
_INSECURE_DEFAULT_SECRET = "dev-secret-change-me-before-deploying-anywhere"  # nosec B105

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32

_ASYNC_DRIVER_PREFIX = "postgresql+asyncpg://"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    # DATABASE_URL (Render/Heroku style) wins over the individual parameters.
    database_url_override: str = Field("", validation_alias="DATABASE_URL")
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "user_management"
    database_user: str = "postgres"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # None = derive: required for DATABASE_URL and production, off otherwise
    database_ssl_required: bool | None = None
    database_pool_size: int = 20
    database_pool_timeout: float = 10.0
    database_command_timeout: float = 30.0

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = Field(5000, validation_alias="PORT")

    # CORS (Security)
    # Default allows the Vite dev server
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Sessions (JWT bearer tokens)
    auth_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_SECRET)
    auth_issuer: str = "user-directory"
    auth_audience: str = "user-directory"
    session_ttl_hours: int = 24

    # Credentials
    bcrypt_rounds: int = Field(12, ge=4, le=31)

    # Email verification
    verification_token_ttl_hours: int = 24
    email_from: str = "noreply@localhost"
    resend_api_key: SecretStr = SecretStr("")

    # Public base URL used to build verification links
    app_url: str = "http://localhost:5000"

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_auth: str = "10/minute"  # /register, /login, /verify-email
    rate_limit_enabled: bool = True  # Disable for testing

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            url = self.database_url_override
            for prefix in ("postgres://", "postgresql://"):
                if url.startswith(prefix):
                    return _ASYNC_DRIVER_PREFIX + url[len(prefix) :]
            return url
        return (
            f"{_ASYNC_DRIVER_PREFIX}{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def session_ttl(self) -> timedelta:
        """Lifetime of an issued session token."""
        return timedelta(hours=self.session_ttl_hours)

    @property
    def database_ssl(self) -> bool:
        """Whether connections to the database must use TLS."""
        if self.database_ssl_required is not None:
            return self.database_ssl_required
        return bool(self.database_url_override) or self.environment == "production"

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate production security requirements.

        Security: Prevents deployment with known insecure defaults.
        Checks:
        - TTLs must be positive (all environments)
        - CORS must not use wildcard origin (all environments)
        - AUTH_SECRET must be set, non-default and >= 32 chars in production
        - Database password must not be the default in production, unless
          DATABASE_URL carries its own credentials
        """
        if self.session_ttl_hours <= 0:
            msg = f"SESSION_TTL_HOURS must be positive. Got: {self.session_ttl_hours}"
            raise ValueError(msg)
        if self.verification_token_ttl_hours <= 0:
            msg = (
                "VERIFICATION_TOKEN_TTL_HOURS must be positive. "
                f"Got: {self.verification_token_ttl_hours}"
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "The Authorization header is only accepted from known origins."
            )
            raise ValueError(msg)

        if self.environment == "production":
            secret_value = self.auth_secret.get_secret_value()
            if not secret_value or secret_value == _INSECURE_DEFAULT_SECRET:
                msg = (
                    "AUTH_SECRET must be set in production. "
                    'Generate with: python -c "import secrets; '
                    'print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters for adequate security."
                )
                raise ValueError(msg)

            if (
                not self.database_url_override
                and self.database_password == _INSECURE_DEFAULT_PASSWORD
            ):
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD or DATABASE_URL to a secure value."
                )
                raise ValueError(msg)

        return self


settings = Settings()
