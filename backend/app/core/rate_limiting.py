"""Rate limiting configuration using slowapi.

Requests carrying a decodable bearer session are keyed on the account id;
everything else falls back to the client IP.

Usage in routers:
    from app.core.rate_limiting import limiter

    @router.post("/login")
    @limiter.limit(lambda: settings.rate_limit_auth)
    async def login(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.core.auth import SessionTokenError, decode_session_token
from app.core.config import settings
from app.core.responses import ErrorDetail, ErrorResponse

_BEARER_PREFIX = "bearer "


def _rate_limit_key_func(request: Request) -> str:
    """Get rate limit key from request.

    Key format:
    - Valid bearer session: "account:{sub}"
    - No/invalid session: "unauth:{ip}"

    Only the signature and expiry are checked here; the live account check
    happens in the session gate.
    """
    header = request.headers.get("authorization", "")
    if header.lower().startswith(_BEARER_PREFIX):
        token = header[len(_BEARER_PREFIX) :].strip()
        try:
            account_id = decode_session_token(
                token, secret=settings.auth_secret.get_secret_value()
            )
            return f"account:{account_id}"
        except SessionTokenError:
            pass

    return f"unauth:{get_remote_address(request)}"


# In-memory storage; single-instance deployment
limiter = Limiter(
    key_func=_rate_limit_key_func,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Returns 429 Too Many Requests with the standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # exc.detail looks like "10 per 1 minute"; fall back to 60 seconds
    try:
        retry_after = str(exc.detail.split()[-1])
        int(retry_after.rstrip("s"))
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    body = ErrorResponse(
        error=ErrorDetail(
            code="RATE_LIMITED",
            message=f"Rate limit exceeded: {exc.detail}",
        )
    )
    return JSONResponse(
        status_code=429,
        content=body.model_dump(by_alias=True),
        headers={"Retry-After": retry_after},
    )
