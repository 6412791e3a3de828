"""Registration, login, and email verification endpoints.

Endpoints:
- POST /register - create an unverified account, email a verification link
- POST /login - exchange email + password for a bearer session token
- GET /verify-email - redeem a verification link (HTML response)

All three are unauthenticated and rate limited per client.
"""

import logging
from html import escape

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import HTMLResponse

from app.api.deps import DbSession
from app.core.config import settings
from app.core.email import send_verification_email
from app.core.errors import InvalidOrExpiredTokenError
from app.core.rate_limiting import limiter
from app.core.responses import DataResponse
from app.models import AccountStatus
from app.schemas.account import (
    AccountResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
)
from app.services.account_lifecycle_service import AccountLifecycleService
from app.services.verification_service import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter()


# ===================================================================
# HTML pages
# ===================================================================


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title></head>"
        f"<body><h1>{escape(title)}</h1><p>{escape(body)}</p>"
        '<p><a href="/">Go to login</a></p></body></html>'
    )


def _verification_failed_page() -> HTMLResponse:
    return HTMLResponse(
        _page(
            "Verification failed",
            "This verification link is invalid or has expired.",
        ),
        status_code=400,
    )


# ===================================================================
# POST /register
# ===================================================================


@router.post("/register", status_code=201)
@limiter.limit(lambda: settings.rate_limit_auth)
async def register(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: DbSession,
) -> DataResponse[RegisterResponse]:
    """Register a new account.

    The account starts unverified. The verification email is sent after
    the response, and its failure never affects the result.
    """
    account, plain_token = await AccountLifecycleService(db).register(
        name=body.name,
        email=body.email,
        password=body.password,
    )

    background_tasks.add_task(
        send_verification_email,
        to_email=account.email,
        name=account.name,
        token=plain_token,
    )

    return DataResponse(
        data=RegisterResponse(
            message="Registration successful. Please check your email to verify your account.",
            account=AccountResponse.from_account(account),
        )
    )


# ===================================================================
# POST /login
# ===================================================================


@router.post("/login")
@limiter.limit(lambda: settings.rate_limit_auth)
async def login(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: LoginRequest,
    db: DbSession,
) -> DataResponse[SessionResponse]:
    """Log in with email and password.

    Unverified accounts may log in; blocked accounts may not.
    """
    token, account = await AccountLifecycleService(db).login(
        email=body.email,
        password=body.password,
    )
    return DataResponse(
        data=SessionResponse(
            message="Login successful",
            session_token=token,
            account=AccountResponse.from_account(account),
        )
    )


# ===================================================================
# GET /verify-email
# ===================================================================


@router.get("/verify-email", response_class=HTMLResponse)
@limiter.limit(lambda: settings.rate_limit_auth)
async def verify_email(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    db: DbSession,
    token: str | None = None,
) -> HTMLResponse:
    """Redeem an emailed verification link.

    Renders a success page (200) or a failure page (400) for a missing,
    unknown, used, or expired token.
    """
    if not token:
        return _verification_failed_page()

    try:
        account = await VerificationService(db).redeem(token)
    except InvalidOrExpiredTokenError:
        return _verification_failed_page()

    if account.status == AccountStatus.BLOCKED.value:
        message = "Your email is verified, but your account is currently blocked."
    else:
        message = "Your email has been verified. You can now log in."
    return HTMLResponse(_page("Email verified", message), status_code=200)
