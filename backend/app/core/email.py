"""Email sending via Resend API.

Verification emails are fire-and-forget: callers schedule
send_verification_email as a background task and never see its outcome.
"""

import logging
from html import escape
from urllib.parse import quote, urlencode

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


def build_verification_url(token: str) -> str:
    """Public link that redeems a verification token."""
    params = urlencode({"token": token}, quote_via=quote)
    return f"{settings.app_url.rstrip('/')}/api/verify-email?{params}"


async def send_verification_email(*, to_email: str, name: str, token: str) -> None:
    """Send an account verification email via Resend.

    Never raises. A missing API key or any delivery error is logged and
    dropped; the account stays unverified until a link is redeemed.

    Args:
        to_email: Recipient email address.
        name: Recipient display name for the greeting.
        token: Plain (unhashed) verification token.
    """
    api_key = settings.resend_api_key.get_secret_value()
    if not api_key:
        logger.warning("RESEND_API_KEY not set; verification email not sent")
        return

    verify_url = build_verification_url(token)
    ttl_hours = settings.verification_token_ttl_hours

    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                _RESEND_API_URL,
                headers={"Authorization": f"Bearer {api_key}"},
                json={
                    "from": settings.email_from,
                    "to": to_email,
                    "subject": "Verify your email address",
                    "html": (
                        f"<h2>Welcome, {escape(name)}!</h2>"
                        "<p>Please verify your email address by clicking the link below:</p>"
                        f'<p><a href="{escape(verify_url)}">Verify Email</a></p>'
                        f"<p>This link expires in {ttl_hours} hours.</p>"
                    ),
                    "text": (
                        f"Welcome, {name}!\n\n"
                        f"Verify your email address:\n\n{verify_url}\n\n"
                        f"This link expires in {ttl_hours} hours."
                    ),
                },
                timeout=_RESEND_TIMEOUT,
            )
            resp.raise_for_status()
    except Exception:
        logger.warning("Failed to send verification email", exc_info=True)
