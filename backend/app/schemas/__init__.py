"""Pydantic request/response schemas for API endpoints."""

from app.schemas.account import (
    AccountIdsRequest,
    AccountResponse,
    CountResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
)

__all__ = [
    # Requests
    "AccountIdsRequest",
    "LoginRequest",
    "RegisterRequest",
    # Responses
    "AccountResponse",
    "CountResponse",
    "RegisterResponse",
    "SessionResponse",
]
