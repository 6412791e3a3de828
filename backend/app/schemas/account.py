"""Account request/response schemas.

JSON field names are camelCase on the wire (accountIds, sessionToken,
lastLoginTime, registrationTime); Python attributes stay snake_case.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.account import Account


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ===================================================================
# Requests
# ===================================================================


class RegisterRequest(_CamelModel):
    """Request body for POST /register.

    Any non-empty password is accepted.
    """

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(_CamelModel):
    """Request body for POST /login."""

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class AccountIdsRequest(_CamelModel):
    """Request body for the bulk block/unblock/delete endpoints.

    Attributes:
        account_ids: Target account UUIDs. Must not be empty.
    """

    account_ids: list[UUID] = Field(..., min_length=1, description="Account IDs")


# ===================================================================
# Responses
# ===================================================================


class AccountResponse(_CamelModel):
    """Public view of an account. Never includes the password hash."""

    id: UUID
    name: str
    email: str
    status: str
    last_login_time: datetime | None = None
    registration_time: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            status=account.status,
            last_login_time=account.last_login_time,
            registration_time=account.registration_time,
        )


class RegisterResponse(_CamelModel):
    """Payload of a successful registration."""

    message: str
    account: AccountResponse


class SessionResponse(_CamelModel):
    """Payload of a successful login.

    Attributes:
        session_token: Bearer token for the Authorization header.
    """

    message: str
    session_token: str
    account: AccountResponse


class CountResponse(_CamelModel):
    """Payload of a bulk operation."""

    message: str
    count: int
