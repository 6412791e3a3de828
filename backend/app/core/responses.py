"""Response envelope models.

Consistent response format for all JSON endpoints. Session failures carry
redirectToLogin next to the error.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources and collections.

    All success responses use {"data": ...} envelope.

    Usage:
        @router.get("/users/me")
        async def get_me(account: CurrentAccount) -> DataResponse[AccountResponse]:
            return DataResponse(data=AccountResponse.from_account(account))
    """

    data: T


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    All errors use {"error": {...}, "redirectToLogin": bool}.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message),
                redirect_to_login=exc.redirect_to_login,
            ).model_dump(by_alias=True),
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    error: ErrorDetail
    redirect_to_login: bool = Field(False, alias="redirectToLogin")
