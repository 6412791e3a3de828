"""API error classes.

Every failure the API reports maps to one of these. Exception handlers in
``app.main`` turn them into the ``{"error": {...}, "redirectToLogin": ...}``
envelope. Session failures set ``redirect_to_login``; input failures do not.
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
        redirect_to_login: True when the client must discard its session.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
        *,
        redirect_to_login: bool = False,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.redirect_to_login = redirect_to_login
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for missing or empty required fields.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedError(APIError):
    """Authentication required (401).

    Use when no bearer credentials were provided at all. The client has no
    session to discard, so no redirect is signalled.
    """

    def __init__(self, message: str = "Access denied. No token provided.") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class InvalidSessionError(APIError):
    """Session token is malformed or has a bad signature (401)."""

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_TOKEN",
            message="Invalid token.",
            status_code=401,
            redirect_to_login=True,
        )


class SessionExpiredError(APIError):
    """Session token has expired (401)."""

    def __init__(self) -> None:
        super().__init__(
            code="TOKEN_EXPIRED",
            message="Token expired. Please login again.",
            status_code=401,
            redirect_to_login=True,
        )


class AccountGoneError(APIError):
    """Session references an account that no longer exists (401)."""

    def __init__(self) -> None:
        super().__init__(
            code="ACCOUNT_NOT_FOUND",
            message="User account not found. Please login again.",
            status_code=401,
            redirect_to_login=True,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403)."""

    def __init__(
        self,
        message: str = "Access denied",
        *,
        code: str = "FORBIDDEN",
        redirect_to_login: bool = False,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=403,
            redirect_to_login=redirect_to_login,
        )


class SessionBlockedError(ForbiddenError):
    """Authenticated account has been blocked since the session began (403)."""

    def __init__(self) -> None:
        super().__init__(
            "Your account has been blocked. Please contact support.",
            code="ACCOUNT_BLOCKED",
            redirect_to_login=True,
        )


class AccountBlockedError(ForbiddenError):
    """Login attempted on a blocked account (403).

    No redirect: the caller is already on the login screen.
    """

    def __init__(self) -> None:
        super().__init__(
            "Your account has been blocked",
            code="ACCOUNT_BLOCKED",
        )


class InvalidCredentialsError(APIError):
    """Unknown email or wrong password (401).

    Security: both cases share one message so the response does not reveal
    which emails are registered.
    """

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_CREDENTIALS",
            message="Invalid email or password",
            status_code=401,
        )


class NotFoundError(APIError):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Accepts custom code for specific conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class EmailTakenError(ConflictError):
    """Email already belongs to another account (409)."""

    def __init__(self) -> None:
        super().__init__(code="EMAIL_TAKEN", message="Email already registered")


class InvalidOrExpiredTokenError(APIError):
    """Verification token is unknown, already used, or expired (400)."""

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_OR_EXPIRED_TOKEN",
            message="Invalid or expired verification token",
            status_code=400,
        )
