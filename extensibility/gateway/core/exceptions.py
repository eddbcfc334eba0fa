"""
Custom exception classes.

Represent the error kinds an extensibility point invocation can end with.
"""

import logging
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

BODY_NOT_OBJECT = "Body received by extensibility point is not an object"
USER_NOT_OBJECT = "Body.user received by extensibility point is not an object"
CONTEXT_NOT_OBJECT = "Body.context received by extensibility point is not an object"
CONNECTION_NOT_OBJECT = "Body.context.connection received by extensibility point is not an object"
UNAUTHORIZED = "Unauthorized extensibility point"
RESULT_NOT_OBJECT = "Result received from extensibility point is not an object"


class ExtensibilityError(Exception):
    """Base exception class for extensibility point invocation."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class CompilationError(ExtensibilityError):
    """Raised when a hook script cannot be turned into a handler."""

    def __init__(self, detail: str, filename: str = "<script>"):
        self.filename = filename
        super().__init__(f"Failed to compile {filename}: {detail}")


class ValidationError(ExtensibilityError):
    """Raised when the request body does not have the required shape."""


class AuthorizationError(ExtensibilityError):
    """Raised when the bearer credential is missing or wrong."""

    def __init__(self, message: str = UNAUTHORIZED):
        super().__init__(message)


class InternalError(ExtensibilityError):
    """Raised for failures that must only be reported by message."""


class ExtensionPointNotFoundError(ExtensibilityError):
    """Raised when an extension point name is not registered."""

    def __init__(self, name: str):
        self.extension_point = name
        super().__init__(f"Extension point not found: {name}")


class DomainError(ExtensibilityError):
    """
    Application-level failure signalled by a hook script.

    Subclasses set ``name`` to the identifier exposed to the caller.
    """

    name = "DomainError"

    def __init__(self, message: str = "", friendly_message: Optional[str] = None):
        self.friendly_message = friendly_message
        super().__init__(message)


class PreUserRegistrationError(DomainError):
    """Raised by pre-user-registration hooks to reject a signup."""

    name = "PreUserRegistrationError"


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation errors.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
