"""
Where: extensibility/gateway/exceptions.py
What: Gateway exception handler registration and custom HTTP mappings.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    CompilationError,
    ExtensionPointNotFoundError,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)


async def extension_point_not_found_handler(request: Request, exc: ExtensionPointNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"message": str(exc)},
    )


async def compilation_error_handler(request: Request, exc: CompilationError):
    return JSONResponse(
        status_code=500,
        content={"message": "Extensibility point script failed to compile"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ExtensionPointNotFoundError, extension_point_not_found_handler)
    app.add_exception_handler(CompilationError, compilation_error_handler)
