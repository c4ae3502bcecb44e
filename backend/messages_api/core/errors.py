from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError


class ApiError(Exception):
    """An error reported to the caller as `{"success": false, "error": ...}`.

    Extra keyword arguments are merged into the response body.
    """

    def __init__(self, status_code: int, error: str, **extra):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.extra = extra


class DatabaseInitError(RuntimeError):
    pass


def describe_error(exc: BaseException) -> str:
    """Return the driver's own message for database errors."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        # async adapters re-raise the driver exception `from` the original
        exc = exc.orig.__cause__ or exc.orig
    return str(exc) or exc.__class__.__name__


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, **exc.extra, "error": exc.error},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )


def register_error_handlers(app) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
