import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from app.utils.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, code: str, details: list | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"code": code, "details": details, "field": None},
        },
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle all AppException subclasses (validation, auth, not found, conflicts)."""
    detail = exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": detail.get("message", "An error occurred"),
            "error": detail.get("error", {"code": ErrorCode.INTERNAL_SERVER_ERROR}),
        },
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors (422).
    Converts FastAPI's default validation error format into our standardized format.
    """
    details = []
    for error in exc.errors():
        # loc is a tuple like ("body", "email") or ("query", "hp_min")
        loc = error.get("loc", [])
        field = ".".join(str(l) for l in loc if l not in ("body", "query", "path")) if loc else "unknown"
        details.append({
            "field": field,
            "message": error.get("msg", "Invalid value"),
        })

    return _error(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error. Please check your input.",
        ErrorCode.VALIDATION_ERROR,
        details,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Unique / foreign key violations that escaped the services.
    Prevents raw DB errors from leaking to the client.
    """
    logger.warning(f"IntegrityError on {request.method} {request.url.path}: {exc.orig}")
    return _error(status.HTTP_409_CONFLICT, "A record with this data already exists.",
                  ErrorCode.DUPLICATE_ENTRY)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all for unexpected failures, including a lost database connection.
    Logs the full traceback, returns a safe 500 response.
    """
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorCode.INTERNAL_SERVER_ERROR,
    )
