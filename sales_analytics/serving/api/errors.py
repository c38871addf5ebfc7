"""
API Error Handling

Maps AnalyticsError and framework errors onto the response envelope.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from sales_analytics.analytics.schemas import ApiResponse, FieldError
from sales_analytics.exceptions import AnalyticsError, InternalError

logger = structlog.get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: Optional[List[Dict[str, str]]] = None,
) -> JSONResponse:
    """Failure envelope; `errors` is omitted when empty."""
    body = ApiResponse[Any](
        success=False,
        message=message,
        errors=[FieldError(**e) for e in errors] if errors else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@contextmanager
def internal_errors(operation: str) -> Iterator[None]:
    """
    Convert unexpected failures inside a route into InternalError.

    AnalyticsError passes through unchanged; anything else is logged with its
    traceback and replaced by the generic 500.
    """
    try:
        yield
    except AnalyticsError:
        raise
    except Exception as e:
        logger.exception(
            "Request failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise InternalError() from e


def _field_name(loc) -> str:
    names = [str(part) for part in loc if isinstance(part, str) and part not in ("body", "query", "path")]
    return names[-1] if names else "body"


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Server error", path=request.url.path, error=exc.message)
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
            error_type=type(exc).__name__,
        )
    return error_response(exc.status_code, exc.message, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    logger.info("Request validation failed", path=request.url.path, errors=errors)
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation errors", errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    error = InternalError()
    return error_response(error.status_code, error.message)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an application."""
    app.add_exception_handler(AnalyticsError, analytics_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
