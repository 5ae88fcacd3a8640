import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base class for rejected registry calls.

    Every rejection is synchronous and leaves the registry state untouched.
    """

    message = "Registry call rejected"
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "registry_error"

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)


class NotAuthorized(RegistryError):
    message = "You are not authorized to issue certificates"
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "not_authorized"


class Unauthorized(NotAuthorized):
    """Raised when an owner-only operation is called by anyone else."""

    message = "Only the owner can authorize issuers"
    error_type = "unauthorized"


class DuplicateId(RegistryError):
    message = "Certificate with this ID already exists"
    status_code = status.HTTP_409_CONFLICT
    error_type = "duplicate_id"


class DuplicateContent(RegistryError):
    message = "This hash is already associated with another certificate"
    status_code = status.HTTP_409_CONFLICT
    error_type = "duplicate_content"


class LengthMismatch(RegistryError):
    message = "Input arrays must have the same length"
    error_type = "length_mismatch"


class ErrorResponse:
    """JSON body returned for every rejected request."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        request: Request | None = None,
        details: dict[str, Any] | None = None,
        error_type: str = "error",
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        self.details = details or {}

        if request:
            self.details.update(
                {
                    "method": request.method,
                    "path": request.url.path,
                }
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "error_message": self.message,
            "details": self.details,
            "error_type": self.error_type,
        }


def format_validation_error(
    exc: RequestValidationError,
    request: Request,
) -> ErrorResponse:
    enriched: list[dict[str, Any]] = []

    for err in exc.errors():
        loc_tuple: tuple[Any, ...] = err["loc"]
        enriched.append(
            {
                "location": " -> ".join(str(x) for x in loc_tuple),
                "field": loc_tuple[-1] if len(loc_tuple) > 1 else None,
                "message": err["msg"],
                "type": err["type"],
            }
        )

    return ErrorResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        request=request,
        details={"errors": enriched},
        error_type="validation_error",
    )


async def registry_exception_handler(
    request: Request, exc: RegistryError
) -> JSONResponse:
    error_response = ErrorResponse(
        status_code=exc.status_code,
        message=exc.message,
        request=request,
        details=dict(exc.details),
        error_type=exc.error_type,
    )
    logger.warning(f"Registry call rejected: {error_response.to_dict()}")
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error_response = format_validation_error(exc, request)
    logger.warning("Validation error", extra={"error": error_response.to_dict()})
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.to_dict(),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions."""
    error_response = ErrorResponse(
        status_code=exc.status_code, message=str(exc.detail), error_type="http_error"
    )
    logger.warning(f"HTTP error: {error_response.to_dict()}")
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.to_dict(),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_response = ErrorResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=str(exc),
        request=request,
        details={"exception_type": type(exc).__name__},
        error_type="server_error",
    )
    logger.error("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.to_dict(),
    )
