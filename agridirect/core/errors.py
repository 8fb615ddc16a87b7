"""
Error taxonomy shared by the services and routers.

Services raise these; `register_error_handlers` turns them into
`{"status": "error", "code": ..., "message": ...}` responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class InvalidIdentifierError(ValidationError):
    code = "invalid_identifier"


class MissingImageError(ValidationError):
    code = "missing_image"


class InvalidOwnerError(ValidationError):
    code = "invalid_owner"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "authentication_failed"


class OwnershipError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "not_owner"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class DependencyFailure(AppError):
    """Store or artifact storage I/O failed; the request may be retried."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "dependency_failure"


class ArtifactStorageError(DependencyFailure):
    code = "artifact_storage_failure"


def error_body(code: str, message: str) -> dict:
    return {"status": "error", "code": code, "message": message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, DependencyFailure):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.code, exc.message))


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_body(DependencyFailure.code, "Storage temporarily unavailable, retry later"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(OperationalError, store_error_handler)
    app.add_exception_handler(PoolTimeoutError, store_error_handler)


def validation_error_from(exc) -> ValidationError:
    """Flatten pydantic/FastAPI validation errors into one ValidationError."""
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form"))
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return ValidationError("; ".join(problems) or "Invalid input")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_from(exc)
    return JSONResponse(status_code=error.status_code, content=error_body(error.code, error.message))
