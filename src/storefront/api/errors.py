"""Translation of storefront, Protean and storage failures into HTTP responses.

Every error body has the shape ``{"error": {"code", "message", "details"}}``.
Driver messages are logged but never returned to the client.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import (
    Forbidden,
    InsufficientStock,
    NotFound,
    OrderNumberExhausted,
    ProductUnavailable,
    StorageTimeout,
    StorageUnavailable,
    StorefrontError,
    Unauthenticated,
    ValidationFailed,
)
from storefront.storage import translate_storage_error
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[type, int] = {
    Unauthenticated: 401,
    Forbidden: 403,
    NotFound: 404,
    ProductUnavailable: 409,
    InsufficientStock: 409,
    ValidationFailed: 400,
    OrderNumberExhausted: 503,
    StorageTimeout: 504,
    StorageUnavailable: 503,
}


def error_response(status_code: int, code: str, message: str, details: list | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details or []}},
    )


def validation_details(messages: dict) -> list[str]:
    details = []
    for field, errors in messages.items():
        for error in errors if isinstance(errors, list) else [errors]:
            details.append(f"{field}: {error}")
    return details


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code)
    return error_response(status_code, exc.code, exc.message, exc.details)


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    details = validation_details(exc.messages)
    message = details[0] if details else "Invalid request"
    return error_response(400, ValidationFailed.code, message, details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}" for error in exc.errors()
    ]
    return error_response(400, ValidationFailed.code, "Invalid request", details)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, NotFound.code, "The requested record does not exist")


async def conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("write_conflict", path=request.url.path)
    return error_response(409, "CONFLICT", "The record was changed by another request, please retry")


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    translated = translate_storage_error(exc, request.url.path) or StorageUnavailable(request.url.path)
    logger.error("storage_failure", path=request.url.path, error_type=type(exc).__name__, error=str(exc))
    return error_response(ERROR_STATUS_CODES[type(translated)], translated.code, translated.message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return error_response(500, "INTERNAL_ERROR", "Something went wrong, please try again")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, domain_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, conflict_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
