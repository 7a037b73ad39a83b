"""
Error envelope shared by every endpoint.

Every failure leaves the API as ``{"error": {"code", "message", "fields"?}}``
with one of three codes. Handlers are registered on the app so routes only
raise domain exceptions and never build error responses themselves.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend_fastapi.api.schemas import ErrorDetail, ErrorResponse, FieldErrorOut
from core.domain.errors import FieldError, TaskNotFoundError, TaskValidationError

logger = logging.getLogger(__name__)

BAD_REQUEST = "BAD_REQUEST"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"

VALIDATION_FAILED_MESSAGE = "Validation failed"
TASK_NOT_FOUND_MESSAGE = "Task not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(
    status_code: int,
    code: str,
    message: str,
    fields: list[FieldError] | None = None,
) -> JSONResponse:
    detail = ErrorDetail(code=code, message=message)
    if fields is not None:
        detail.fields = [FieldErrorOut(field=f.field, message=f.message) for f in fields]
    body = ErrorResponse(error=detail).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _field_name(loc: tuple) -> str:
    # ("path", "task_id") -> "task_id"; a bare ("body",) stays "body"
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


async def _handle_task_validation(request: Request, exc: TaskValidationError) -> JSONResponse:
    logger.info(f"⚠️ {request.method} {request.url.path}: {len(exc.errors)} invalid field(s)")
    return error_response(
        status.HTTP_400_BAD_REQUEST, BAD_REQUEST, VALIDATION_FAILED_MESSAGE, exc.errors
    )


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [FieldError(_field_name(tuple(err["loc"])), err["msg"]) for err in exc.errors()]
    return error_response(
        status.HTTP_400_BAD_REQUEST, BAD_REQUEST, VALIDATION_FAILED_MESSAGE, fields
    )


async def _handle_not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    logger.info(f"🔍 {exc}")
    return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND, TASK_NOT_FOUND_MESSAGE)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, NOT_FOUND, "Not found")
    if exc.status_code >= 500:
        return error_response(exc.status_code, INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)
    return error_response(exc.status_code, BAD_REQUEST, str(exc.detail))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskValidationError, _handle_task_validation)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(TaskNotFoundError, _handle_not_found)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(Exception, _handle_unexpected)
