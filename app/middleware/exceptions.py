from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import BlobStorageError
from app.schemas.response import ErrorResponse, ErrorDetail
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        409: "CONFLICT",
        413: "PAYLOAD_TOO_LARGE",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
        501: "NOT_IMPLEMENTED",
        502: "STORAGE_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _error_response(request: Request, request_id: str, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    error_response = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=str(request.url),
        request_id=request_id
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(error_response))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[{request_id}] Validation error: {errors}", extra={"request_id": request_id})
    return _error_response(
        request, request_id, 422, "VALIDATION_ERROR", "Request validation failed",
        details={"validation_errors": errors}
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    logger.warning(f"[{request_id}] HTTP {exc.status_code}: {exc.detail}", extra={"request_id": request_id})
    response = _error_response(
        request, request_id, exc.status_code, _get_error_code(exc.status_code),
        exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    )
    if getattr(exc, "headers", None):
        response.headers.update(exc.headers)
    return response

async def blob_storage_exception_handler(request: Request, exc: BlobStorageError):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Blob storage failure: {exc}", extra={"request_id": request_id})
    return _error_response(
        request, request_id, 502, "STORAGE_ERROR", "File storage is unavailable, please try again later.",
        details={"key": exc.key} if exc.key else None
    )

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return _error_response(
        request, request_id, 500, "INTERNAL_SERVER_ERROR", "An unexpected error occurred",
        details={"error_type": type(exc).__name__}
    )
