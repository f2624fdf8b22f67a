from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.application.errors import AppError, InfrastructureError, ValidationError

logger = logging.getLogger(__name__)


def _error_payload(exc: AppError) -> dict:
    payload = {"code": exc.code, "message": exc.message}
    if exc.details is not None:
        payload["details"] = dict(exc.details)
    return payload


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:  # noqa: WPS430
        logger.info(
            "Application error handled: %s - %s (status: %d)",
            exc.code,
            exc.message,
            exc.status_code,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=exc.status_code, content=_error_payload(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(  # noqa: WPS430
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError("Malformed request body", details={"errors": exc.errors()})
        return JSONResponse(
            status_code=error.status_code,
            content=jsonable_encoder(_error_payload(error)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: WPS430
        payload = {"code": "http_error", "message": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:  # noqa: WPS430
        logger.error("Unexpected error on %s", request.url.path, exc_info=exc)
        error = InfrastructureError("Unexpected server error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload(error)
        )
