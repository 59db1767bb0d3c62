"""
Exception handlers — every error leaves the API as ``{"error": ...}`` JSON.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import ApiError, ValidationError

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> List[Dict[str, str]]:
    details = []
    for issue in exc.errors():
        loc = [str(part) for part in issue.get("loc", ())]
        if issue.get("type") == "json_invalid":
            # loc is ("body", <char offset>)
            loc = loc[:1]
        elif len(loc) > 1:
            # drop the "body" / "query" / "path" prefix
            loc = loc[1:]
        details.append({"field": ".".join(loc), "message": issue.get("msg", "is invalid")})
    return details


def register_exception_handlers(app: FastAPI, expose_stack: bool) -> None:
    """Attach handlers for the API error taxonomy."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s — %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError(details=_validation_details(exc))
        logger.debug("%s %s — invalid payload: %s", request.method, request.url.path, error.details)
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body: Dict[str, Any] = {"error": "Internal Server Error"}
        if expose_stack:
            body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
