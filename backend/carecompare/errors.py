# backend/carecompare/errors.py
"""
Problem-document error responses.

Every error leaves the API as an RFC 7807 style body::

    {"type": "about:blank", "title": "Bad Request", "status": 400,
     "detail": "...", "instance": "/api/v1/search/procedures",
     "code": "INVALID_RADIUS", "errors": {...}}

Set STRICT_SCHEMAS=1 to serve them as application/problem+json.
"""

from http import HTTPStatus
import logging
import os
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException, RepositoryException

logger = logging.getLogger(__name__)


def _title_from_status(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _problem(
    *,
    status: int,
    detail: Optional[str] = None,
    instance: Optional[str] = None,
    code: Optional[str] = None,
    errors: Optional[Any] = None,
) -> Dict[str, Any]:
    problem: Dict[str, Any] = {
        "type": "about:blank",
        "title": _title_from_status(status),
        "status": status,
        "detail": detail or "",
        "instance": instance or "",
    }
    if code:
        problem["code"] = code
    if errors is not None:
        problem["errors"] = jsonable_encoder(errors)
    return problem


def _split_detail(detail: Any) -> Tuple[Optional[str], Optional[str], Optional[Any]]:
    """(message, code, errors) from an HTTPException detail."""
    if isinstance(detail, dict):
        code = detail.get("code")
        message = detail.get("message") or detail.get("detail")
        return (
            message if isinstance(message, str) else None,
            code if isinstance(code, str) else None,
            detail.get("details") or detail.get("errors"),
        )
    if detail is None:
        return None, None, None
    return str(detail), None, None


def _use_problem_media_type() -> bool:
    return os.getenv("STRICT_SCHEMAS", "").strip().lower() in {"1", "true", "yes", "on"}


def register_error_handlers(app: FastAPI) -> None:
    media_type = "application/problem+json" if _use_problem_media_type() else "application/json"

    def respond(problem: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
        return JSONResponse(
            problem, status_code=problem["status"], media_type=media_type, headers=headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message, code, errors = _split_detail(exc.detail)
        problem = _problem(
            status=exc.status_code,
            detail=message,
            instance=request.url.path,
            code=code,
            errors=errors,
        )
        return respond(problem, getattr(exc, "headers", None))

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        return await http_exception_handler(request, exc.to_http_exception())

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(
        request: Request, exc: RepositoryException
    ) -> JSONResponse:
        logger.error("Repository failure on %s: %s", request.url.path, exc)
        return respond(
            _problem(
                status=500,
                detail="Error performing search",
                instance=request.url.path,
                code="repository_error",
            )
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return respond(
            _problem(
                status=422,
                detail="Request validation failed",
                instance=request.url.path,
                code="validation_error",
                errors=exc.errors(),
            )
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return respond(
            _problem(
                status=500,
                detail="Internal Server Error",
                instance=request.url.path,
                code="internal_server_error",
            )
        )
