"""Enveloppes de réponse standardisées et gestionnaires d'erreurs de l'API.

Succès: `{"success": true, "requestId": ..., "data": ...}`.
Échec: `{"success": false, "requestId": ..., "code": ..., "message": ...[, "details": ...]}`.
Le texte brut des exceptions de bibliothèques n'est jamais renvoyé au client.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from content_engine.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_OK,
)
from content_engine.domain.errors import ContentEngineError

log = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Beklenmeyen bir hata oluştu"


class ErrorCodes:
    """Codes d'erreur hors taxonomie du domaine."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    HTTP_ERROR = "HTTP_ERROR"


_HTTP_ERROR_CODES = {
    400: ErrorCodes.BAD_REQUEST,
    404: ErrorCodes.NOT_FOUND,
    405: ErrorCodes.METHOD_NOT_ALLOWED,
    422: ErrorCodes.VALIDATION_ERROR,
    500: ErrorCodes.INTERNAL_ERROR,
}


def extract_request_id(request: Request) -> str | None:
    """Identifiant posé par `RequestIDMiddleware`, sinon en-tête brut."""
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("X-Request-ID")


def success_response(request: Request, data: Any, status_code: int = HTTP_OK) -> JSONResponse:
    """Enveloppe de succès."""
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "requestId": extract_request_id(request), "data": data},
    )


def create_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Enveloppe d'échec; `details` n'est inclus que s'il est non vide."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "requestId": extract_request_id(request),
            "code": code,
            "message": message,
            **({"details": details} if details else {}),
        },
    )


def handle_content_engine_error(request: Request, exc: ContentEngineError) -> JSONResponse:
    """Erreurs du domaine: code, statut et détails portés par l'exception."""
    log.error(
        "Content engine error",
        extra={
            "code": exc.code,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_id": extract_request_id(request),
        },
    )
    response = create_error_response(
        request, exc.status_code, exc.code, exc.message, exc.details
    )
    retry_after = (exc.details or {}).get("retry_after")
    if retry_after is not None:
        response.headers["Retry-After"] = str(retry_after)
    return response


def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Corps de requête invalide: VALIDATION_ERROR / 400 avec la liste des champs fautifs."""
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    return create_error_response(
        request,
        HTTP_BAD_REQUEST,
        ErrorCodes.VALIDATION_ERROR,
        "Geçersiz istek",
        {"fields": fields},
    )


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException FastAPI/Starlette (404 de routage, 405...)."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, ErrorCodes.HTTP_ERROR)
    log.warning(
        "HTTP exception occurred",
        extra={"code": code, "status_code": exc.status_code,
               "request_id": extract_request_id(request)},
    )
    return create_error_response(request, exc.status_code, code, str(exc.detail))


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Exceptions inattendues: INTERNAL_ERROR / 500 avec un message générique."""
    log.error(
        "Unexpected error occurred",
        extra={
            "code": ErrorCodes.INTERNAL_ERROR,
            "request_id": extract_request_id(request),
            "exception_type": type(exc).__name__,
        },
        exc_info=True,
    )
    return create_error_response(
        request,
        HTTP_INTERNAL_SERVER_ERROR,
        ErrorCodes.INTERNAL_ERROR,
        GENERIC_ERROR_MESSAGE,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Enregistre l'ensemble des gestionnaires sur l'application."""
    app.add_exception_handler(ContentEngineError, handle_content_engine_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)
