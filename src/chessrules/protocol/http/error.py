from __future__ import annotations

import logging
from typing import Any, Dict, cast

from fastapi import HTTPException as FastAPIHTTPException
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from ...engine.errors import FenError
from ...engine.game import IllegalMoveError


logger = logging.getLogger(__name__)


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: list[dict[str, str]] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _client_error(request: Request, code: str, message: str) -> JSONResponse:
    payload = error_envelope(
        code=code,
        message=message,
        err_type="client_error",
        request_id=getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    http_exc = cast(FastAPIHTTPException, exc)
    status_code = http_exc.status_code
    payload = error_envelope(
        code=_status_to_code(status_code),
        message=http_exc.detail if isinstance(http_exc.detail, str) else str(http_exc.detail),
        err_type="client_error" if 400 <= status_code < 500 else "server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=payload)


async def fen_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _client_error(request, "invalid_fen", str(exc) or "invalid FEN")


async def illegal_move_handler(request: Request, exc: Exception) -> JSONResponse:
    return _client_error(request, "illegal_move", "illegal move")


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    if isinstance(exc, FastAPIHTTPException):
        return await http_exception_handler(request, exc)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(
        code="internal_error",
        message="Internal Server Error",
        err_type="server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    field_errors = [
        {
            "field": ".".join(str(p) for p in e.get("loc", []) if p is not None),
            "code": e.get("type", "value_error"),
            "message": e.get("msg", "invalid value"),
        }
        for e in cast(RequestValidationError, exc).errors()
    ]
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=request_id,
        field_errors=field_errors or None,
    )
    return JSONResponse(status_code=422, content=payload)


HANDLED_ERRORS = (
    (FastAPIHTTPException, http_exception_handler),
    (RequestValidationError, request_validation_exception_handler),
    (FenError, fen_error_handler),
    (IllegalMoveError, illegal_move_handler),
    (Exception, exception_handler),
)


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
    422: "unprocessable_entity",
}


def _status_to_code(status_code: int) -> str:
    if 500 <= status_code < 600:
        return "internal_error"
    return _STATUS_CODES.get(status_code, "error")
