"""Typed procedure errors shared by the API and the client.

Every failure a caller can observe is one of the ``ProcedureError``
subclasses below. The API renders them as ``{"code": ..., "detail": ...}``
and the client turns such bodies back into the same classes.
"""
import enum
import logging
from typing import Any, Dict, Optional, Sequence, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, enum.Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL = "INTERNAL"
    UNAUTHORIZED = "UNAUTHORIZED"


class ProcedureError(Exception):
    """Base class for errors reported to callers of a procedure."""

    code: ErrorCode = ErrorCode.INTERNAL
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"code": self.code.value, "detail": self.message}

    @classmethod
    def from_payload(cls, payload: Any, status_code: Optional[int] = None) -> "ProcedureError":
        """Rebuild a typed error from a response body.

        Falls back to the HTTP status when the body carries no known code.
        """
        code = None
        message = None
        if isinstance(payload, dict):
            code = payload.get("code")
            detail = payload.get("detail")
            message = detail if isinstance(detail, str) else None

        error_cls = _BY_CODE.get(code) or _BY_STATUS.get(status_code, InternalError)
        return error_cls(message)


class ValidationFailed(ProcedureError):
    code = ErrorCode.VALIDATION
    status_code = 422
    default_message = "Invalid input"


class NotFound(ProcedureError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Forbidden(ProcedureError):
    code = ErrorCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class InternalError(ProcedureError):
    code = ErrorCode.INTERNAL
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"


class Unauthorized(ProcedureError):
    code = ErrorCode.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


_ERROR_CLASSES = (ValidationFailed, NotFound, Forbidden, InternalError, Unauthorized)
_BY_CODE: Dict[Optional[str], Type[ProcedureError]] = {cls.code.value: cls for cls in _ERROR_CLASSES}
_BY_STATUS: Dict[Optional[int], Type[ProcedureError]] = {cls.status_code: cls for cls in _ERROR_CLASSES}


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Join pydantic error entries into one readable message."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = error.get("msg", "Invalid value")
        if text.startswith("Value error, "):
            text = text[len("Value error, "):]
        messages.append(f"{location}: {text}" if location else text)
    return "; ".join(messages) or ValidationFailed.default_message


async def procedure_error_handler(request: Request, exc: ProcedureError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.code.value, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationFailed(format_validation_errors(exc.errors()))
    logger.warning("%s %s rejected (VALIDATION): %s", request.method, request.url.path, error.message)
    payload = error.to_payload()
    payload["errors"] = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=error.status_code, content=payload)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s crashed", request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProcedureError, procedure_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
