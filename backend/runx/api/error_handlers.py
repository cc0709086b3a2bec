"""Error Handlers: map exceptions escaping routes to the storefront JSON envelope.

Invariants:
    - Every error body has a top-level "message" (the storefront reads only that)
      and an "error" object with code, category and severity
    - RunXError keeps its own status; request-body validation is 400; anything
      else is 500 "Error interno del servidor" with no internal detail
    - 4xx logged at WARNING, 5xx at ERROR with the order context attached
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from runx.core.errors import ErrorCategory, ErrorSeverity, RunXError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
INVALID_BODY_MESSAGE = "Datos inválidos"


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RunXError, handle_runx_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


def _envelope(
    message: str,
    code: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "message": message,
        "error": {
            "code": code,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_runx_error(request: Request, exc: RunXError) -> JSONResponse:
    ctx = exc.context
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.WARNING,
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "account_id": ctx.account_id,
            "order_id": ctx.order_id,
            "stage": ctx.stage,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            INVALID_BODY_MESSAGE, "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
            details=details,
        ),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
