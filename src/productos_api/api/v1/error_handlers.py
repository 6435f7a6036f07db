"""
Fault translation: every error that leaves the application becomes an
`ErrorDetails` body.

- `FaultTranslatorMiddleware` wraps the routed application and catches whatever
  escapes a request (app-level faults such as `UnauthorizedError` raised by the
  bearer dependency, store faults, bugs).
- `register_exception_handlers` gives framework-level faults (malformed request
  data, unknown route, wrong method) the same body shape.

Status mapping lives on the exception classes (`AppError.http_status()`); the
category label comes from `status_to_exception_type`. Anything that is not an
`AppError` is a 500.

In production mode a 500 body carries a generic message and no stack trace. In
any other mode it carries the raw exception text and the formatted traceback.
The full traceback is logged in every mode.
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from productos_api.exceptions import AppError
from .responses import error_response

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal Server Error"


def classify_fault(exc: BaseException) -> int:
    if isinstance(exc, AppError):
        return exc.http_status()
    return 500


def fault_message(exc: BaseException, status_code: int, expose_details: bool) -> str:
    if isinstance(exc, AppError) and (status_code < 500 or expose_details):
        return exc.message
    if expose_details:
        return str(exc) or type(exc).__name__
    return GENERIC_SERVER_ERROR


class FaultTranslatorMiddleware(BaseHTTPMiddleware):
    """
    Convert unrecovered exceptions into `ErrorDetails` responses.

    Args:
        expose_details: include raw messages and tracebacks in bodies
            (non-production modes only).
    """

    def __init__(self, app, expose_details: bool = False):
        super().__init__(app)
        self.expose_details = expose_details

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return self.translate(request, exc)

    def translate(self, request: Request, exc: Exception):
        status_code = classify_fault(exc)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "fault.unhandled",
            exc_info=exc,
            extra={
                "status_code": status_code,
                "exception": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
        )

        stack_trace = None
        if self.expose_details:
            stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        return error_response(
            status_code,
            fault_message(exc, status_code, self.expose_details),
            stack_trace=stack_trace,
        )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """400 for request data FastAPI could not parse (bad JSON, wrong types, missing params)."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.info(
        "fault.request_validation",
        extra={"method": request.method, "path": request.url.path, "problems": problems},
    )
    return error_response(400, "; ".join(problems) or "Invalid request")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep the framework's status (404 unknown route, 405 wrong method, ...)."""
    logger.info(
        "fault.http_exception",
        extra={"status_code": exc.status_code, "method": request.method, "path": request.url.path},
    )
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


# Helper to register all handlers on an app (call this from your app factory)
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
