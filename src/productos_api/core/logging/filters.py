"""
Logging filters.

- RequestIdFilter: stamps `record.request_id` from a ContextVar set per request
  by `RequestIDMiddleware` ("-" outside a request). A ContextVar follows the
  request across awaits, which `threading.local()` would not.
- RedactFilter: masks `extra` values whose key names a credential.

Both filters annotate records and always return True.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None) -> contextvars.Token:
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id(token) when the request ends.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee every LogRecord has a `request_id`: an explicit
    `extra={"request_id": ...}` wins, then the context value, then "-".
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "hashed_password",
        "secret",
        "jwt_secret_key",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "credentials",
    }

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
        return True
