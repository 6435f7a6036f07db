"""
Request ID middleware for FastAPI / Starlette.

Each request gets an identifier stored in a ContextVar (read by
`RequestIdFilter`) and echoed in the `X-Request-ID` response header, so a
client can quote it and every log line of that request carries it.

An incoming `X-Request-ID` is reused when it looks like an opaque id (letters,
digits, '-', '_', '.', at most 128 characters); anything else is replaced with a
fresh UUID4 so headers cannot inject text into log lines.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import set_request_id, reset_request_id

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Register it last (outermost) so the id is set before any other middleware
    or handler logs, including the fault translator.
    """

    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
