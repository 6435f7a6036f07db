"""
Envelope → HTTP response translation.

This is the only place controllers turn service outcomes into responses, and it
is purely mechanical: the status always comes from the envelope.
"""
from fastapi import Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from productos_api.exceptions import status_to_exception_type
from productos_api.schemas.common import ErrorDetails, Result, ResultList


def _dump(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    return value


def error_response(status_code: int, message: str, stack_trace: str | None = None,
                   headers: dict | None = None) -> JSONResponse:
    details = ErrorDetails(
        status_code=status_code,
        message=message,
        exception_type=status_to_exception_type(status_code),
        stack_trace=stack_trace,
    )
    return JSONResponse(status_code=status_code, content=details.to_payload(), headers=headers)


def envelope_response(result: Result | ResultList, headers: dict | None = None) -> Response:
    """
    - failure: `ErrorDetails` body with the envelope's status
    - 204 success: empty body
    - `ResultList` success: `{data, totalRecords}`
    - `Result` success: the payload itself
    """
    if not result.is_success:
        return error_response(result.status_code, result.error)

    if result.status_code == 204:
        return Response(status_code=204, headers=headers)

    if isinstance(result, ResultList):
        content = {
            "data": [_dump(item) for item in result.data],
            "totalRecords": result.total_records,
        }
    else:
        content = _dump(result.data)

    return JSONResponse(status_code=result.status_code, content=content, headers=headers)
