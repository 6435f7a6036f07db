"""
Outcome envelopes shared by every service and controller.

- `Result[T]`: one payload or one error message, plus the HTTP status it maps to.
- `ResultList[T]`: a page of payloads plus the total number of matching records,
  which is independent of how many items the page holds.
- `ErrorDetails`: the JSON error body `{statusCode, message, exceptionType,
  stackTrace, timestamp}`.

A success must carry a 2xx status and a failure a non-2xx one; anything else is
rejected when the envelope is built.
"""
from datetime import datetime, timezone
from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _is_2xx(status_code: int) -> bool:
    return 200 <= status_code < 300


class _Envelope(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    is_success: bool
    error: str | None = None
    status_code: int

    @model_validator(mode="after")
    def check_outcome_consistency(self):
        if self.is_success:
            if not _is_2xx(self.status_code):
                raise ValueError(f"A success envelope needs a 2xx status, got {self.status_code}")
            if self.error is not None:
                raise ValueError("A success envelope cannot carry an error message")
        else:
            if _is_2xx(self.status_code):
                raise ValueError(f"A failure envelope needs a non-2xx status, got {self.status_code}")
            if not self.error:
                raise ValueError("A failure envelope needs an error message")
        return self


class Result(_Envelope, Generic[T]):
    data: T | None = None

    @classmethod
    def success(cls, data: T | None = None, status_code: int = 200) -> "Result[T]":
        return cls(is_success=True, data=data, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: int = 400) -> "Result[T]":
        return cls(is_success=False, error=error, status_code=status_code)


class ResultList(_Envelope, Generic[T]):
    data: list[T] = Field(default_factory=list)
    total_records: int = 0

    @classmethod
    def success(cls, data: Sequence[T], total_records: int | None = None,
                status_code: int = 200) -> "ResultList[T]":
        items = list(data)
        total = len(items) if total_records is None else total_records
        return cls(is_success=True, data=items, total_records=total, status_code=status_code)

    @classmethod
    def failure(cls, error: str, status_code: int = 400) -> "ResultList[T]":
        return cls(is_success=False, error=error, total_records=0, status_code=status_code)


class ErrorDetails(BaseModel):
    """Error body returned for failure envelopes and unrecovered faults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int
    message: str
    exception_type: str
    stack_trace: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
