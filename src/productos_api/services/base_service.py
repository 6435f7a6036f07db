"""
Shared plumbing for services.

Services return envelopes for every expected outcome. Faults raised by the
repository layer or the unit of work are expected too (a duplicate key, a stale
version, a dropped connection), so they are turned into failure envelopes here
instead of travelling up to the fault translator. Anything else is a bug and
propagates.
"""
import functools
import logging

from productos_api.exceptions import ConflictError, RepositoryError

logger = logging.getLogger(__name__)

GENERIC_STORE_FAILURE = "An error occurred while processing the request"


def store_faults_as_failure(envelope_cls):
    """
    Decorate an async service method so store faults become `envelope_cls.failure`.

    Client-side store faults keep their message and status (duplicate or stale
    row: 409, unknown field: 400). Server-side ones (500) get a generic message;
    the cause is logged with its traceback.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except (RepositoryError, ConflictError) as exc:
                status = exc.http_status()
                if status >= 500:
                    logger.exception("service.store_failure", extra={"operation": func.__qualname__})
                    return envelope_cls.failure(GENERIC_STORE_FAILURE, status)
                logger.info(
                    "service.store_rejected",
                    extra={"operation": func.__qualname__, "error_code": exc.error_code},
                )
                return envelope_cls.failure(exc.message, status)

        return wrapper

    return decorator
