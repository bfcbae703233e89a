"""Domain errors raised by the scheduling and booking services.

Services raise these; the API layer turns them into HTTP responses through
the handlers registered by ``register_exception_handlers``.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for errors surfaced to the caller as-is."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed input: bad date, out-of-range hours, unknown status..."""

    status_code = 400


class NotFoundError(BookingError):
    """Referenced post/service/booking/user does not exist."""

    status_code = 404


class ConflictError(BookingError):
    """Post disabled, or the requested slot is closed or already taken."""

    status_code = 409


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        if exc.status_code >= 500:
            logger.error("Unhandled booking error on %s: %s", request.url.path, exc.message)
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
