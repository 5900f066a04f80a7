"""
Error taxonomy for the marketplace API.

Every domain failure is raised as a ``MarketplaceError`` subclass and rendered
by a single exception handler as ``{"detail", "code", "retryable"}`` so the
client can tell "try again" conditions from permanent ones.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import asyncpg

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    status_code = 400
    code = "error"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "retryable": self.retryable}


class AuthError(MarketplaceError):
    """Missing or invalid credentials"""

    status_code = 401
    code = "not_authenticated"


class AuthorizationError(MarketplaceError):
    """Authenticated, but wrong role or not the owner"""

    status_code = 403
    code = "forbidden"


class ValidationError(MarketplaceError):
    status_code = 400
    code = "validation_error"


class InvalidCodeError(ValidationError):
    code = "invalid_code"


class NotFoundError(MarketplaceError):
    status_code = 404
    code = "not_found"


class StateConflictError(MarketplaceError):
    """The stored status changed underneath us (lost a compare-and-set)"""

    status_code = 409
    code = "state_conflict"
    retryable = True


class InvalidTransitionError(StateConflictError):
    """The requested event is not allowed from the current status"""

    status_code = 400
    code = "invalid_transition"
    retryable = False


class SignatureMismatchError(MarketplaceError):
    status_code = 400
    code = "signature_mismatch"

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["status"] = "failure"
        return body


class UpstreamError(MarketplaceError):
    """Payment gateway or messaging provider failed or timed out"""

    status_code = 502
    code = "upstream_error"
    retryable = True


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def data_error_handler(request: Request, exc: asyncpg.DataError) -> JSONResponse:
    """A value the database could not encode, e.g. a malformed id in a query string"""
    return await marketplace_error_handler(request, ValidationError(f"Invalid value: {exc}"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(asyncpg.DataError, data_error_handler)
