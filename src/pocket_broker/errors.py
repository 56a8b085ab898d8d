"""API error type and the app-wide exception handlers.

Every failure reaches the client as ``{"error": <message>, "code": <CODE>}``.
Services raise :class:`ApiError`; the handlers installed by
:func:`install_error_handlers` render it, request-validation failures, stray
``HTTPException``s and anything unexpected.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error with an HTTP status, a human message and a stable machine code."""

    def __init__(self, status_code: int, error: str, code: str) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.code = code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "code": self.code}


def bad_request(error: str, code: str) -> ApiError:
    return ApiError(400, error, code)


def not_found(error: str, code: str) -> ApiError:
    return ApiError(404, error, code)


# Unique columns -> (message, code) for duplicate-key conflicts.
_UNIQUE_CONFLICTS: tuple[tuple[str, str, str], ...] = (
    ("tx_hash", "Transaction with this txHash already exists", "DUPLICATE_TX_HASH"),
    ("wallet_address", "Wallet address already exists", "WALLET_ADDRESS_EXISTS"),
    ("email", "Email already exists", "EMAIL_EXISTS"),
    ("stripe_customer_id", "Subscription with this Stripe customer already exists", "DUPLICATE_STRIPE_ID"),
    ("stripe_subscription_id", "Subscription with this Stripe subscription already exists", "DUPLICATE_STRIPE_ID"),
)


def conflict_from_integrity_error(exc: IntegrityError) -> ApiError | None:
    """Map a unique-constraint violation to a 400 ApiError by column name.

    Returns None when the violated constraint is not a known unique column
    (e.g. a foreign key), so the caller can re-raise.
    """
    message = str(exc.orig).lower()
    for column, error, code in _UNIQUE_CONFLICTS:
        if column in message:
            return bad_request(error, code)
    return None


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body: %s", exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "code": "INVALID_REQUEST_BODY"},
    )


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on the app."""
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
