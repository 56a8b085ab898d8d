"""Swap quote route (``/api/swap``)."""
from fastapi import APIRouter

from pocket_broker.errors import ApiError
from pocket_broker.schemas import SwapQuote, SwapQuoteRequest
from pocket_broker.services import swap

router = APIRouter(prefix="/api/swap", tags=["swap"])


@router.post("/quote", response_model=SwapQuote)
def get_quote(body: SwapQuoteRequest) -> SwapQuote:
    """Indicative quote from the fixed pair-rate table."""
    return swap.quote(body)


@router.get("/quote")
def quote_requires_post() -> None:
    raise ApiError(405, "Use POST method to get swap quotes", "METHOD_NOT_ALLOWED")
