"""Indicative swap quotes from a fixed pair-rate table.

There is no pricing or routing engine behind this: the rate comes from
``PAIR_RATES`` and the gas, impact and route fields are constants.
"""
import math

from pocket_broker.errors import bad_request
from pocket_broker.schemas import SwapQuote, SwapQuoteRequest, SwapRoute
from pocket_broker.utils import utc_iso

DEFAULT_SLIPPAGE = 0.5
DEFAULT_CHAIN_ID = 1

_BASE_RATES: dict[tuple[str, str], float] = {
    ("ETH", "USDC"): 3245.67,
    ("ETH", "USDT"): 3244.32,
    ("WBTC", "ETH"): 15.2,
}

PAIR_RATES: dict[tuple[str, str], float] = {
    **_BASE_RATES,
    **{(quote, base): 1 / rate for (base, quote), rate in _BASE_RATES.items()},
}

ROUTE = (
    SwapRoute(protocol="Uniswap V3", percentage=60),
    SwapRoute(protocol="SushiSwap", percentage=40),
)


def pair_rate(token_in: str, token_out: str) -> float:
    """Rate for a symbol pair; unknown pairs trade 1:1."""
    return PAIR_RATES.get((token_in.upper(), token_out.upper()), 1.0)


def _number(value, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def quote(request: SwapQuoteRequest) -> SwapQuote:
    """Build a quote; raises 400 ApiError on missing fields or a bad amount."""
    if not request.token_in or not request.token_out or request.amount in (None, ""):
        raise bad_request(
            "Missing required fields: tokenIn, tokenOut, amount", "MISSING_REQUIRED_FIELDS"
        )
    try:
        amount = float(request.amount)
    except (TypeError, ValueError) as exc:
        raise bad_request("Invalid amount", "INVALID_AMOUNT") from exc
    if not math.isfinite(amount):
        raise bad_request("Invalid amount", "INVALID_AMOUNT")

    token_in = str(request.token_in)
    token_out = str(request.token_out)
    slippage = _number(request.slippage, DEFAULT_SLIPPAGE)
    chain_id = int(_number(request.chain_id, DEFAULT_CHAIN_ID))

    amount_out = amount * pair_rate(token_in, token_out)
    minimum_received = amount_out * (1 - slippage / 100)

    return SwapQuote(
        token_in=token_in,
        token_out=token_out,
        amount_in=str(request.amount),
        amount_out=f"{amount_out:.6f}",
        estimated_gas="0.002",
        gas_cost_usd="2.45",
        price_impact="0.01",
        route=list(ROUTE),
        minimum_received=f"{minimum_received:.6f}",
        slippage=slippage,
        chain_id=chain_id,
        timestamp=utc_iso(),
    )
