"""Crypto market data proxy routes (``/api/market``, CoinGecko)."""
from fastapi import APIRouter

from pocket_broker.deps import MarketServiceDep
from pocket_broker.schemas import MarketMovers, MarketStats, TrendingToken

router = APIRouter(prefix="/api/market", tags=["market"])


@router.get("/stats", response_model=MarketStats)
async def get_market_stats(service: MarketServiceDep) -> MarketStats:
    """Global market snapshot (cached 60 s)."""
    return await service.stats()


@router.get("/trending", response_model=list[TrendingToken])
async def get_trending(service: MarketServiceDep) -> list[TrendingToken]:
    """First six trending coins (cached 300 s)."""
    return await service.trending()


@router.get("/movers", response_model=MarketMovers)
async def get_movers(service: MarketServiceDep) -> MarketMovers:
    """Top five gainers and losers over 24h (cached 120 s)."""
    return await service.movers()
