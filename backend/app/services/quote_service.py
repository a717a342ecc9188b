"""Stock quote service backed by the Alpha Vantage API."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import QuoteUnavailable
from app.core.redis_client import cache_json, get_cached_json

logger = logging.getLogger(__name__)

# Alpha Vantage GLOBAL_QUOTE field names
QUOTE_FIELDS = {
    "symbol": "01. symbol",
    "open": "02. open",
    "high": "03. high",
    "low": "04. low",
    "price": "05. price",
    "volume": "06. volume",
    "previous_close": "08. previous close",
    "change": "09. change",
    "change_percent": "10. change percent",
}

OVERVIEW_FIELDS = {
    "symbol": "Symbol",
    "name": "Name",
    "description": "Description",
    "sector": "Sector",
    "industry": "Industry",
    "market_cap": "MarketCapitalization",
    "pe_ratio": "PERatio",
    "dividend_yield": "DividendYield",
}


def _to_decimal(raw: Any) -> Decimal:
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise ValueError(f"unparseable number {raw!r}") from e


def parse_global_quote(symbol: str, payload: Dict) -> Dict:
    """Turn a GLOBAL_QUOTE response into a flat quote dict.

    Raises QuoteUnavailable when the payload carries no quote, which is what
    Alpha Vantage returns for unknown symbols and when throttling ("Note").
    """
    quote = payload.get("Global Quote")
    if not quote or not isinstance(quote, dict):
        reason = payload.get("Note") or payload.get("Information") or payload.get("Error Message") or "empty quote"
        raise QuoteUnavailable(symbol, reason)
    try:
        return {
            "symbol": quote[QUOTE_FIELDS["symbol"]],
            "price": _to_decimal(quote[QUOTE_FIELDS["price"]]),
            "open": _to_decimal(quote[QUOTE_FIELDS["open"]]),
            "high": _to_decimal(quote[QUOTE_FIELDS["high"]]),
            "low": _to_decimal(quote[QUOTE_FIELDS["low"]]),
            "previous_close": _to_decimal(quote[QUOTE_FIELDS["previous_close"]]),
            "change": _to_decimal(quote[QUOTE_FIELDS["change"]]),
            "change_percent": quote[QUOTE_FIELDS["change_percent"]],
            "volume": int(quote[QUOTE_FIELDS["volume"]]),
        }
    except (KeyError, TypeError, ValueError) as e:
        raise QuoteUnavailable(symbol, f"malformed quote: {e}") from e


def parse_overview(symbol: str, payload: Dict) -> Dict:
    if "Symbol" not in payload:
        raise QuoteUnavailable(symbol, payload.get("Note") or "no overview")
    return {key: payload.get(source) for key, source in OVERVIEW_FIELDS.items()}


def parse_time_series_daily(symbol: str, payload: Dict) -> Dict:
    series = payload.get("Time Series (Daily)")
    if not isinstance(series, dict):
        raise QuoteUnavailable(symbol, payload.get("Note") or "no time series")
    meta = payload.get("Meta Data")
    if not isinstance(meta, dict):
        meta = {}
    return {"symbol": meta.get("2. Symbol", symbol), "data": series}


class QuoteService:
    """Service for fetching and caching stock quotes."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        cache_ttl: Optional[int] = None,
    ):
        self.api_key = api_key or settings.ALPHA_VANTAGE_API_KEY
        self.base_url = base_url or settings.ALPHA_VANTAGE_BASE_URL
        self.cache_ttl = settings.QUOTE_CACHE_TTL if cache_ttl is None else cache_ttl
        self.http_client = http_client or httpx.AsyncClient(
            timeout=settings.QUOTE_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )

    async def close(self):
        """Close HTTP client."""
        await self.http_client.aclose()

    async def _query(self, function: str, symbol: str) -> Dict:
        response = await self.http_client.get(
            self.base_url,
            params={"function": function, "symbol": symbol, "apikey": self.api_key},
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise QuoteUnavailable(symbol, f"unexpected payload type {type(payload).__name__}")
        return payload

    async def _fetch(self, function: str, symbol: str, parser) -> Optional[Dict]:
        symbol = symbol.upper()
        cache_key = f"quote:{function}:{symbol}"
        if self.cache_ttl > 0:
            cached = await get_cached_json(cache_key)
            if cached:
                return cached

        try:
            result = parser(symbol, await self._query(function, symbol))
        except QuoteUnavailable as e:
            logger.warning("%s", e)
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Error fetching %s for %s: %s", function, symbol, e)
            return None

        if self.cache_ttl > 0:
            await cache_json(cache_key, result, self.cache_ttl)
        return result

    async def get_quote(self, symbol: str) -> Optional[Dict]:
        """Latest quote for a symbol, None when unavailable."""
        quote = await self._fetch("GLOBAL_QUOTE", symbol, parse_global_quote)
        if quote is not None:
            # Cached entries come back with numbers as strings
            quote["price"] = Decimal(str(quote["price"]))
        return quote

    async def get_price(self, symbol: str) -> Optional[Decimal]:
        quote = await self.get_quote(symbol)
        return quote["price"] if quote else None

    async def get_overview(self, symbol: str) -> Optional[Dict]:
        return await self._fetch("OVERVIEW", symbol, parse_overview)

    async def get_time_series_daily(self, symbol: str) -> Optional[Dict]:
        return await self._fetch("TIME_SERIES_DAILY", symbol, parse_time_series_daily)


quote_service = QuoteService()
