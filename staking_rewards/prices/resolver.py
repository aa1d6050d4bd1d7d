"""Historical ETH price lookup through the cache and the CoinGecko API."""

from datetime import datetime

import asyncio

import httpx
from pydantic import ValidationError

from staking_rewards.helpers.constants import COINGECKO_HISTORY_URL
from staking_rewards.helpers.errors import PriceFetchError
from staking_rewards.helpers.http import get_json
from staking_rewards.helpers.logging import get_logger
from staking_rewards.helpers.parsers import format_day
from staking_rewards.prices.cache import PriceCache
from staking_rewards.prices.limiter import RateLimiter
from staking_rewards.prices.models import CoinHistory


logger = get_logger(__name__)


class PriceResolver:
    """Resolves the EUR price of ETH on a given day.

    Cache hits return without touching the network or the limiter. Misses
    are serialized by a lock so two lookups of the same day cannot both
    reach the API; the second one finds the price the first one stored.
    """

    def __init__(
        self,
        cache: PriceCache,
        client: httpx.AsyncClient,
        api_key: str | None = None,
        *,
        url: str = COINGECKO_HISTORY_URL,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Persistent date -> price cache
            client: HTTP client used for CoinGecko requests
            api_key: Optional CoinGecko API key
            url: History endpoint (overridable for tests)
        """
        self.cache = cache
        self.client = client
        self.api_key = api_key
        self.url = url
        self.hits = 0
        self.misses = 0
        self._miss_lock = asyncio.Lock()

    async def resolve(self, date: datetime, limiter: RateLimiter) -> float:
        """Return the price on the day of ``date``.

        Args:
            date: Moment whose day is priced
            limiter: Shared throttle every external price call goes through

        Returns:
            EUR per ETH on that day

        Raises:
            PriceFetchError: If the API call fails or returns no price
            CacheIoError: If the cache cannot be read or written
        """
        cached = self.cache.get_cached(date)
        if cached is not None:
            self.hits += 1
            logger.debug("Price cache hit for %s", format_day(date))
            return cached

        async with self._miss_lock:
            cached = self.cache.get_cached(date)
            if cached is not None:
                self.hits += 1
                return cached

            day = format_day(date)
            logger.debug("Price cache miss for %s", day)
            await limiter.acquire()
            price = await self.price_on(day)
            self.cache.put(date, price)
            self.misses += 1
            return price

    async def price_on(self, day: str) -> float:
        """Query CoinGecko for the EUR price on ``day`` (DD-MM-YYYY).

        Raises:
            PriceFetchError: On a non-success status or an unusable payload
        """
        params = {"date": day}
        if self.api_key:
            params["x_cg_api_key"] = self.api_key

        payload = await get_json(
            self.client, self.url, params, error_cls=PriceFetchError
        )

        try:
            history = CoinHistory.model_validate(payload)
        except ValidationError as e:
            msg = f"No EUR price in CoinGecko response for {day}"
            raise PriceFetchError(msg) from e

        price = history.market_data.current_price.eur
        logger.info("Fetched ETH price for %s: %.2f EUR", day, price)
        return price


__all__ = ["PriceResolver"]
