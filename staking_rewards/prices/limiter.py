"""Minimum-interval throttle for outbound API calls."""

import time

import asyncio

from staking_rewards.helpers.constants import (
    COINGECKO_INTERVAL_WITH_KEY,
    COINGECKO_INTERVAL_WITHOUT_KEY,
)
from staking_rewards.helpers.logging import get_logger


logger = get_logger(__name__)


class RateLimiter:
    """Permits one call per ``interval`` seconds across every caller.

    The first acquisition is immediate; each later one suspends until
    ``interval`` seconds have passed since the previously permitted call.
    A single lock serializes waiters, so concurrent callers are spaced out
    globally rather than per caller.
    """

    def __init__(self, interval: float) -> None:
        """Initialize the limiter.

        Args:
            interval: Minimum number of seconds between permitted calls

        Raises:
            ValueError: If interval is negative
        """
        if interval < 0:
            msg = f"Rate limit interval must be non-negative, got {interval}"
            raise ValueError(msg)

        self.interval = interval
        self._lock = asyncio.Lock()
        self._last_call: float | None = None
        self.permits = 0

    @property
    def calls_per_minute(self) -> float:
        """Throughput the limiter allows, for display."""
        if self.interval == 0:
            return float("inf")
        return 60 / self.interval

    async def acquire(self) -> None:
        """Suspend until the next call is permitted."""
        async with self._lock:
            if self._last_call is not None:
                wait = self._last_call + self.interval - time.monotonic()
                if wait > 0:
                    logger.debug("Rate limit: waiting %.2fs", wait)
                    await asyncio.sleep(wait)
            self._last_call = time.monotonic()
            self.permits += 1


def coingecko_rate_limiter(api_key: str | None = None) -> RateLimiter:
    """Build the limiter matching the CoinGecko tier in use.

    Args:
        api_key: CoinGecko API key, if any

    Returns:
        RateLimiter spaced for the keyed or the public tier
    """
    if api_key:
        interval = COINGECKO_INTERVAL_WITH_KEY
    else:
        interval = COINGECKO_INTERVAL_WITHOUT_KEY
        logger.warning(
            "No CoinGecko API key provided. Fetching historical prices will take longer."
        )

    limiter = RateLimiter(interval)
    logger.info("CoinGecko rate limit: %.0f calls / min", limiter.calls_per_minute)
    return limiter


__all__ = ["RateLimiter", "coingecko_rate_limiter"]
