"""Parsing utilities for common data transformations."""

from datetime import UTC, datetime
from decimal import Decimal

from staking_rewards.helpers.constants import (
    CACHE_DATE_FORMAT,
    WEI_PER_ETH,
    WEI_PER_GWEI,
)


def parse_unix_timestamp(timestamp: str | int) -> datetime:
    """Parse a Unix timestamp (seconds, decimal string) to a UTC datetime.

    Args:
        timestamp: Unix seconds as returned by the block explorer

    Returns:
        datetime: Timezone-aware UTC datetime

    Raises:
        ValueError: If the timestamp is not a decimal integer

    Example:
        >>> parse_unix_timestamp("1650000000")
        datetime.datetime(2022, 4, 15, 5, 20, tzinfo=datetime.timezone.utc)
    """
    return datetime.fromtimestamp(int(timestamp), tz=UTC)


def format_day(date: datetime) -> str:
    """Format a datetime as the day-granular DD-MM-YYYY key.

    Example:
        >>> format_day(datetime(2022, 12, 30, 18, 0, tzinfo=UTC))
        '30-12-2022'
    """
    return date.strftime(CACHE_DATE_FORMAT)


def wei_to_eth(wei: int) -> Decimal:
    """Convert Wei to ETH without losing precision.

    Args:
        wei: Amount in Wei

    Returns:
        Decimal: Amount in ETH

    Example:
        >>> wei_to_eth(1500000000000000000)
        Decimal('1.5')
    """
    return Decimal(wei) / WEI_PER_ETH


def gwei_to_wei(gwei: int) -> int:
    """Convert Gwei to Wei (multiply by 1e9).

    Example:
        >>> gwei_to_wei(32000000000)
        32000000000000000000
    """
    return gwei * WEI_PER_GWEI


def format_ether(wei: int, places: int = 6) -> str:
    """Render a Wei amount as an ETH string with a fixed number of decimals.

    Example:
        >>> format_ether(502000000000000000)
        '0.502000'
    """
    return f"{wei_to_eth(wei):.{places}f}"


def same_address(left: str | None, right: str | None) -> bool:
    """Compare two hex addresses ignoring checksum casing."""
    if not left or not right:
        return False
    return left.lower() == right.lower()


__all__ = [
    "format_day",
    "format_ether",
    "gwei_to_wei",
    "parse_unix_timestamp",
    "same_address",
    "wei_to_eth",
]
