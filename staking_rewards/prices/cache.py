"""File-backed cache of historical ETH prices keyed by day."""

from datetime import datetime
from pathlib import Path
import json

from staking_rewards.helpers.constants import DEFAULT_PRICE_CACHE_FILE
from staking_rewards.helpers.errors import CacheIoError
from staking_rewards.helpers.logging import get_logger
from staking_rewards.helpers.parsers import format_day


logger = get_logger(__name__)


class PriceCache:
    """Persists a flat ``DD-MM-YYYY -> price`` mapping as one JSON document.

    The document is read in full on every lookup and rewritten in full on
    every update. There is no cross-process locking, so only one run may use
    a given file at a time.
    """

    def __init__(self, path: str | Path = DEFAULT_PRICE_CACHE_FILE) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, float]:
        """Read the whole cache document.

        A missing file is created holding an empty document.

        Returns:
            Mapping of day key to price

        Raises:
            CacheIoError: If the file cannot be read or created, or does not
                hold a flat mapping of strings to numbers
        """
        try:
            if not self.path.exists():
                logger.info("Creating price cache at %s", self.path)
                self.path.write_text("{}", encoding="utf-8")
                return {}
            contents = self.path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Cannot read price cache {self.path}: {e}"
            raise CacheIoError(msg) from e

        try:
            document = json.loads(contents)
        except json.JSONDecodeError as e:
            msg = f"Price cache {self.path} is corrupt: {e}"
            raise CacheIoError(msg) from e

        if not isinstance(document, dict) or not all(
            isinstance(value, int | float) and not isinstance(value, bool)
            for value in document.values()
        ):
            msg = f"Price cache {self.path} is not a mapping of dates to prices"
            raise CacheIoError(msg)

        return {key: float(value) for key, value in document.items()}

    def get_cached(self, date: datetime) -> float | None:
        """Return the cached price for the day of ``date``, if any."""
        return self.load().get(format_day(date))

    def put(self, date: datetime, price: float) -> None:
        """Store the price for the day of ``date`` and rewrite the document.

        Raises:
            CacheIoError: If the existing document is corrupt or the file
                cannot be written
        """
        prices = self.load()
        prices[format_day(date)] = price

        try:
            self.path.write_text(json.dumps(prices, indent=2), encoding="utf-8")
        except OSError as e:
            msg = f"Cannot write price cache {self.path}: {e}"
            raise CacheIoError(msg) from e


__all__ = ["PriceCache"]
