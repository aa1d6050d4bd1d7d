"""Etherscan account API client."""

from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from staking_rewards.explorer.models import (
    BeaconWithdrawal,
    InternalTransaction,
    MinedBlock,
    NormalTransaction,
)
from staking_rewards.helpers.constants import (
    ETHERSCAN_API_URL,
    ETHERSCAN_CHAIN_ID,
    ETHERSCAN_MIN_INTERVAL,
    ETHERSCAN_NO_RECORDS,
)
from staking_rewards.helpers.errors import ExplorerError
from staking_rewards.helpers.http import get_json
from staking_rewards.helpers.logging import get_logger
from staking_rewards.prices.limiter import RateLimiter


logger = get_logger(__name__)


class EtherscanClient:
    """Fetches the account records the ledger is built from.

    Every query returns the full record list for an address in ascending
    block order. Calls are spaced by a limiter of their own, independent of
    the price lookups.
    """

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        limiter: RateLimiter | None = None,
        *,
        url: str = ETHERSCAN_API_URL,
        chain_id: int = ETHERSCAN_CHAIN_ID,
    ) -> None:
        """Initialize the explorer client.

        Args:
            api_key: Etherscan API key
            client: HTTP client instance
            limiter: Throttle for Etherscan calls (default: ETHERSCAN_MIN_INTERVAL)
            url: API endpoint
            chain_id: Chain to query

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            msg = "Etherscan API key cannot be empty"
            raise ValueError(msg)

        self.api_key = api_key
        self.client = client
        self.limiter = limiter or RateLimiter(ETHERSCAN_MIN_INTERVAL)
        self.url = url
        self.chain_id = chain_id

    async def _query(self, action: str, address: str, **extra: Any) -> list[Any]:
        """Run one ``module=account`` query and return its result list.

        Raises:
            ExplorerError: If the request fails or Etherscan reports an error
        """
        params: dict[str, Any] = {
            "chainid": self.chain_id,
            "module": "account",
            "action": action,
            "address": address,
            "sort": "asc",
            "apikey": self.api_key,
            **extra,
        }

        await self.limiter.acquire()
        data = await get_json(self.client, self.url, params, error_cls=ExplorerError)

        if not isinstance(data, dict):
            msg = f"Unexpected Etherscan payload for {action}: {data!r}"
            raise ExplorerError(msg)

        result = data.get("result")
        if data.get("status") == "1" and isinstance(result, list):
            return result

        message = str(data.get("message", ""))
        if ETHERSCAN_NO_RECORDS in message or ETHERSCAN_NO_RECORDS in str(result):
            return []

        msg = f"Etherscan {action} failed for {address}: {message} {result}"
        raise ExplorerError(msg)

    @staticmethod
    def _parse[M: BaseModel](model: type[M], action: str, rows: list[Any]) -> list[M]:
        try:
            return TypeAdapter(list[model]).validate_python(rows)
        except ValidationError as e:
            msg = f"Malformed {action} record: {e}"
            raise ExplorerError(msg) from e

    async def get_mined_blocks(self, address: str) -> list[MinedBlock]:
        """Get canonical blocks produced with ``address`` as fee recipient."""
        logger.info("Querying produced blocks for address %s", address)
        rows = await self._query("getminedblocks", address, blocktype="blocks")
        return self._parse(MinedBlock, "getminedblocks", rows)

    async def get_transactions(self, address: str) -> list[NormalTransaction]:
        """Get normal transactions sent from or to ``address``."""
        logger.info("Querying txns for address %s", address)
        rows = await self._query("txlist", address, startblock=0, endblock=99999999)
        return self._parse(NormalTransaction, "txlist", rows)

    async def get_internal_transactions(
        self, address: str
    ) -> list[InternalTransaction]:
        """Get internal transactions sent from or to ``address``."""
        logger.info("Querying internal txns for address %s", address)
        rows = await self._query(
            "txlistinternal", address, startblock=0, endblock=99999999
        )
        return self._parse(InternalTransaction, "txlistinternal", rows)

    async def get_beacon_withdrawals(self, address: str) -> list[BeaconWithdrawal]:
        """Get beacon-chain withdrawals credited to ``address``."""
        logger.info("Querying beacon withdrawals for address %s", address)
        rows = await self._query(
            "txsBeaconWithdrawal", address, startblock=0, endblock=99999999
        )
        return self._parse(BeaconWithdrawal, "txsBeaconWithdrawal", rows)


__all__ = ["EtherscanClient"]
