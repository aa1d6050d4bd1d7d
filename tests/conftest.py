"""Pytest configuration and shared fixtures for ledger tests."""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from staking_rewards.explorer.models import (
    BeaconWithdrawal,
    InternalTransaction,
    MinedBlock,
    NormalTransaction,
)
from staking_rewards.helpers.errors import PriceFetchError
from staking_rewards.helpers.parsers import format_day
from staking_rewards.ledger.models import Reward
from staking_rewards.prices.limiter import RateLimiter


EXECUTION_ADDRESS = "0x" + "aa" * 20
CONSENSUS_ADDRESS = "0x" + "cc" * 20
OTHER_ADDRESS = "0x" + "ee" * 20


class FakePrices:
    """Price source returning a fixed price and recording every lookup."""

    def __init__(self, price: float = 2000.0) -> None:
        self.price = price
        self.failing_days: set[str] = set()
        self.calls: list[datetime] = []

    async def resolve(self, date: datetime, limiter: RateLimiter) -> float:
        self.calls.append(date)
        await limiter.acquire()
        day = format_day(date)
        if day in self.failing_days:
            msg = f"price lookup failed for {day}"
            raise PriceFetchError(msg)
        return self.price


class FakeExplorer:
    """In-memory record source keyed by address."""

    def __init__(self) -> None:
        self.blocks: dict[str, list[MinedBlock]] = {}
        self.transactions: dict[str, list[NormalTransaction]] = {}
        self.internal: dict[str, list[InternalTransaction]] = {}
        self.withdrawals: dict[str, list[BeaconWithdrawal]] = {}
        self.queries: list[tuple[str, str]] = []

    async def get_mined_blocks(self, address: str) -> list[MinedBlock]:
        self.queries.append(("blocks", address))
        return self.blocks.get(address, [])

    async def get_transactions(self, address: str) -> list[NormalTransaction]:
        self.queries.append(("transactions", address))
        return self.transactions.get(address, [])

    async def get_internal_transactions(
        self, address: str
    ) -> list[InternalTransaction]:
        self.queries.append(("internal", address))
        return self.internal.get(address, [])

    async def get_beacon_withdrawals(self, address: str) -> list[BeaconWithdrawal]:
        self.queries.append(("withdrawals", address))
        return self.withdrawals.get(address, [])


@pytest.fixture
def execution_address() -> str:
    """Tracked fee recipient."""
    return EXECUTION_ADDRESS


@pytest.fixture
def consensus_address() -> str:
    """Tracked withdrawal address."""
    return CONSENSUS_ADDRESS


@pytest.fixture
def other_address() -> str:
    """Some untracked counterparty."""
    return OTHER_ADDRESS


@pytest.fixture
def fake_prices() -> FakePrices:
    """Price source fixed at 2000 EUR per ETH."""
    return FakePrices()


@pytest.fixture
def fake_explorer() -> FakeExplorer:
    """Empty explorer; tests fill the per-address record lists."""
    return FakeExplorer()


@pytest.fixture
def no_wait_limiter() -> RateLimiter:
    """Limiter that never sleeps."""
    return RateLimiter(0)


@pytest.fixture
def make_reward() -> Callable[..., Reward]:
    """Factory for rewards priced at a given EUR/ETH rate."""

    def factory(
        amount: int = 10**18,
        *,
        date: datetime | None = None,
        price: float = 2000.0,
        block: int = 17_000_000,
        id: str = "",
    ) -> Reward:
        return Reward.priced(
            block, id, date or datetime(2023, 6, 1, tzinfo=UTC), amount, price
        )

    return factory


@pytest.fixture
def mined_block_record() -> dict[str, str]:
    """Raw getminedblocks row."""
    return {
        "blockNumber": "17000000",
        "timeStamp": "1680911891",
        "blockReward": "52309212378391034",
    }


@pytest.fixture
def transaction_record() -> dict[str, str]:
    """Raw txlist row paying the fee recipient."""
    return {
        "blockNumber": "17000001",
        "timeStamp": "1680911903",
        "hash": "0x" + "12" * 32,
        "nonce": "5",
        "blockHash": "0x" + "34" * 32,
        "transactionIndex": "120",
        "from": OTHER_ADDRESS,
        "to": EXECUTION_ADDRESS,
        "value": "35000000000000000",
        "gas": "21000",
        "gasPrice": "30000000000",
        "isError": "0",
        "txreceipt_status": "1",
        "input": "0x",
        "contractAddress": "",
        "cumulativeGasUsed": "9000000",
        "gasUsed": "21000",
        "confirmations": "100",
    }


@pytest.fixture
def internal_transaction_record() -> dict[str, str]:
    """Raw txlistinternal row paying the fee recipient."""
    return {
        "blockNumber": "17000002",
        "timeStamp": "1680911915",
        "hash": "0x" + "56" * 32,
        "from": OTHER_ADDRESS,
        "to": EXECUTION_ADDRESS,
        "value": "12000000000000000",
        "contractAddress": "",
        "input": "",
        "type": "call",
        "gas": "2300",
        "gasUsed": "0",
        "traceId": "0_1",
        "isError": "0",
        "errCode": "",
    }


@pytest.fixture
def withdrawal_record() -> dict[str, str]:
    """Raw txsBeaconWithdrawal row."""
    return {
        "withdrawalIndex": "1234567",
        "validatorIndex": "424242",
        "address": CONSENSUS_ADDRESS,
        "amount": "16000000",
        "blockNumber": "17100000",
        "timestamp": "1682121600",
    }
