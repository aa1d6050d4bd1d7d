"""Tests for EtherscanClient against a mocked Etherscan API."""

from typing import TYPE_CHECKING, Any

import httpx
import pytest

from staking_rewards.explorer.client import EtherscanClient
from staking_rewards.helpers.errors import ExplorerError, FetchError
from staking_rewards.prices.limiter import RateLimiter


if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


def ok(result: list[Any]) -> dict[str, Any]:
    return {"status": "1", "message": "OK", "result": result}


def make_client(client: httpx.AsyncClient) -> EtherscanClient:
    return EtherscanClient("etherscan-key", client, RateLimiter(0))


class TestInit:
    """Tests for EtherscanClient construction."""

    def test_empty_api_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="API key cannot be empty"):
            EtherscanClient("", httpx.AsyncClient())

    def test_default_limiter(self) -> None:
        explorer = EtherscanClient("key", httpx.AsyncClient())
        assert explorer.limiter.interval > 0


class TestQueries:
    """Tests for the four account queries."""

    @pytest.mark.asyncio
    async def test_get_mined_blocks(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        mined_block_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([mined_block_record]))

        async with httpx.AsyncClient() as client:
            blocks = await make_client(client).get_mined_blocks(execution_address)

        assert len(blocks) == 1
        assert blocks[0].block_number == 17_000_000
        assert blocks[0].timestamp == "1680911891"
        assert blocks[0].block_reward == 52_309_212_378_391_034

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["action"] == "getminedblocks"
        assert request.url.params["blocktype"] == "blocks"
        assert request.url.params["address"] == execution_address
        assert request.url.params["apikey"] == "etherscan-key"
        assert request.url.params["chainid"] == "1"

    @pytest.mark.asyncio
    async def test_get_transactions(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        other_address: str,
        transaction_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([transaction_record]))

        async with httpx.AsyncClient() as client:
            txs = await make_client(client).get_transactions(execution_address)

        tx = txs[0]
        assert tx.from_address == other_address
        assert tx.to_address == execution_address
        assert tx.value == 35_000_000_000_000_000
        assert tx.fee == 21_000 * 30_000_000_000

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["action"] == "txlist"
        assert request.url.params["sort"] == "asc"

    @pytest.mark.asyncio
    async def test_contract_creation_has_no_recipient(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        transaction_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([{**transaction_record, "to": ""}]))

        async with httpx.AsyncClient() as client:
            txs = await make_client(client).get_transactions(execution_address)

        assert not txs[0].to_address

    @pytest.mark.asyncio
    async def test_get_internal_transactions(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        internal_transaction_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([internal_transaction_record]))

        async with httpx.AsyncClient() as client:
            txs = await make_client(client).get_internal_transactions(
                execution_address
            )

        assert txs[0].value == 12_000_000_000_000_000
        assert txs[0].to_address == execution_address

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["action"] == "txlistinternal"

    @pytest.mark.asyncio
    async def test_get_beacon_withdrawals(
        self,
        httpx_mock: "HTTPXMock",
        consensus_address: str,
        withdrawal_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([withdrawal_record]))

        async with httpx.AsyncClient() as client:
            withdrawals = await make_client(client).get_beacon_withdrawals(
                consensus_address
            )

        assert withdrawals[0].validator_index == 424242
        assert withdrawals[0].amount == 16_000_000
        assert withdrawals[0].timestamp == "1682121600"

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.params["action"] == "txsBeaconWithdrawal"

    @pytest.mark.asyncio
    async def test_no_records_is_empty(
        self, httpx_mock: "HTTPXMock", execution_address: str
    ) -> None:
        """Test that Etherscan's empty-result status is not an error."""
        httpx_mock.add_response(
            json={"status": "0", "message": "No transactions found", "result": []}
        )

        async with httpx.AsyncClient() as client:
            assert await make_client(client).get_mined_blocks(execution_address) == []

    @pytest.mark.asyncio
    async def test_each_query_takes_a_limiter_slot(
        self, httpx_mock: "HTTPXMock", execution_address: str
    ) -> None:
        httpx_mock.add_response(json=ok([]))
        httpx_mock.add_response(json=ok([]))
        limiter = RateLimiter(0)

        async with httpx.AsyncClient() as client:
            explorer = EtherscanClient("key", client, limiter)
            await explorer.get_transactions(execution_address)
            await explorer.get_internal_transactions(execution_address)

        assert limiter.permits == 2


class TestErrors:
    """Tests for explorer failure handling."""

    @pytest.mark.asyncio
    async def test_api_error_raises(
        self, httpx_mock: "HTTPXMock", execution_address: str
    ) -> None:
        httpx_mock.add_response(
            json={"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(ExplorerError, match="Invalid API Key"):
                await make_client(client).get_transactions(execution_address)

    @pytest.mark.asyncio
    async def test_http_error_raises_fetch_error(
        self, httpx_mock: "HTTPXMock", execution_address: str
    ) -> None:
        httpx_mock.add_response(status_code=502)

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError):
                await make_client(client).get_beacon_withdrawals(execution_address)

    @pytest.mark.asyncio
    async def test_malformed_record_raises(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        mined_block_record: dict[str, str],
    ) -> None:
        """Test that a record missing required fields is rejected."""
        record = {k: v for k, v in mined_block_record.items() if k != "blockReward"}
        httpx_mock.add_response(json=ok([record]))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ExplorerError, match="Malformed getminedblocks"):
                await make_client(client).get_mined_blocks(execution_address)

    @pytest.mark.asyncio
    async def test_non_object_payload_raises(
        self, httpx_mock: "HTTPXMock", execution_address: str
    ) -> None:
        httpx_mock.add_response(json=["unexpected"])

        async with httpx.AsyncClient() as client:
            with pytest.raises(ExplorerError, match="Unexpected Etherscan payload"):
                await make_client(client).get_mined_blocks(execution_address)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timestamp", ["abc", "", "-1", "1.5", "99999999999999"])
    async def test_malformed_timestamp_raises(
        self,
        httpx_mock: "HTTPXMock",
        execution_address: str,
        transaction_record: dict[str, str],
        timestamp: str,
    ) -> None:
        """Test that unparseable or out-of-range times are rejected at the edge."""
        httpx_mock.add_response(json=ok([{**transaction_record, "timeStamp": timestamp}]))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ExplorerError, match="Malformed txlist"):
                await make_client(client).get_transactions(execution_address)

    @pytest.mark.asyncio
    async def test_malformed_withdrawal_timestamp_raises(
        self,
        httpx_mock: "HTTPXMock",
        consensus_address: str,
        withdrawal_record: dict[str, str],
    ) -> None:
        httpx_mock.add_response(json=ok([{**withdrawal_record, "timestamp": "soon"}]))

        async with httpx.AsyncClient() as client:
            with pytest.raises(ExplorerError, match="Malformed txsBeaconWithdrawal"):
                await make_client(client).get_beacon_withdrawals(consensus_address)
