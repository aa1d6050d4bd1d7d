"""Pydantic models for Etherscan account records."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from staking_rewards.helpers.constants import MAX_UNIX_TIMESTAMP


def _check_unix_seconds(value: str) -> str:
    if int(value) > MAX_UNIX_TIMESTAMP:
        msg = f"timestamp {value} is out of range"
        raise ValueError(msg)
    return value


UnixTimestamp = Annotated[
    str,
    StringConstraints(pattern=r"^[0-9]+$"),
    AfterValidator(_check_unix_seconds),
]
"""Unix seconds as a decimal string, bounded to what a datetime can hold."""


class MinedBlock(BaseModel):
    """Block produced by the tracked fee recipient (``getminedblocks``)."""

    block_number: int = Field(..., alias="blockNumber")
    timestamp: UnixTimestamp = Field(..., description="Unix seconds", alias="timeStamp")
    block_reward: int = Field(..., description="Reward in wei", alias="blockReward")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class NormalTransaction(BaseModel):
    """External transaction touching the address (``txlist``)."""

    block_number: int = Field(..., alias="blockNumber")
    timestamp: UnixTimestamp = Field(..., description="Unix seconds", alias="timeStamp")
    hash: str
    from_address: str = Field(..., alias="from")
    to_address: str | None = Field(
        default=None, description="Empty for contract creations", alias="to"
    )
    value: int = Field(..., description="Value in wei")
    gas_price: int = Field(..., description="Gas price in wei", alias="gasPrice")
    gas_used: int = Field(..., alias="gasUsed")
    is_error: str | None = Field(default=None, alias="isError")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def fee(self) -> int:
        """Gas cost paid by the sender, in wei."""
        return self.gas_used * self.gas_price

    @property
    def failed(self) -> bool:
        """Reverted transactions move no value but still pay for gas."""
        return self.is_error == "1"


class InternalTransaction(BaseModel):
    """Value transfer made by contract execution (``txlistinternal``)."""

    block_number: int = Field(..., alias="blockNumber")
    timestamp: UnixTimestamp = Field(..., description="Unix seconds", alias="timeStamp")
    hash: str
    from_address: str = Field(..., alias="from")
    to_address: str | None = Field(default=None, alias="to")
    value: int = Field(..., description="Value in wei")
    is_error: str | None = Field(default=None, alias="isError")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def failed(self) -> bool:
        return self.is_error == "1"


class BeaconWithdrawal(BaseModel):
    """Beacon-chain withdrawal credited to the address (``txsBeaconWithdrawal``)."""

    withdrawal_index: int = Field(..., alias="withdrawalIndex")
    validator_index: int = Field(..., alias="validatorIndex")
    address: str
    amount: int = Field(..., description="Amount in gwei")
    block_number: int = Field(..., alias="blockNumber")
    timestamp: UnixTimestamp = Field(..., description="Unix seconds")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


__all__ = [
    "BeaconWithdrawal",
    "InternalTransaction",
    "MinedBlock",
    "NormalTransaction",
    "UnixTimestamp",
]
