"""Configuration management and environment variable utilities."""

import os
import re

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from staking_rewards.helpers.constants import DEFAULT_PRICE_CACHE_FILE
from staking_rewards.helpers.errors import ConfigError


# Load environment variables from .env file
load_dotenv()

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Settings(BaseModel):
    """Runtime configuration of a reconciliation run."""

    model_config = ConfigDict(frozen=True)

    etherscan_api_key: str = Field(..., description="Etherscan API key")
    execution_rewards_address: str = Field(
        ..., description="Fee recipient receiving block rewards and MEV tips"
    )
    consensus_rewards_address: str = Field(
        ..., description="Withdrawal address receiving beacon-chain withdrawals"
    )
    coingecko_api_key: str | None = Field(
        default=None, description="Optional CoinGecko API key (raises the rate limit)"
    )
    price_cache_file: str = Field(
        default=DEFAULT_PRICE_CACHE_FILE, description="Path of the price cache"
    )


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ConfigError: If the environment variable is not set

    Example:
        ```python
        from staking_rewards.helpers.config import get_required_env

        api_key = get_required_env("ETHERSCAN_API_KEY")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ConfigError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Empty values are treated as unset.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key) or default


def get_address(key: str) -> str:
    """Get a required Ethereum address from the environment.

    Args:
        key: Environment variable name

    Returns:
        Lower-cased, 0x-prefixed address

    Raises:
        ConfigError: If the variable is not set or is not a 20-byte hex address
    """
    value = get_required_env(key).strip()
    if not ADDRESS_PATTERN.match(value):
        msg = f"{key} is not a valid Ethereum address: {value!r}"
        raise ConfigError(msg)
    return value.lower()


def load_settings(price_cache_file: str | None = None) -> Settings:
    """Load run configuration from the environment.

    Args:
        price_cache_file: Optional cache path overriding PRICE_CACHE_FILE

    Returns:
        Settings for the run

    Raises:
        ConfigError: If a required variable is missing or invalid

    Example:
        ```python
        from staking_rewards.helpers.config import load_settings

        settings = load_settings()
        print(settings.execution_rewards_address)
        ```
    """
    return Settings(
        etherscan_api_key=get_required_env("ETHERSCAN_API_KEY"),
        execution_rewards_address=get_address("EXECUTION_REWARDS_ADDRESS"),
        consensus_rewards_address=get_address("CONSENSUS_REWARDS_ADDRESS"),
        coingecko_api_key=get_optional_env("COINGECKO_API_KEY"),
        price_cache_file=price_cache_file
        or get_optional_env("PRICE_CACHE_FILE", DEFAULT_PRICE_CACHE_FILE)
        or DEFAULT_PRICE_CACHE_FILE,
    )


__all__ = [
    "Settings",
    "get_address",
    "get_optional_env",
    "get_required_env",
    "load_settings",
]
