"""HTTP client utilities and helpers."""

from typing import Any

import httpx

from staking_rewards.helpers.constants import DEFAULT_TIMEOUT
from staking_rewards.helpers.errors import FetchError
from staking_rewards.helpers.logging import get_logger


logger = get_logger(__name__)


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from staking_rewards.helpers.http import create_http_client

        async with create_http_client(timeout=60.0) as client:
            response = await client.get("https://example.com")
        ```
    """
    return httpx.AsyncClient(timeout=timeout, **kwargs)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
    *,
    error_cls: type[FetchError] = FetchError,
    timeout: float | None = None,
) -> Any:
    """Fetch JSON data from a URL, failing fast on any error.

    There is no retry: non-success statuses, transport failures and
    undecodable bodies all raise ``error_cls`` chained to the cause.

    Args:
        client: HTTP client instance
        url: URL to fetch
        params: Optional query parameters
        error_cls: FetchError subclass to raise on failure
        timeout: Optional timeout override

    Returns:
        Parsed JSON payload

    Raises:
        FetchError: (or ``error_cls``) if the request or decoding fails

    Example:
        ```python
        async with create_http_client() as client:
            data = await get_json(client, "https://api.example.com/data")
        ```
    """
    logger.debug("GET %s", url)
    try:
        if timeout is None:
            response = await client.get(url, params=params)
        else:
            response = await client.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        msg = f"HTTP {e.response.status_code} fetching {url}"
        raise error_cls(msg) from e
    except httpx.HTTPError as e:
        msg = f"HTTP error fetching {url}: {e}"
        raise error_cls(msg) from e
    except ValueError as e:
        msg = f"Invalid JSON from {url}: {e}"
        raise error_cls(msg) from e


__all__ = [
    "create_http_client",
    "get_json",
]
