"""JSON-RPC transport for contract reads.

Thin async client around ``eth_call`` with retry and rate limiting. Batching
lives one level up in :mod:`services.multicall.client`.
"""

import asyncio
from typing import Any, List, Optional

import aiohttp
import structlog
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

logger = structlog.get_logger()


class MulticallError(Exception):
    """Raised when an RPC call or an individual batched call fails."""
    pass


class RpcClient:
    """Async JSON-RPC client for one network."""

    def __init__(
        self,
        rpc_url: str,
        network: str,
        rate_limit_semaphore: Optional[asyncio.Semaphore] = None,
        timeout: int = 30,
        max_retries: int = 5,
    ):
        """Initialize RPC client.

        Args:
            rpc_url: Node endpoint URL
            network: Network slug, used for log context
            rate_limit_semaphore: Optional semaphore for rate limiting
            timeout: Request timeout in seconds
            max_retries: Attempts per request on transport errors

        Raises:
            ValueError: If no RPC URL is provided
        """
        if not rpc_url:
            raise ValueError(f"RPC URL is required for network {network}")

        self.rpc_url = rpc_url
        self.network = network
        self.rate_limit = rate_limit_semaphore or asyncio.Semaphore(15)
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries

        self.logger = logger.bind(component="rpc_client", network=network)

    async def _rpc_call(
        self,
        method: str,
        params: List[Any],
    ) -> Any:
        """Make a JSON-RPC call, retrying transport errors.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: Method parameters

        Returns:
            RPC response result

        Raises:
            MulticallError: On RPC errors
            aiohttp.ClientError: On HTTP errors once retries are exhausted
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=60),
            retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._post(method, params)

    async def _post(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }

        async with self.rate_limit:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.rpc_url, json=payload) as response:
                    response.raise_for_status()
                    data = await response.json()

                    if "error" in data:
                        error_msg = data["error"].get("message", "Unknown error")
                        self.logger.error("rpc_error", method=method, error=error_msg)
                        raise MulticallError(f"RPC error: {error_msg}")

                    return data.get("result")

    async def eth_call(
        self,
        to: str,
        data: bytes,
        block: str = "latest",
    ) -> bytes:
        """Execute a read-only call and return the raw return data."""
        result = await self._rpc_call(
            "eth_call",
            [{"to": to, "data": "0x" + data.hex()}, block],
        )

        if not result or result == "0x":
            return b""
        return bytes.fromhex(result[2:])
