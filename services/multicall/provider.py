"""Per-network RPC clients and multicall factories."""

import asyncio
from typing import Dict

import structlog

from .client import MulticallClient
from .rpc import RpcClient

logger = structlog.get_logger()


class UnknownNetworkError(Exception):
    """Raised when no RPC endpoint is configured for a network."""
    pass


class NetworkProvider:
    """Hands out one shared RPC client per network and fresh multicall clients."""

    def __init__(self, settings):
        self.settings = settings
        self._rpc_clients: Dict[str, RpcClient] = {}

    def get_rpc(self, network) -> RpcClient:
        network = str(getattr(network, "value", network))
        rpc = self._rpc_clients.get(network)
        if rpc is not None:
            return rpc

        rpc_url = self.settings.rpc_url_for(network)
        if not rpc_url:
            raise UnknownNetworkError(f"No RPC URL configured for network {network}")

        rpc = RpcClient(
            rpc_url,
            network,
            rate_limit_semaphore=asyncio.Semaphore(self.settings.rpc_concurrency),
            timeout=self.settings.http_timeout,
            max_retries=self.settings.max_retries,
        )
        self._rpc_clients[network] = rpc
        logger.info("rpc_client_created", network=network)
        return rpc

    def get_multicall(self, network) -> MulticallClient:
        """New batching client; callers never share a pending queue."""
        return MulticallClient(
            self.get_rpc(network),
            batch_size=self.settings.multicall_batch_size,
            multicall_address=self.settings.multicall_address,
        )
