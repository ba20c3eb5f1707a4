"""Capabilities consumed by the balance orchestrator."""

from typing import List, Protocol, runtime_checkable

from services.multicall import MulticallClient
from services.positions.models import BalanceRecord, Network, PresentedBalance


@runtime_checkable
class BalanceFetcher(Protocol):
    """Legacy whole-application fetcher: already presents its own response."""

    async def get_balances(self, address: str) -> PresentedBalance:
        ...


@runtime_checkable
class PositionBalanceFetcher(Protocol):
    """Per-group fetcher returning raw balance records."""

    async def get_balances(self, address: str) -> List[BalanceRecord]:
        ...


class MulticallProvider(Protocol):
    def get_multicall(self, network: Network) -> MulticallClient:
        ...
