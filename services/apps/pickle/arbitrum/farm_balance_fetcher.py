from typing import List

from services.positions.models import ContractPositionBalance, Network
from ..farm import PickleMiniChefV2FarmBalances


class ArbitrumPickleFarmContractPositionBalanceFetcher:
    """Per-group balance fetcher for the Arbitrum MiniChefV2 farm."""

    network = Network.ARBITRUM_MAINNET

    def __init__(self, farm_balances: PickleMiniChefV2FarmBalances):
        self.farm_balances = farm_balances

    async def get_balances(self, address: str) -> List[ContractPositionBalance]:
        return await self.farm_balances.get_balances(address, self.network)
