import asyncio

from services.balance.presentation import present_balance_fetcher_response
from services.balance.token_balance_helper import TokenBalanceHelper
from services.positions.models import Network, PresentedBalance
from ..definition import SYNTHETIX_DEFINITION
from ..farm import SynthetixStakingRewardsFarmBalances

network = Network.ETHEREUM_MAINNET


class EthereumSynthetixBalanceFetcher:
    """Whole-app fetcher for Synthetix on Ethereum: synths and StakingRewards farms."""

    def __init__(
        self,
        token_balance_helper: TokenBalanceHelper,
        farm_balances: SynthetixStakingRewardsFarmBalances,
    ):
        self.token_balance_helper = token_balance_helper
        self.farm_balances = farm_balances

    async def _get_synth_balances(self, address: str):
        return await self.token_balance_helper.get_token_balances(
            address=address,
            app_id=SYNTHETIX_DEFINITION.id,
            group_id=SYNTHETIX_DEFINITION.groups["synth"].id,
            network=network,
        )

    async def _get_farm_balances(self, address: str):
        return await self.farm_balances.get_balances(address, network)

    async def get_balances(self, address: str) -> PresentedBalance:
        synth_balances, farm_balances = await asyncio.gather(
            self._get_synth_balances(address),
            self._get_farm_balances(address),
        )

        return present_balance_fetcher_response([
            {
                "label": "Synths",
                "assets": synth_balances,
            },
            {
                "label": "Staking",
                "assets": farm_balances,
            },
        ])
