import asyncio

from services.balance.presentation import present_balance_fetcher_response
from services.balance.token_balance_helper import TokenBalanceHelper
from services.positions.models import Network, PresentedBalance
from ..definition import PICKLE_DEFINITION
from ..farm import PickleMiniChefV2FarmBalances

network = Network.POLYGON_MAINNET


class PolygonPickleBalanceFetcher:
    """Whole-app fetcher for Pickle on Polygon: MiniChefV2 farms and jars."""

    def __init__(
        self,
        token_balance_helper: TokenBalanceHelper,
        farm_balances: PickleMiniChefV2FarmBalances,
    ):
        self.token_balance_helper = token_balance_helper
        self.farm_balances = farm_balances

    async def _get_jar_balances(self, address: str):
        return await self.token_balance_helper.get_token_balances(
            address=address,
            app_id=PICKLE_DEFINITION.id,
            group_id=PICKLE_DEFINITION.groups["jar"].id,
            network=network,
        )

    async def _get_farm_balances(self, address: str):
        return await self.farm_balances.get_balances(address, network)

    async def get_balances(self, address: str) -> PresentedBalance:
        farm_balances, jar_balances = await asyncio.gather(
            self._get_farm_balances(address),
            self._get_jar_balances(address),
        )

        return present_balance_fetcher_response([
            {
                "label": "Farms",
                "assets": farm_balances,
            },
            {
                "label": "Jars",
                "assets": jar_balances,
            },
        ])
