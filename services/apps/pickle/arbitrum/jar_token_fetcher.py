from typing import List

from services.multicall import ContractFactory
from services.positions.models import AppToken, Network
from services.positions.source import PositionSource
from services.positions.template import AppTokenTemplatePositionFetcher
from ..definition import PICKLE_DEFINITION


class ArbitrumPickleJarTokenFetcher(AppTokenTemplatePositionFetcher):
    app_id = PICKLE_DEFINITION.id
    group_id = PICKLE_DEFINITION.groups["jar"].id
    network = Network.ARBITRUM_MAINNET

    def __init__(self, network_provider, contract_factory: ContractFactory, position_source: PositionSource):
        super().__init__(network_provider, contract_factory)
        self.position_source = position_source

    async def get_positions(self) -> List[AppToken]:
        return await self.position_source.get_app_tokens(self.selector)
