"""Pickle Finance: jars (app tokens) and MiniChefV2 farms (contract positions).

- Polygon uses the legacy strategy with one whole-app fetcher.
- Arbitrum uses the generalized strategy: a template fetcher for jars and a
  custom balance fetcher for the farm.
- Ethereum jars have no fetcher of their own and fall back to the default
  token balance fetcher.
"""

from services.apps.toolkit import AppToolkit
from services.positions.models import ContractType, FetcherSelector, Network
from services.positions.source import StaticPositionFetcher
from .arbitrum.farm_balance_fetcher import ArbitrumPickleFarmContractPositionBalanceFetcher
from .arbitrum.jar_token_fetcher import ArbitrumPickleJarTokenFetcher
from .contracts import PickleContractFactory
from .definition import PICKLE_DEFINITION
from .farm import PickleMiniChefV2FarmBalances
from .polygon.balance_fetcher import PolygonPickleBalanceFetcher


def register(toolkit: AppToolkit) -> None:
    contract_factory = PickleContractFactory()
    farm_balances = PickleMiniChefV2FarmBalances(toolkit.staking_farm_balance_helper, contract_factory)

    toolkit.app_definitions.register(PICKLE_DEFINITION)

    # Polygon: legacy whole-app fetcher
    toolkit.balance_fetcher_registry.register(
        PICKLE_DEFINITION.id,
        Network.POLYGON_MAINNET,
        PolygonPickleBalanceFetcher(toolkit.token_balance_helper, farm_balances),
    )

    # Arbitrum: jar template + farm discovery with a custom balance fetcher
    jar_fetcher = ArbitrumPickleJarTokenFetcher(
        toolkit.network_provider,
        contract_factory,
        toolkit.position_source,
    )
    toolkit.position_fetcher_registry.register(jar_fetcher.selector, jar_fetcher, template=True)

    farm_selector = FetcherSelector(
        app_id=PICKLE_DEFINITION.id,
        network=Network.ARBITRUM_MAINNET,
        group_id=PICKLE_DEFINITION.groups["masterchefV2Farm"].id,
        type=ContractType.POSITION,
    )
    toolkit.position_fetcher_registry.register(
        farm_selector,
        StaticPositionFetcher(farm_selector, toolkit.position_source),
    )
    toolkit.position_balance_fetcher_registry.register(
        farm_selector,
        ArbitrumPickleFarmContractPositionBalanceFetcher(farm_balances),
    )

    # Ethereum: jars only, default token balance fetcher
    jar_selector = FetcherSelector(
        app_id=PICKLE_DEFINITION.id,
        network=Network.ETHEREUM_MAINNET,
        group_id=PICKLE_DEFINITION.groups["jar"].id,
        type=ContractType.APP_TOKEN,
    )
    toolkit.position_fetcher_registry.register(
        jar_selector,
        StaticPositionFetcher(jar_selector, toolkit.position_source),
    )
