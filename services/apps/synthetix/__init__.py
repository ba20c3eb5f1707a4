"""Synthetix: synths (app tokens) and single-staking StakingRewards farms.

- Ethereum uses the legacy strategy with one whole-app fetcher.
- Optimism synths have no fetcher of their own and fall back to the default
  token balance fetcher.
"""

from services.apps.toolkit import AppToolkit
from services.positions.models import ContractType, FetcherSelector, Network
from services.positions.source import StaticPositionFetcher
from .contracts import SynthetixContractFactory
from .definition import SYNTHETIX_DEFINITION
from .ethereum.balance_fetcher import EthereumSynthetixBalanceFetcher
from .farm import SynthetixStakingRewardsFarmBalances


def register(toolkit: AppToolkit) -> None:
    farm_balances = SynthetixStakingRewardsFarmBalances(
        toolkit.single_staking_farm_balance_helper,
        SynthetixContractFactory(),
    )

    toolkit.app_definitions.register(SYNTHETIX_DEFINITION)

    # Ethereum: legacy whole-app fetcher
    toolkit.balance_fetcher_registry.register(
        SYNTHETIX_DEFINITION.id,
        Network.ETHEREUM_MAINNET,
        EthereumSynthetixBalanceFetcher(toolkit.token_balance_helper, farm_balances),
    )

    # Optimism: synths only, default token balance fetcher
    synth_selector = FetcherSelector(
        app_id=SYNTHETIX_DEFINITION.id,
        network=Network.OPTIMISM_MAINNET,
        group_id=SYNTHETIX_DEFINITION.groups["synth"].id,
        type=ContractType.APP_TOKEN,
    )
    toolkit.position_fetcher_registry.register(
        synth_selector,
        StaticPositionFetcher(synth_selector, toolkit.position_source),
    )
