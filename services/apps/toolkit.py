"""Shared collaborators handed to every app integration at startup."""

from dataclasses import dataclass

from services.balance.staking_farm import (
    SingleStakingFarmContractPositionBalanceHelper,
    StakingFarmContractPositionBalanceHelper,
)
from services.balance.token_balance_helper import TokenBalanceHelper
from services.positions.registry import (
    BalanceFetcherRegistry,
    PositionBalanceFetcherRegistry,
    PositionFetcherRegistry,
)
from services.positions.source import PositionSource
from .definition import AppDefinitionRegistry


@dataclass
class AppToolkit:
    network_provider: object
    position_source: PositionSource
    token_balance_helper: TokenBalanceHelper
    staking_farm_balance_helper: StakingFarmContractPositionBalanceHelper
    single_staking_farm_balance_helper: SingleStakingFarmContractPositionBalanceHelper
    app_definitions: AppDefinitionRegistry
    balance_fetcher_registry: BalanceFetcherRegistry
    position_fetcher_registry: PositionFetcherRegistry
    position_balance_fetcher_registry: PositionBalanceFetcherRegistry
