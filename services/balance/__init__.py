"""Balance resolution services.

This module provides the orchestrator that turns an (app, network, addresses)
request into presented balances, together with the fetcher resolution chain,
default fetchers, strategy helpers and presentation.
"""

from .fetcher import BalanceFetcher, PositionBalanceFetcher
from .token_balance_helper import TokenBalanceHelper
from .staking_farm import (
    SingleStakingFarmContractPositionBalanceHelper,
    StakingFarmContractPositionBalanceHelper,
    StakingFarmDefaultStakedBalanceStrategy,
    StakingFarmSingleClaimableBalanceStrategy,
    StakingFarmV2ClaimableBalanceStrategy,
)
from .defaults import (
    DefaultContractPositionBalanceFetcherFactory,
    DefaultTokenBalanceFetcherFactory,
)
from .resolution import FetcherResolver
from .presentation import (
    BalancePresentationService,
    BalancePresenterRegistry,
    DefaultBalancePresenterFactory,
    present_balance_fetcher_response,
)
from .service import AppNotSupportedError, BalanceError, BalanceService

__all__ = [
    # Protocols
    'BalanceFetcher',
    'PositionBalanceFetcher',

    # Helpers
    'TokenBalanceHelper',
    'SingleStakingFarmContractPositionBalanceHelper',
    'StakingFarmContractPositionBalanceHelper',
    'StakingFarmDefaultStakedBalanceStrategy',
    'StakingFarmSingleClaimableBalanceStrategy',
    'StakingFarmV2ClaimableBalanceStrategy',

    # Resolution
    'DefaultContractPositionBalanceFetcherFactory',
    'DefaultTokenBalanceFetcherFactory',
    'FetcherResolver',

    # Presentation
    'BalancePresentationService',
    'BalancePresenterRegistry',
    'DefaultBalancePresenterFactory',
    'present_balance_fetcher_response',

    # Orchestrator
    'AppNotSupportedError',
    'BalanceError',
    'BalanceService',
]
