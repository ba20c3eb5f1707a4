"""Process-start wiring.

Registries are populated here once and are read-only afterwards.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from services.apps import pickle, synthetix
from services.apps.definition import AppDefinitionRegistry
from services.apps.toolkit import AppToolkit
from services.balance import (
    BalancePresentationService,
    BalancePresenterRegistry,
    BalanceService,
    DefaultBalancePresenterFactory,
    DefaultContractPositionBalanceFetcherFactory,
    DefaultTokenBalanceFetcherFactory,
    FetcherResolver,
    SingleStakingFarmContractPositionBalanceHelper,
    StakingFarmContractPositionBalanceHelper,
    TokenBalanceHelper,
)
from services.multicall import ContractFactory, NetworkProvider
from services.positions import (
    BalanceFetcherRegistry,
    PositionBalanceFetcherRegistry,
    PositionFetcherRegistry,
    PositionSource,
    StaticPositionSource,
)
from .common import config
from .common.logging_setup import get_logger

logger = get_logger(__name__)

APP_REGISTRATIONS: Sequence[Callable[[AppToolkit], None]] = (
    pickle.register,
    synthetix.register,
)


@dataclass
class Container:
    toolkit: AppToolkit
    fetcher_resolver: FetcherResolver
    balance_presenter_registry: BalancePresenterRegistry
    balance_service: BalanceService


def check_declared_networks(toolkit: AppToolkit) -> None:
    """Fail startup when an app registers fetchers on a network its definition does not list."""
    registered = (
        toolkit.balance_fetcher_registry.get_supported()
        + toolkit.position_fetcher_registry.get_app_ids()
    )
    for app_id, network in registered:
        definition = toolkit.app_definitions.get(app_id)
        if definition is not None and network not in definition.networks:
            raise ValueError(
                f"App {app_id} registers fetchers on {network.value}, "
                f"which its definition does not declare"
            )


def build_container(
    settings: Optional[config.Settings] = None,
    position_source: Optional[PositionSource] = None,
    network_provider=None,
    registrations: Optional[Sequence[Callable[[AppToolkit], None]]] = None,
) -> Container:
    settings = settings or config.settings

    if position_source is None:
        if settings.positions_file:
            position_source = StaticPositionSource.from_file(settings.positions_file)
        else:
            logger.warning("POSITIONS_FILE is not set, starting with no app tokens or contract positions")
            position_source = StaticPositionSource()

    network_provider = network_provider or NetworkProvider(settings)
    contract_factory = ContractFactory()
    staking_farm_balance_helper = StakingFarmContractPositionBalanceHelper(network_provider, position_source)

    toolkit = AppToolkit(
        network_provider=network_provider,
        position_source=position_source,
        token_balance_helper=TokenBalanceHelper(network_provider, contract_factory, position_source),
        staking_farm_balance_helper=staking_farm_balance_helper,
        single_staking_farm_balance_helper=SingleStakingFarmContractPositionBalanceHelper(staking_farm_balance_helper),
        app_definitions=AppDefinitionRegistry(),
        balance_fetcher_registry=BalanceFetcherRegistry(),
        position_fetcher_registry=PositionFetcherRegistry(),
        position_balance_fetcher_registry=PositionBalanceFetcherRegistry(),
    )

    for register in (APP_REGISTRATIONS if registrations is None else registrations):
        register(toolkit)
    check_declared_networks(toolkit)

    fetcher_resolver = FetcherResolver(
        toolkit.position_fetcher_registry,
        toolkit.position_balance_fetcher_registry,
        DefaultTokenBalanceFetcherFactory(toolkit.token_balance_helper),
        DefaultContractPositionBalanceFetcherFactory(network_provider, contract_factory, position_source),
    )
    balance_presenter_registry = BalancePresenterRegistry()
    balance_presentation_service = BalancePresentationService(
        balance_presenter_registry,
        DefaultBalancePresenterFactory(toolkit.app_definitions, toolkit.position_fetcher_registry),
    )
    balance_service = BalanceService(
        toolkit.balance_fetcher_registry,
        toolkit.position_fetcher_registry,
        fetcher_resolver,
        balance_presentation_service,
        isolate_group_failures=settings.isolate_group_failures,
    )

    logger.info(
        f"Registered {len(toolkit.balance_fetcher_registry)} legacy fetchers, "
        f"{len(toolkit.position_fetcher_registry)} position fetchers and "
        f"{len(toolkit.position_balance_fetcher_registry)} custom balance fetchers"
    )

    return Container(
        toolkit=toolkit,
        fetcher_resolver=fetcher_resolver,
        balance_presenter_registry=balance_presenter_registry,
        balance_service=balance_service,
    )
