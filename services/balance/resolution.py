"""Per-group fetcher resolution: template, then custom, then default."""

from services.positions.models import ContractType, FetcherSelector
from services.positions.registry import (
    FetcherKind,
    PositionBalanceFetcherRegistry,
    PositionFetcherRegistry,
)
from .defaults import (
    DefaultContractPositionBalanceFetcherFactory,
    DefaultTokenBalanceFetcherFactory,
)
from .fetcher import PositionBalanceFetcher


class FetcherResolver:
    """Turns a selector into a ``get_balances(address)`` capability.

    Resolution reads the registries only; the result is never None.
    """

    def __init__(
        self,
        position_fetcher_registry: PositionFetcherRegistry,
        position_balance_fetcher_registry: PositionBalanceFetcherRegistry,
        default_token_balance_fetcher_factory: DefaultTokenBalanceFetcherFactory,
        default_contract_position_balance_fetcher_factory: DefaultContractPositionBalanceFetcherFactory,
    ):
        self.position_fetcher_registry = position_fetcher_registry
        self.position_balance_fetcher_registry = position_balance_fetcher_registry
        self.default_token_balance_fetcher_factory = default_token_balance_fetcher_factory
        self.default_contract_position_balance_fetcher_factory = default_contract_position_balance_fetcher_factory

    def resolve(self, selector: FetcherSelector) -> PositionBalanceFetcher:
        is_token = selector.type == ContractType.APP_TOKEN
        template_kind = FetcherKind.TEMPLATE_TOKEN if is_token else FetcherKind.TEMPLATE_POSITION

        entry = self.position_fetcher_registry.get_entry(selector)
        if entry is not None and entry.kind == template_kind:
            return entry.fetcher

        custom_fetcher = self.position_balance_fetcher_registry.get(selector)
        if custom_fetcher is not None:
            return custom_fetcher

        if is_token:
            return self.default_token_balance_fetcher_factory.build(selector)
        return self.default_contract_position_balance_fetcher_factory.build(selector)
