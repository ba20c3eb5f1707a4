"""Balance presentation: flat balance records -> labeled products.

Every tier (legacy fetchers, templates, custom and default fetchers) ends up
here, so the zero-balance rule is applied once and identically to all
groups: an asset is shown iff ``has_balance()``.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from services.apps.definition import AppDefinitionRegistry
from services.positions.models import (
    BalanceProduct,
    BalanceRecord,
    ContractType,
    Network,
    PresentedBalance,
)
from services.positions.registry import FetcherKind, PositionFetcherRegistry, SelectorRegistry


def present_balance_fetcher_response(groups: Sequence[Mapping[str, Any]]) -> PresentedBalance:
    """Build the response from ``[{"label": ..., "assets": [...]}, ...]``."""
    products = [
        BalanceProduct(
            label=group["label"],
            assets=[asset for asset in group["assets"] if asset.has_balance()],
        )
        for group in groups
    ]
    meta = [{
        "label": "Assets",
        "type": "number",
        "value": sum(len(product.assets) for product in products),
    }]
    return PresentedBalance(products=products, meta=meta)


class BalancePresenter(Protocol):
    async def present(self, address: str, balances: List[BalanceRecord]) -> PresentedBalance:
        ...


class DefaultBalancePresenter:
    """One product per group of the app on the network, labeled from the app definition."""

    def __init__(self, group_labels: Mapping[str, str]):
        self.group_labels = dict(group_labels)

    async def present(self, address: str, balances: List[BalanceRecord]) -> PresentedBalance:
        assets_by_group: Dict[str, List[BalanceRecord]] = {group_id: [] for group_id in self.group_labels}
        for balance in balances:
            assets_by_group.setdefault(balance.group_id, []).append(balance)

        return present_balance_fetcher_response([
            {"label": self.group_labels.get(group_id, group_id), "assets": assets}
            for group_id, assets in assets_by_group.items()
        ])


class DefaultBalancePresenterFactory:
    def __init__(
        self,
        app_definitions: AppDefinitionRegistry,
        position_fetcher_registry: PositionFetcherRegistry,
    ):
        self.app_definitions = app_definitions
        self.position_fetcher_registry = position_fetcher_registry

    def build(self, app_id: str, network: Network) -> DefaultBalancePresenter:
        registered = [
            group_id
            for type in (ContractType.APP_TOKEN, ContractType.POSITION)
            for group_id in self.position_fetcher_registry.get_group_ids_for_app(type, network, app_id)
        ]

        definition = self.app_definitions.get(app_id)
        ordered = [g for g in definition.group_ids() if g in registered] if definition else []
        ordered += [g for g in registered if g not in ordered]

        group_labels = {}
        for group_id in ordered:
            label = definition.group_label(group_id) if definition else None
            group_labels[group_id] = label or group_id
        return DefaultBalancePresenter(group_labels)


class BalancePresenterRegistry(SelectorRegistry):
    """Custom presenters keyed by (app_id, network)."""

    def register(self, app_id: str, network: Network, presenter: BalancePresenter) -> None:
        self._register((app_id, Network(network)), FetcherKind.CUSTOM, presenter)

    def get(self, app_id: str, network: Network) -> Optional[BalancePresenter]:
        entry = self._get_entry((app_id, Network(network)))
        return entry.fetcher if entry else None


class BalancePresentationService:
    def __init__(
        self,
        balance_presenter_registry: BalancePresenterRegistry,
        default_balance_presenter_factory: DefaultBalancePresenterFactory,
    ):
        self.balance_presenter_registry = balance_presenter_registry
        self.default_balance_presenter_factory = default_balance_presenter_factory

    async def present(
        self,
        *,
        app_id: str,
        network: Network,
        address: str,
        balances: List[BalanceRecord],
    ) -> PresentedBalance:
        presenter = self.balance_presenter_registry.get(app_id, network)
        if presenter is None:
            presenter = self.default_balance_presenter_factory.build(app_id, network)
        return await presenter.present(address, balances)
