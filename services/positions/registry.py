"""Fetcher registries.

All three registries are the same structure: a read-only-after-startup map
from a selector to an entry tagged with the kind of fetcher it holds. Lookups
never raise; absence is a normal routing signal for the fallback chain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

from .models import ContractType, FetcherSelector, Network


class FetcherKind(str, Enum):
    LEGACY = "legacy"
    TEMPLATE_TOKEN = "template-token"
    TEMPLATE_POSITION = "template-position"
    POSITION = "position"
    CUSTOM = "custom"


@dataclass(frozen=True)
class RegistryEntry:
    kind: FetcherKind
    fetcher: Any


class DuplicateFetcherError(Exception):
    """Raised at startup when a selector is registered twice."""
    pass


class SelectorRegistry:
    """Insertion-ordered selector -> tagged fetcher map."""

    def __init__(self):
        self._entries: Dict[Hashable, RegistryEntry] = {}

    def _register(self, key: Hashable, kind: FetcherKind, fetcher: Any) -> None:
        if key in self._entries:
            raise DuplicateFetcherError(f"{type(self).__name__}: {key} is already registered")
        self._entries[key] = RegistryEntry(kind=kind, fetcher=fetcher)

    def _get_entry(self, key: Hashable) -> Optional[RegistryEntry]:
        return self._entries.get(key)

    def _items(self) -> Iterator[Tuple[Hashable, RegistryEntry]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)


class BalanceFetcherRegistry(SelectorRegistry):
    """Legacy whole-application fetchers keyed by (app_id, network)."""

    def register(self, app_id: str, network: Network, fetcher: Any) -> None:
        self._register((app_id, Network(network)), FetcherKind.LEGACY, fetcher)

    def get(self, app_id: str, network: Network) -> Optional[Any]:
        try:
            entry = self._get_entry((app_id, Network(network)))
        except ValueError:
            return None
        return entry.fetcher if entry else None

    def get_supported(self) -> List[Tuple[str, Network]]:
        return [key for key, _ in self._items()]


class PositionFetcherRegistry(SelectorRegistry):
    """Position fetchers per group, either template (balance-capable) or discovery-only."""

    def register(self, selector: FetcherSelector, fetcher: Any, template: bool = False) -> None:
        if not template:
            kind = FetcherKind.POSITION
        elif selector.type == ContractType.APP_TOKEN:
            kind = FetcherKind.TEMPLATE_TOKEN
        else:
            kind = FetcherKind.TEMPLATE_POSITION
        self._register(selector, kind, fetcher)

    def get_entry(self, selector: FetcherSelector) -> Optional[RegistryEntry]:
        return self._get_entry(selector)

    def get(self, selector: FetcherSelector) -> Optional[Any]:
        entry = self._get_entry(selector)
        return entry.fetcher if entry else None

    def get_group_ids_for_app(self, type: ContractType, network: Network, app_id: str) -> List[str]:
        """Group ids registered for an app, duplicate-free in registration order."""
        try:
            type, network = ContractType(type), Network(network)
        except ValueError:
            return []

        group_ids: List[str] = []
        for selector, _ in self._items():
            if selector.app_id != app_id or selector.network != network or selector.type != type:
                continue
            if selector.group_id not in group_ids:
                group_ids.append(selector.group_id)
        return group_ids

    def get_app_ids(self) -> List[Tuple[str, Network]]:
        pairs: List[Tuple[str, Network]] = []
        for selector, _ in self._items():
            pair = (selector.app_id, selector.network)
            if pair not in pairs:
                pairs.append(pair)
        return pairs


class PositionBalanceFetcherRegistry(SelectorRegistry):
    """Custom per-group balance fetchers."""

    def register(self, selector: FetcherSelector, fetcher: Any) -> None:
        self._register(selector, FetcherKind.CUSTOM, fetcher)

    def get_entry(self, selector: FetcherSelector) -> Optional[RegistryEntry]:
        return self._get_entry(selector)

    def get(self, selector: FetcherSelector) -> Optional[Any]:
        entry = self._get_entry(selector)
        return entry.fetcher if entry else None
