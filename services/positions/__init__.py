"""App token / contract position models, fetcher registries and templates."""

from .models import (
    AddressBalanceError,
    AppToken,
    BalanceProduct,
    ContractPosition,
    ContractPositionBalance,
    ContractType,
    FetcherSelector,
    GetBalancesQuery,
    MetaType,
    Network,
    PositionToken,
    PresentedBalance,
    Token,
    TokenBalance,
)
from .registry import (
    BalanceFetcherRegistry,
    DuplicateFetcherError,
    FetcherKind,
    PositionBalanceFetcherRegistry,
    PositionFetcherRegistry,
)
from .source import PositionSource, StaticPositionFetcher, StaticPositionSource
from .template import AppTokenTemplatePositionFetcher, ContractPositionTemplatePositionFetcher

__all__ = [
    # Models
    'AddressBalanceError',
    'AppToken',
    'BalanceProduct',
    'ContractPosition',
    'ContractPositionBalance',
    'ContractType',
    'FetcherSelector',
    'GetBalancesQuery',
    'MetaType',
    'Network',
    'PositionToken',
    'PresentedBalance',
    'Token',
    'TokenBalance',

    # Registries
    'BalanceFetcherRegistry',
    'DuplicateFetcherError',
    'FetcherKind',
    'PositionBalanceFetcherRegistry',
    'PositionFetcherRegistry',

    # Discovery
    'PositionSource',
    'StaticPositionFetcher',
    'StaticPositionSource',
    'AppTokenTemplatePositionFetcher',
    'ContractPositionTemplatePositionFetcher',
]
