"""Balance orchestrator.

Chooses between the legacy strategy (one registered fetcher for the whole
app on a network) and the generalized strategy (one fetcher per token or
position group, resolved through the fallback chain), fans out over
addresses and groups concurrently and returns ``address -> result``.

Failure policy:
- legacy: a failing address becomes ``AddressBalanceError`` and never affects
  its siblings;
- generalized: a failing group fails the whole request, unless
  ``isolate_group_failures`` is set, in which case the group is logged and
  contributes no records.
"""

import asyncio
import time
from typing import Dict, List, Sequence, Tuple, Union

from balance_api.common.logging_setup import get_logger, log_request_summary
from services.positions.models import (
    AddressBalanceError,
    BalanceRecord,
    ContractType,
    FetcherSelector,
    Network,
    PresentedBalance,
)
from services.positions.registry import BalanceFetcherRegistry, PositionFetcherRegistry
from .fetcher import BalanceFetcher
from .presentation import BalancePresentationService
from .resolution import FetcherResolver

logger = get_logger(__name__)

AddressResult = Union[PresentedBalance, AddressBalanceError]


class BalanceError(Exception):
    """Base class for request-level balance errors."""
    pass


class AppNotSupportedError(BalanceError):
    """No legacy fetcher and no token/position groups for (app_id, network)."""

    status_code = 404

    def __init__(self, app_id: str, network: str):
        self.app_id = app_id
        self.network = network
        super().__init__(f"Protocol {app_id} is not supported on network {network}")


class BalanceService:
    """Top-level balance resolution for a set of addresses."""

    def __init__(
        self,
        balance_fetcher_registry: BalanceFetcherRegistry,
        position_fetcher_registry: PositionFetcherRegistry,
        fetcher_resolver: FetcherResolver,
        balance_presentation_service: BalancePresentationService,
        isolate_group_failures: bool = False,
    ):
        self.balance_fetcher_registry = balance_fetcher_registry
        self.position_fetcher_registry = position_fetcher_registry
        self.fetcher_resolver = fetcher_resolver
        self.balance_presentation_service = balance_presentation_service
        self.isolate_group_failures = isolate_group_failures

    async def _get_balances_legacy_strategy(
        self,
        app_id: str,
        addresses: Sequence[str],
        network: Network,
    ) -> Dict[str, AddressResult]:
        fetcher: BalanceFetcher = self.balance_fetcher_registry.get(app_id, network)

        async def get_address_balances(address: str) -> Tuple[str, AddressResult]:
            try:
                return address, await fetcher.get_balances(address)
            except Exception as e:
                logger.error(
                    f"Failed to fetch balance for {app_id} on network {network.value}: {e}",
                    exc_info=True,
                )
                return address, AddressBalanceError(error=str(e))

        pairs = await asyncio.gather(*(get_address_balances(a) for a in addresses))
        return dict(pairs)

    async def _get_group_balances(self, selector: FetcherSelector, address: str) -> List[BalanceRecord]:
        fetcher = self.fetcher_resolver.resolve(selector)
        if not self.isolate_group_failures:
            return await fetcher.get_balances(address)

        try:
            return await fetcher.get_balances(address)
        except Exception as e:
            logger.error(
                f"Failed to fetch {selector.group_id} balances for {selector.app_id} "
                f"on network {selector.network.value}, skipping group: {e}",
                exc_info=True,
            )
            return []

    async def _get_balances_generalized_strategy(
        self,
        app_id: str,
        addresses: Sequence[str],
        network: Network,
    ) -> Dict[str, PresentedBalance]:
        token_group_ids = self.position_fetcher_registry.get_group_ids_for_app(
            ContractType.APP_TOKEN, network, app_id
        )
        position_group_ids = self.position_fetcher_registry.get_group_ids_for_app(
            ContractType.POSITION, network, app_id
        )

        if not token_group_ids and not position_group_ids:
            raise AppNotSupportedError(app_id, network.value)

        selectors = [
            FetcherSelector(app_id=app_id, network=network, group_id=group_id, type=ContractType.APP_TOKEN)
            for group_id in token_group_ids
        ] + [
            FetcherSelector(app_id=app_id, network=network, group_id=group_id, type=ContractType.POSITION)
            for group_id in position_group_ids
        ]

        async def get_address_balances(address: str) -> Tuple[str, PresentedBalance]:
            group_balances = await asyncio.gather(*(
                self._get_group_balances(selector, address) for selector in selectors
            ))
            balances = [record for records in group_balances for record in records]

            presented = await self.balance_presentation_service.present(
                app_id=app_id,
                network=network,
                address=address,
                balances=balances,
            )
            return address, presented

        pairs = await asyncio.gather(*(get_address_balances(a) for a in addresses))
        return dict(pairs)

    async def get_balances(
        self,
        *,
        app_id: str,
        addresses: Sequence[str],
        network: Union[Network, str],
    ) -> Dict[str, AddressResult]:
        """Resolve balances of every address for an app on a network.

        Args:
            app_id: App identifier
            addresses: Wallet addresses
            network: Network enum or slug

        Returns:
            Mapping of each address to its presented balance (or, for the
            legacy strategy, an AddressBalanceError)

        Raises:
            AppNotSupportedError: If the app has nothing registered on the network
        """
        try:
            network = Network(network)
        except ValueError:
            raise AppNotSupportedError(app_id, str(network)) from None

        started = time.monotonic()
        if self.balance_fetcher_registry.get(app_id, network) is not None:
            strategy = "legacy"
            result = await self._get_balances_legacy_strategy(app_id, addresses, network)
        else:
            strategy = "generalized"
            result = await self._get_balances_generalized_strategy(app_id, addresses, network)

        failures = sum(1 for r in result.values() if isinstance(r, AddressBalanceError))
        log_request_summary(
            app_id=app_id,
            network=network.value,
            addresses=list(result),
            failures=failures,
            duration_seconds=time.monotonic() - started,
            strategy=strategy,
        )
        return result
