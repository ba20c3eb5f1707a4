"""ERC20 balances of an app's token group."""

import asyncio
from typing import List, Sequence

from services.multicall import ContractFactory, MulticallClient
from services.positions.models import (
    AppToken,
    ContractType,
    FetcherSelector,
    Network,
    TokenBalance,
)
from services.positions.source import PositionSource
from .fetcher import MulticallProvider


class TokenBalanceHelper:
    """Reads ``balanceOf(address)`` for every token of a group in one batch."""

    def __init__(
        self,
        network_provider: MulticallProvider,
        contract_factory: ContractFactory,
        position_source: PositionSource,
    ):
        self.network_provider = network_provider
        self.contract_factory = contract_factory
        self.position_source = position_source

    async def get_token_balances(
        self,
        *,
        address: str,
        app_id: str,
        group_id: str,
        network: Network,
    ) -> List[TokenBalance]:
        """Get raw balances of every app token in a group, zero balances included.

        Args:
            address: Wallet address
            app_id: App identifier
            group_id: Token group identifier
            network: Network of the group

        Returns:
            One TokenBalance per app token, in discovery order
        """
        selector = FetcherSelector(
            app_id=app_id,
            network=network,
            group_id=group_id,
            type=ContractType.APP_TOKEN,
        )
        app_tokens = await self.position_source.get_app_tokens(selector)
        multicall = self.network_provider.get_multicall(network)
        return await self.get_balances_for_tokens(address, app_tokens, multicall)

    async def get_balances_for_tokens(
        self,
        address: str,
        app_tokens: Sequence[AppToken],
        multicall: MulticallClient,
    ) -> List[TokenBalance]:
        amounts = await asyncio.gather(*(
            multicall.wrap(self.contract_factory.erc20(token.network, token.address)).balanceOf(address)
            for token in app_tokens
        ))
        return [
            TokenBalance(token=token, balance_raw=int(amount))
            for token, amount in zip(app_tokens, amounts)
        ]
