"""Fallback fetchers built on demand for groups without a registered fetcher.

Building a default fetcher never registers it.
"""

import asyncio
from typing import List

from services.multicall import ContractFactory
from services.positions.models import (
    ContractPosition,
    ContractPositionBalance,
    ContractType,
    FetcherSelector,
    MetaType,
    TokenBalance,
)
from services.positions.source import PositionSource
from .fetcher import MulticallProvider
from .token_balance_helper import TokenBalanceHelper


class DefaultTokenBalanceFetcher:
    """Plain ERC20 balances of the group's app tokens."""

    def __init__(self, selector: FetcherSelector, token_balance_helper: TokenBalanceHelper):
        self.selector = selector
        self.token_balance_helper = token_balance_helper

    async def get_balances(self, address: str) -> List[TokenBalance]:
        return await self.token_balance_helper.get_token_balances(
            address=address,
            app_id=self.selector.app_id,
            group_id=self.selector.group_id,
            network=self.selector.network,
        )


class DefaultTokenBalanceFetcherFactory:
    def __init__(self, token_balance_helper: TokenBalanceHelper):
        self.token_balance_helper = token_balance_helper

    def build(self, selector: FetcherSelector) -> DefaultTokenBalanceFetcher:
        if selector.type != ContractType.APP_TOKEN:
            raise ValueError(f"Cannot build a token balance fetcher for {selector}")
        return DefaultTokenBalanceFetcher(selector, self.token_balance_helper)


class DefaultContractPositionBalanceFetcher:
    """Raw ``balanceOf`` of each position contract, reported on its supplied token.

    No reward resolution: every other token slot reports zero.
    """

    def __init__(
        self,
        selector: FetcherSelector,
        network_provider: MulticallProvider,
        contract_factory: ContractFactory,
        position_source: PositionSource,
    ):
        self.selector = selector
        self.network_provider = network_provider
        self.contract_factory = contract_factory
        self.position_source = position_source

    async def get_balances(self, address: str) -> List[ContractPositionBalance]:
        positions = await self.position_source.get_contract_positions(self.selector)
        multicall = self.network_provider.get_multicall(self.selector.network)

        async def get_position_balance(position: ContractPosition) -> ContractPositionBalance:
            contract = self.contract_factory.erc20(position.network, position.address)
            amount = int(await multicall.wrap(contract).balanceOf(address))

            tokens = []
            supplied_seen = False
            for slot in position.tokens:
                balance_raw = 0
                if slot.meta_type == MetaType.SUPPLIED and not supplied_seen:
                    balance_raw = amount
                    supplied_seen = True
                tokens.append(TokenBalance(token=slot.token, balance_raw=balance_raw, meta_type=slot.meta_type))

            return ContractPositionBalance(position=position, tokens=tokens)

        return list(await asyncio.gather(*(get_position_balance(p) for p in positions)))


class DefaultContractPositionBalanceFetcherFactory:
    def __init__(
        self,
        network_provider: MulticallProvider,
        contract_factory: ContractFactory,
        position_source: PositionSource,
    ):
        self.network_provider = network_provider
        self.contract_factory = contract_factory
        self.position_source = position_source

    def build(self, selector: FetcherSelector) -> DefaultContractPositionBalanceFetcher:
        if selector.type != ContractType.POSITION:
            raise ValueError(f"Cannot build a contract position balance fetcher for {selector}")
        return DefaultContractPositionBalanceFetcher(
            selector,
            self.network_provider,
            self.contract_factory,
            self.position_source,
        )
