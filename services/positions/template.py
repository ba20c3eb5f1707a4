"""Template position fetchers.

A template fetcher owns both discovery (``get_positions``) and balance
resolution for its group; the orchestrator uses it directly when one is
registered as a template.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List

from services.multicall import ContractFactory, MulticallClient
from .models import (
    AppToken,
    ContractPosition,
    ContractPositionBalance,
    ContractType,
    FetcherSelector,
    Network,
    TokenBalance,
)


class _TemplatePositionFetcher(ABC):
    app_id: str
    group_id: str
    network: Network
    contract_type: ContractType

    def __init__(self, network_provider, contract_factory: ContractFactory):
        self.network_provider = network_provider
        self.contract_factory = contract_factory

    @property
    def selector(self) -> FetcherSelector:
        return FetcherSelector(
            app_id=self.app_id,
            network=self.network,
            group_id=self.group_id,
            type=self.contract_type,
        )


class AppTokenTemplatePositionFetcher(_TemplatePositionFetcher):
    contract_type = ContractType.APP_TOKEN

    @abstractmethod
    async def get_positions(self) -> List[AppToken]:
        ...

    async def get_balance_per_token(self, address: str, app_token: AppToken, multicall: MulticallClient) -> int:
        contract = self.contract_factory.erc20(app_token.network, app_token.address)
        return await multicall.wrap(contract).balanceOf(address)

    async def get_balances(self, address: str) -> List[TokenBalance]:
        multicall = self.network_provider.get_multicall(self.network)
        app_tokens = await self.get_positions()
        amounts = await asyncio.gather(*(
            self.get_balance_per_token(address, app_token, multicall)
            for app_token in app_tokens
        ))
        return [
            TokenBalance(token=app_token, balance_raw=int(amount))
            for app_token, amount in zip(app_tokens, amounts)
        ]


class ContractPositionTemplatePositionFetcher(_TemplatePositionFetcher):
    contract_type = ContractType.POSITION

    @abstractmethod
    async def get_positions(self) -> List[ContractPosition]:
        ...

    @abstractmethod
    async def get_token_balances_per_position(
        self,
        address: str,
        contract_position: ContractPosition,
        multicall: MulticallClient,
    ) -> List[int]:
        """Raw amounts aligned with ``contract_position.tokens``."""
        ...

    async def get_balances(self, address: str) -> List[ContractPositionBalance]:
        multicall = self.network_provider.get_multicall(self.network)
        positions = await self.get_positions()
        amounts_per_position = await asyncio.gather(*(
            self.get_token_balances_per_position(address, position, multicall)
            for position in positions
        ))

        balances = []
        for position, amounts in zip(positions, amounts_per_position):
            if len(amounts) != len(position.tokens):
                raise ValueError(
                    f"{type(self).__name__} returned {len(amounts)} amounts "
                    f"for {len(position.tokens)} tokens of {position.key}"
                )
            balances.append(ContractPositionBalance(
                position=position,
                tokens=[
                    TokenBalance(token=slot.token, balance_raw=int(amount), meta_type=slot.meta_type)
                    for slot, amount in zip(position.tokens, amounts)
                ],
            ))
        return balances
