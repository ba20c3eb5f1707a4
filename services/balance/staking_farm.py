"""Staking-farm contract position balances (MasterChef and StakingRewards style).

For every discovered pool of a farm contract this resolves the staked
principal, the primary pending reward and, through the per-pool rewarder
contract, the secondary pending reward. All reads go through one multicall
client per call so reads for every pool share the same round trips; the
secondary read for a pool waits only on that pool's rewarder address.

Single-staking farms (one StakingRewards contract per pool) reuse the same
helper with a single claimable read and no rewarder.

Protocol-specific reads are injected as resolver callables. Each resolver is
called with keyword arguments and should accept ``**kwargs`` for the ones it
does not use.
"""

import asyncio
from typing import Any, Awaitable, Callable, List

from services.multicall import Contract, MulticallClient
from services.positions.models import (
    ContractPosition,
    ContractPositionBalance,
    ContractType,
    FetcherSelector,
    MetaType,
    Network,
    TokenBalance,
)
from services.positions.source import PositionSource
from .fetcher import MulticallProvider

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

TokenBalancesResolver = Callable[..., Awaitable[List[TokenBalance]]]


def _is_zero_address(address: Any) -> bool:
    return not address or int(str(address), 16) == 0


class StakingFarmDefaultStakedBalanceStrategy:
    """Staked amount of the position's supplied token."""

    def build(self, resolve_staked_balance: Callable[..., Awaitable[int]]) -> TokenBalancesResolver:
        async def resolve(
            *,
            address: str,
            contract: Contract,
            contract_position: ContractPosition,
            multicall: MulticallClient,
            network: Network,
        ) -> List[TokenBalance]:
            supplied = contract_position.tokens_of(MetaType.SUPPLIED)
            if not supplied:
                return []

            amount = await resolve_staked_balance(
                address=address,
                contract=contract,
                contract_position=contract_position,
                multicall=multicall,
                network=network,
            )
            return [TokenBalance(token=supplied[0], balance_raw=int(amount), meta_type=MetaType.SUPPLIED)]

        return resolve


class StakingFarmV2ClaimableBalanceStrategy:
    """Primary reward from the farm plus a secondary reward from its rewarder.

    The secondary reward is only read when the position declares a second
    claimable token and the pool's rewarder is not the zero address.
    """

    def build(
        self,
        *,
        resolve_primary_claimable_balance: Callable[..., Awaitable[int]],
        resolve_rewarder_address: Callable[..., Awaitable[str]],
        resolve_rewarder_contract: Callable[..., Contract],
        resolve_secondary_claimable_balance: Callable[..., Awaitable[int]],
    ) -> TokenBalancesResolver:
        async def resolve(
            *,
            address: str,
            contract: Contract,
            contract_position: ContractPosition,
            multicall: MulticallClient,
            network: Network,
        ) -> List[TokenBalance]:
            reward_tokens = contract_position.tokens_of(MetaType.CLAIMABLE)
            if not reward_tokens:
                return []

            async def get_secondary_claimable() -> int:
                if len(reward_tokens) < 2:
                    return 0

                rewarder_address = await resolve_rewarder_address(
                    address=address,
                    contract=contract,
                    contract_position=contract_position,
                    multicall=multicall,
                    network=network,
                )
                if _is_zero_address(rewarder_address):
                    return 0

                rewarder_contract = resolve_rewarder_contract(
                    network=network,
                    rewarder_address=rewarder_address,
                )
                return await resolve_secondary_claimable_balance(
                    address=address,
                    rewarder_contract=rewarder_contract,
                    contract_position=contract_position,
                    multicall=multicall,
                    network=network,
                )

            primary_amount, secondary_amount = await asyncio.gather(
                resolve_primary_claimable_balance(
                    address=address,
                    contract=contract,
                    contract_position=contract_position,
                    multicall=multicall,
                    network=network,
                ),
                get_secondary_claimable(),
            )

            balances = [
                TokenBalance(token=reward_tokens[0], balance_raw=int(primary_amount), meta_type=MetaType.CLAIMABLE)
            ]
            if len(reward_tokens) > 1:
                balances.append(
                    TokenBalance(token=reward_tokens[1], balance_raw=int(secondary_amount), meta_type=MetaType.CLAIMABLE)
                )
            return balances

        return resolve


class StakingFarmContractPositionBalanceHelper:
    """Balances of every pool of a farm group; zero-balance pools are kept."""

    def __init__(self, network_provider: MulticallProvider, position_source: PositionSource):
        self.network_provider = network_provider
        self.position_source = position_source

    async def get_balances(
        self,
        *,
        address: str,
        app_id: str,
        group_id: str,
        network: Network,
        resolve_farm_contract: Callable[..., Contract],
        resolve_staked_token_balance: TokenBalancesResolver,
        resolve_claimable_token_balances: TokenBalancesResolver,
    ) -> List[ContractPositionBalance]:
        selector = FetcherSelector(
            app_id=app_id,
            network=network,
            group_id=group_id,
            type=ContractType.POSITION,
        )
        positions = await self.position_source.get_contract_positions(selector)
        multicall = self.network_provider.get_multicall(network)

        async def get_position_balance(contract_position: ContractPosition) -> ContractPositionBalance:
            contract = resolve_farm_contract(contract_address=contract_position.address, network=network)
            context = dict(
                address=address,
                contract=contract,
                contract_position=contract_position,
                multicall=multicall,
                network=network,
            )
            staked, claimable = await asyncio.gather(
                resolve_staked_token_balance(**context),
                resolve_claimable_token_balances(**context),
            )
            return ContractPositionBalance(position=contract_position, tokens=[*staked, *claimable])

        return list(await asyncio.gather(*(get_position_balance(p) for p in positions)))


class StakingFarmSingleClaimableBalanceStrategy:
    """One pending reward read from the farm contract itself, no rewarder."""

    def build(self, resolve_claimable_balance: Callable[..., Awaitable[int]]) -> TokenBalancesResolver:
        async def resolve(
            *,
            address: str,
            contract: Contract,
            contract_position: ContractPosition,
            multicall: MulticallClient,
            network: Network,
        ) -> List[TokenBalance]:
            reward_tokens = contract_position.tokens_of(MetaType.CLAIMABLE)
            if not reward_tokens:
                return []

            amount = await resolve_claimable_balance(
                address=address,
                contract=contract,
                contract_position=contract_position,
                multicall=multicall,
                network=network,
            )
            return [TokenBalance(token=reward_tokens[0], balance_raw=int(amount), meta_type=MetaType.CLAIMABLE)]

        return resolve


class SingleStakingFarmContractPositionBalanceHelper:
    """Balances of StakingRewards-style farms: one contract per pool, one reward token.

    Staked and claimable amounts are read from the farm contract with the
    wallet address only, so positions need no pool index.
    """

    def __init__(self, staking_farm_balance_helper: StakingFarmContractPositionBalanceHelper):
        self.staking_farm_balance_helper = staking_farm_balance_helper

    async def get_balances(
        self,
        *,
        address: str,
        app_id: str,
        group_id: str,
        network: Network,
        resolve_contract: Callable[..., Contract],
        resolve_staked_balance: Callable[..., Awaitable[int]],
        resolve_claimable_balance: Callable[..., Awaitable[int]],
    ) -> List[ContractPositionBalance]:
        return await self.staking_farm_balance_helper.get_balances(
            address=address,
            app_id=app_id,
            group_id=group_id,
            network=network,
            resolve_farm_contract=resolve_contract,
            resolve_staked_token_balance=StakingFarmDefaultStakedBalanceStrategy().build(
                resolve_staked_balance=resolve_staked_balance,
            ),
            resolve_claimable_token_balances=StakingFarmSingleClaimableBalanceStrategy().build(
                resolve_claimable_balance=resolve_claimable_balance,
            ),
        )
