"""MiniChefV2 farm reads shared by every Pickle farm fetcher."""

from typing import List

from services.balance.staking_farm import (
    StakingFarmContractPositionBalanceHelper,
    StakingFarmDefaultStakedBalanceStrategy,
    StakingFarmV2ClaimableBalanceStrategy,
)
from services.multicall import Contract
from services.positions.models import ContractPositionBalance, Network
from .contracts import PickleContractFactory
from .definition import PICKLE_DEFINITION


class PickleMiniChefV2FarmBalances:
    def __init__(
        self,
        staking_farm_balance_helper: StakingFarmContractPositionBalanceHelper,
        contract_factory: PickleContractFactory,
    ):
        self.staking_farm_balance_helper = staking_farm_balance_helper
        self.contract_factory = contract_factory

        self.resolve_staked_token_balance = StakingFarmDefaultStakedBalanceStrategy().build(
            resolve_staked_balance=self._resolve_staked_balance,
        )
        self.resolve_claimable_token_balances = StakingFarmV2ClaimableBalanceStrategy().build(
            resolve_primary_claimable_balance=self._resolve_primary_claimable_balance,
            resolve_rewarder_address=self._resolve_rewarder_address,
            resolve_rewarder_contract=self._resolve_rewarder_contract,
            resolve_secondary_claimable_balance=self._resolve_secondary_claimable_balance,
        )

    async def get_balances(self, address: str, network: Network) -> List[ContractPositionBalance]:
        return await self.staking_farm_balance_helper.get_balances(
            address=address,
            app_id=PICKLE_DEFINITION.id,
            group_id=PICKLE_DEFINITION.groups["masterchefV2Farm"].id,
            network=network,
            resolve_farm_contract=self._resolve_farm_contract,
            resolve_staked_token_balance=self.resolve_staked_token_balance,
            resolve_claimable_token_balances=self.resolve_claimable_token_balances,
        )

    def _resolve_farm_contract(self, *, contract_address: str, network: Network) -> Contract:
        return self.contract_factory.pickle_mini_chef_v2(network, contract_address)

    async def _resolve_staked_balance(self, *, multicall, contract, contract_position, address, **kwargs) -> int:
        user_info = await multicall.wrap(contract).userInfo(contract_position.pool_index, address)
        return user_info["amount"]

    async def _resolve_primary_claimable_balance(self, *, multicall, contract, contract_position, address, **kwargs) -> int:
        return await multicall.wrap(contract).pendingPickle(contract_position.pool_index, address)

    async def _resolve_rewarder_address(self, *, multicall, contract, contract_position, **kwargs) -> str:
        return await multicall.wrap(contract).rewarder(contract_position.pool_index)

    def _resolve_rewarder_contract(self, *, network: Network, rewarder_address: str) -> Contract:
        return self.contract_factory.pickle_rewarder(network, rewarder_address)

    async def _resolve_secondary_claimable_balance(
        self, *, multicall, rewarder_contract, contract_position, address, **kwargs
    ) -> int:
        pending = await multicall.wrap(rewarder_contract).pendingTokens(contract_position.pool_index, address, 0)
        reward_amounts = pending["rewardAmounts"]
        return reward_amounts[0] if reward_amounts else 0
