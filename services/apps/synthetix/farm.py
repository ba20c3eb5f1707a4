"""StakingRewards farm reads shared by the Synthetix fetchers."""

from typing import List

from services.balance.staking_farm import SingleStakingFarmContractPositionBalanceHelper
from services.multicall import Contract
from services.positions.models import ContractPositionBalance, Network
from .contracts import SynthetixContractFactory
from .definition import SYNTHETIX_DEFINITION


class SynthetixStakingRewardsFarmBalances:
    def __init__(
        self,
        single_staking_farm_balance_helper: SingleStakingFarmContractPositionBalanceHelper,
        contract_factory: SynthetixContractFactory,
    ):
        self.single_staking_farm_balance_helper = single_staking_farm_balance_helper
        self.contract_factory = contract_factory

    async def get_balances(self, address: str, network: Network) -> List[ContractPositionBalance]:
        return await self.single_staking_farm_balance_helper.get_balances(
            address=address,
            app_id=SYNTHETIX_DEFINITION.id,
            group_id=SYNTHETIX_DEFINITION.groups["farm"].id,
            network=network,
            resolve_contract=self._resolve_contract,
            resolve_staked_balance=self._resolve_staked_balance,
            resolve_claimable_balance=self._resolve_claimable_balance,
        )

    def _resolve_contract(self, *, contract_address: str, network: Network) -> Contract:
        return self.contract_factory.staking_rewards(network, contract_address)

    async def _resolve_staked_balance(self, *, multicall, contract, address, **kwargs) -> int:
        return await multicall.wrap(contract).balanceOf(address)

    async def _resolve_claimable_balance(self, *, multicall, contract, address, **kwargs) -> int:
        return await multicall.wrap(contract).earned(address)
