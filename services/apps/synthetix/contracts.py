"""Synthetix contract handles."""

from services.multicall import Contract, ContractFactory

# StakingRewards: one staking token and one reward token per contract
SYNTHETIX_STAKING_REWARDS_ABI = [
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "earned",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
]


class SynthetixContractFactory(ContractFactory):
    def staking_rewards(self, network, address: str) -> Contract:
        return self.contract(network, address, SYNTHETIX_STAKING_REWARDS_ABI, name="StakingRewards")
