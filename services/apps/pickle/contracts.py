"""Pickle contract handles (MiniChefV2 farm and its secondary rewarder)."""

from services.multicall import Contract, ContractFactory

PICKLE_MINI_CHEF_V2_ABI = [
    {
        "inputs": [
            {"name": "", "type": "uint256"},
            {"name": "", "type": "address"}
        ],
        "name": "userInfo",
        "outputs": [
            {"name": "amount", "type": "uint256"},
            {"name": "rewardDebt", "type": "int256"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {"name": "_pid", "type": "uint256"},
            {"name": "_user", "type": "address"}
        ],
        "name": "pendingPickle",
        "outputs": [{"name": "pending", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"name": "", "type": "uint256"}],
        "name": "rewarder",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
]

PICKLE_REWARDER_ABI = [
    {
        "inputs": [
            {"name": "pid", "type": "uint256"},
            {"name": "user", "type": "address"},
            {"name": "pickleAmount", "type": "uint256"}
        ],
        "name": "pendingTokens",
        "outputs": [
            {"name": "rewardTokens", "type": "address[]"},
            {"name": "rewardAmounts", "type": "uint256[]"}
        ],
        "stateMutability": "view",
        "type": "function"
    },
]


class PickleContractFactory(ContractFactory):
    def pickle_mini_chef_v2(self, network, address: str) -> Contract:
        return self.contract(network, address, PICKLE_MINI_CHEF_V2_ABI, name="PickleMiniChefV2")

    def pickle_rewarder(self, network, address: str) -> Contract:
        return self.contract(network, address, PICKLE_REWARDER_ABI, name="PickleRewarder")
