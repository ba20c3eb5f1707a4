"""Contract handles wrapping provider-less web3 contract objects.

A handle is an address, a network and a web3 contract used only for ABI
encoding; building one performs no I/O. Reads go through
:class:`MulticallClient.wrap`.
"""

from typing import Any, Dict, List, Sequence

from web3 import Web3

# Used purely for ABI encoding, never connected to a node
_w3 = Web3()

ERC20_ABI = [
    {
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function"
    },
]


class Contract:
    """A deployed contract on one network."""

    def __init__(self, address: str, network: str, abi: List[Dict[str, Any]], name: str = "contract"):
        self.address = Web3.to_checksum_address(address)
        self.network = network
        self.name = name
        self.web3_contract = _w3.eth.contract(address=self.address, abi=abi)

    def function_abi(self, name: str) -> Dict[str, Any]:
        for entry in self.web3_contract.abi:
            if entry.get("type") == "function" and entry.get("name") == name:
                return entry
        raise AttributeError(f"{self.name} at {self.address} has no function {name}")

    def encode(self, name: str, args: Sequence[Any]) -> bytes:
        """Calldata for ``name(*args)``; address arguments may be lower-case."""
        inputs = self.function_abi(name).get("inputs", [])
        args = [
            Web3.to_checksum_address(arg) if spec["type"] == "address" and isinstance(arg, str) else arg
            for spec, arg in zip(inputs, args)
        ] + list(args[len(inputs):])
        return Web3.to_bytes(hexstr=self.web3_contract.encode_abi(name, args=args))

    def __repr__(self) -> str:
        return f"Contract({self.name}, {self.address}, {self.network})"


class ContractFactory:
    """Builds contract handles; app-specific factories add typed constructors."""

    def contract(self, network: str, address: str, abi: List[Dict[str, Any]], name: str = "contract") -> Contract:
        return Contract(
            address=address,
            network=str(getattr(network, "value", network)),
            abi=abi,
            name=name,
        )

    def erc20(self, network: str, address: str) -> Contract:
        return self.contract(network, address, ERC20_ABI, name="erc20")
