"""Batched contract reads over JSON-RPC.

Provides the RPC transport, typed contract handles and the Multicall3
coalescing client used by every balance fetcher.
"""

from .rpc import RpcClient, MulticallError
from .contracts import Contract, ContractFactory, ERC20_ABI
from .client import MulticallClient, MulticallContract, MULTICALL3_ADDRESS
from .provider import NetworkProvider, UnknownNetworkError

__all__ = [
    # Clients
    'RpcClient',
    'MulticallClient',
    'MulticallContract',
    'MulticallError',
    'NetworkProvider',
    'UnknownNetworkError',

    # Contracts
    'Contract',
    'ContractFactory',
    'ERC20_ABI',
    'MULTICALL3_ADDRESS',
]
