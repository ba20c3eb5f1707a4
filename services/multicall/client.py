"""Multicall client coalescing contract reads into Multicall3 round trips.

Reads are issued as ``multicall.wrap(contract).<function>(*args)`` and return
awaitables. Every read issued in the same event-loop tick is queued and sent
as one ``aggregate3`` call (chunked by ``batch_size``), so a fan-out over many
farm pools costs one round trip instead of one per pool.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import structlog
from web3 import Web3

from .contracts import Contract
from .rpc import MulticallError, RpcClient

logger = structlog.get_logger()

# Multicall3 contract address (same address on every supported network)
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

# aggregate3((address target, bool allowFailure, bytes callData)[])
AGGREGATE3_SELECTOR = bytes.fromhex("82ad56cb")

_codec = Web3().codec


def _signature(function_abi: Dict[str, Any]) -> str:
    input_types = ",".join(i["type"] for i in function_abi.get("inputs", []))
    return f"{function_abi['name']}({input_types})"


def decode_output(function_abi: Dict[str, Any], data: bytes) -> Any:
    """Decode return data; one output is returned bare, several as a dict by output name."""
    outputs = function_abi.get("outputs", [])
    values = _codec.decode([o["type"] for o in outputs], data)
    if len(values) == 1:
        return values[0]
    return {
        output.get("name") or str(idx): value
        for idx, (output, value) in enumerate(zip(outputs, values))
    }


@dataclass
class _PendingCall:
    contract: Contract
    function_abi: Dict[str, Any]
    calldata: bytes
    future: asyncio.Future

    @property
    def description(self) -> str:
        return f"{self.contract.name}.{_signature(self.function_abi)} at {self.contract.address}"


class MulticallContract:
    """Contract proxy whose function attributes enqueue batched reads."""

    def __init__(self, multicall: "MulticallClient", contract: Contract):
        self._multicall = multicall
        self._contract = contract

    def __getattr__(self, name: str):
        function_abi = self._contract.function_abi(name)

        def call(*args: Any) -> asyncio.Future:
            return self._multicall.enqueue(self._contract, function_abi, args)

        call.__name__ = name
        return call


class MulticallClient:
    """Batching read client for one network."""

    def __init__(
        self,
        rpc: RpcClient,
        batch_size: int = 100,
        multicall_address: str = MULTICALL3_ADDRESS,
    ):
        """Initialize Multicall client.

        Args:
            rpc: Transport used to send the aggregate3 eth_call
            batch_size: Number of calls per multicall batch (default: 100)
            multicall_address: Multicall3 deployment address
        """
        self.rpc = rpc
        self.batch_size = batch_size
        self.multicall_address = multicall_address
        self.round_trips = 0

        self._pending: List[_PendingCall] = []
        self._flush_task: Optional[asyncio.Task] = None

        self.logger = logger.bind(component="multicall_client", network=rpc.network)

    def wrap(self, contract: Contract) -> MulticallContract:
        return MulticallContract(self, contract)

    def enqueue(
        self,
        contract: Contract,
        function_abi: Dict[str, Any],
        args: Tuple[Any, ...],
    ) -> asyncio.Future:
        """Queue one read and return a future resolved with its decoded result."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        try:
            calldata = contract.encode(function_abi["name"], args)
        except Exception as e:
            future.set_exception(
                MulticallError(f"Cannot encode {contract.name}.{_signature(function_abi)}: {e}")
            )
            return future

        self._pending.append(_PendingCall(contract, function_abi, calldata, future))
        if self._flush_task is None:
            self._flush_task = loop.create_task(self._flush_soon())
        return future

    async def _flush_soon(self) -> None:
        # Yield once so sibling coroutines scheduled in this tick can enqueue
        await asyncio.sleep(0)

        pending, self._pending = self._pending, []
        self._flush_task = None

        batches = [
            pending[i:i + self.batch_size]
            for i in range(0, len(pending), self.batch_size)
        ]
        await asyncio.gather(*(self._dispatch(batch) for batch in batches))

    def _encode_aggregate3(self, batch: List[_PendingCall]) -> bytes:
        calls = [(call.contract.address, True, call.calldata) for call in batch]
        return AGGREGATE3_SELECTOR + _codec.encode(["(address,bool,bytes)[]"], [calls])

    def _decode_aggregate3(self, data: bytes) -> List[Tuple[bool, bytes]]:
        return list(_codec.decode(["(bool,bytes)[]"], data)[0])

    async def _dispatch(self, batch: List[_PendingCall]) -> None:
        log = self.logger.bind(num_calls=len(batch))
        log.debug("multicall_dispatch")

        try:
            self.round_trips += 1
            raw = await self.rpc.eth_call(self.multicall_address, self._encode_aggregate3(batch))
            results = self._decode_aggregate3(raw)
            if len(results) != len(batch):
                raise MulticallError(
                    f"aggregate3 returned {len(results)} results for {len(batch)} calls"
                )
        except Exception as e:
            log.error("multicall_failed", error=str(e))
            # Transport failures belong to every call of the batch
            for call in batch:
                if not call.future.done():
                    call.future.set_exception(e)
            return

        for call, (success, return_data) in zip(batch, results):
            if call.future.done():
                continue

            if not success:
                call.future.set_exception(MulticallError(f"Call reverted: {call.description}"))
                continue

            try:
                call.future.set_result(decode_output(call.function_abi, return_data))
            except Exception as e:
                call.future.set_exception(
                    MulticallError(f"Cannot decode result of {call.description}: {e}")
                )
