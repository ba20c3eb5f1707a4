import asyncio
import sys
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch
from web3 import Web3


# Ensure the project root (containing the balance_api and services packages) is importable.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from services.multicall.client import AGGREGATE3_SELECTOR  # noqa: E402
from services.positions.models import (  # noqa: E402
    AppToken,
    ContractPosition,
    MetaType,
    Network,
    PositionToken,
    Token,
)

codec = Web3().codec

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Valid hex addresses whose checksum form is identical to the lower-case form
FARM_ADDRESS = "0x1111111111111111111111111111111111111111"
REWARDER_ADDRESS = "0x2222222222222222222222222222222222222222"
OTHER_REWARDER_ADDRESS = "0x8888888888888888888888888888888888888888"
STAKING_REWARDS_ADDRESS = "0x9999999999999999999999999999999999999999"
LP_TOKEN_ADDRESS = "0x3333333333333333333333333333333333333333"
PRIMARY_REWARD_ADDRESS = "0x4444444444444444444444444444444444444444"
SECONDARY_REWARD_ADDRESS = "0x5555555555555555555555555555555555555555"
JAR_ADDRESS = "0x6666666666666666666666666666666666666666"
OTHER_JAR_ADDRESS = "0x7777777777777777777777777777777777777777"

WALLET_A = "0xaaaa000000000000000000000000000000000001"
WALLET_B = "0xbbbb000000000000000000000000000000000002"

DEFAULT_READS = {
    "balanceOf": 0,
    "userInfo": {"amount": 0, "rewardDebt": 0},
    "pendingPickle": 0,
    "rewarder": ZERO_ADDRESS,
    "pendingTokens": {"rewardTokens": (), "rewardAmounts": (0,)},
    "earned": 0,
}


def selector(signature):
    return bytes(Web3.keccak(text=signature)[:4])


def decode_aggregate3_request(data):
    """Return the (target, allowFailure, callData) tuples of an aggregate3 call."""
    assert data[:4] == AGGREGATE3_SELECTOR
    return list(codec.decode(["(address,bool,bytes)[]"], data[4:])[0])


def make_rpc(respond, network="polygon-mainnet"):
    """Fake transport; ``respond(target, calldata)`` returns (success, returnData)."""

    async def eth_call(to, data, block="latest"):
        calls = decode_aggregate3_request(data)
        results = [respond(target, calldata) for target, _, calldata in calls]
        return codec.encode(["(bool,bytes)[]"], [results])

    rpc = MagicMock()
    rpc.network = network
    rpc.eth_call = AsyncMock(side_effect=eth_call)
    return rpc


def uint(value):
    return codec.encode(["uint256"], [value])


class FakeMulticall:
    """Serves canned contract reads without network I/O and records every call.

    Responses are keyed by (lower-cased contract address, function name, args);
    a response that is an Exception is raised to the caller.
    """

    def __init__(self, responses=None, defaults=None):
        self.responses = dict(responses or {})
        self.defaults = dict(DEFAULT_READS, **(defaults or {}))
        self.calls = []

    def wrap(self, contract):
        return _FakeMulticallContract(self, contract)

    async def read(self, contract, name, args):
        key = (contract.address.lower(), name, tuple(args))
        self.calls.append(key)
        await asyncio.sleep(0)

        value = self.responses.get(key, self.defaults.get(name))
        if isinstance(value, Exception):
            raise value
        return value

    def calls_to(self, name):
        return [call for call in self.calls if call[1] == name]


class _FakeMulticallContract:
    def __init__(self, multicall, contract):
        self._multicall = multicall
        self._contract = contract

    def __getattr__(self, name):
        self._contract.function_abi(name)

        def call(*args):
            return self._multicall.read(self._contract, name, args)

        return call


class FakeNetworkProvider:
    def __init__(self, multicall):
        self.multicall = multicall
        self.requested = []

    def get_multicall(self, network):
        self.requested.append(network)
        return self.multicall


def make_farm_position(pool_index, network=Network.POLYGON_MAINNET, app_id="pickle",
                       group_id="masterchefV2Farm", with_secondary=True, address=FARM_ADDRESS):
    tokens = [
        PositionToken(MetaType.SUPPLIED, Token(LP_TOKEN_ADDRESS, "LP", 18, network)),
        PositionToken(MetaType.CLAIMABLE, Token(PRIMARY_REWARD_ADDRESS, "PICKLE", 18, network)),
    ]
    if with_secondary:
        tokens.append(PositionToken(MetaType.CLAIMABLE, Token(SECONDARY_REWARD_ADDRESS, "MATIC", 18, network)))
    return ContractPosition(
        address=address,
        network=network,
        app_id=app_id,
        group_id=group_id,
        tokens=tuple(tokens),
        data_props={"poolIndex": pool_index},
    )


def make_jar(address=JAR_ADDRESS, network=Network.POLYGON_MAINNET, app_id="pickle", group_id="jar"):
    return AppToken(
        address=address,
        symbol="pJar",
        decimals=18,
        network=network,
        app_id=app_id,
        group_id=group_id,
        tokens=(Token(LP_TOKEN_ADDRESS, "LP", 18, network),),
        data_props={"ratio": "1.0"},
    )


@pytest.fixture
def fake_multicall():
    return FakeMulticall()


@pytest.fixture
def network_provider(fake_multicall):
    return FakeNetworkProvider(fake_multicall)


@pytest.fixture
def temp_log_dir(tmp_path):
    """Create temporary log directory for tests"""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


@pytest.fixture
def mock_settings(temp_log_dir):
    """Mock settings for tests"""
    with patch('balance_api.common.config.settings') as mock_settings:
        mock_settings.log_level = "INFO"
        mock_settings.log_dir = str(temp_log_dir)
        mock_settings.http_timeout = 30
        mock_settings.max_retries = 3
        mock_settings.rpc_concurrency = 4
        mock_settings.multicall_batch_size = 100
        mock_settings.positions_file = ""
        mock_settings.isolate_group_failures = False
        yield mock_settings
