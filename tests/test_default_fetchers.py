"""Tests for the default token and contract position balance fetchers."""

import pytest

from services.balance.defaults import (
    DefaultContractPositionBalanceFetcherFactory,
    DefaultTokenBalanceFetcherFactory,
)
from services.balance.token_balance_helper import TokenBalanceHelper
from services.multicall import ContractFactory
from services.positions.models import (
    ContractType,
    FetcherSelector,
    MetaType,
    Network,
)
from services.positions.source import StaticPositionSource
from conftest import (
    FARM_ADDRESS,
    JAR_ADDRESS,
    OTHER_JAR_ADDRESS,
    WALLET_A,
    make_farm_position,
    make_jar,
)

JAR_SELECTOR = FetcherSelector(
    app_id="pickle", network=Network.POLYGON_MAINNET, group_id="jar", type=ContractType.APP_TOKEN
)
FARM_SELECTOR = FetcherSelector(
    app_id="pickle", network=Network.POLYGON_MAINNET, group_id="masterchefV2Farm", type=ContractType.POSITION
)


@pytest.fixture
def source():
    source = StaticPositionSource()
    source.add_app_token(make_jar(JAR_ADDRESS))
    source.add_app_token(make_jar(OTHER_JAR_ADDRESS))
    source.add_contract_position(make_farm_position(0))
    return source


class TestDefaultTokenBalanceFetcher:
    """Test suite for the default token balance fetcher."""

    @pytest.mark.asyncio
    async def test_reads_balance_of_every_token(self, source, network_provider, fake_multicall):
        """Test one balanceOf per app token, zero balances included."""
        fake_multicall.responses[(JAR_ADDRESS, "balanceOf", (WALLET_A,))] = 500
        factory = DefaultTokenBalanceFetcherFactory(
            TokenBalanceHelper(network_provider, ContractFactory(), source)
        )

        balances = await factory.build(JAR_SELECTOR).get_balances(WALLET_A)

        assert [(b.token.address, b.balance_raw) for b in balances] == [
            (JAR_ADDRESS, 500),
            (OTHER_JAR_ADDRESS, 0),
        ]
        assert all(b.type == ContractType.APP_TOKEN for b in balances)
        assert balances[0].group_id == "jar"
        assert len(fake_multicall.calls_to("balanceOf")) == 2
        assert network_provider.requested == [Network.POLYGON_MAINNET]

    @pytest.mark.asyncio
    async def test_empty_group(self, network_provider):
        """Test that a group without tokens yields no records."""
        factory = DefaultTokenBalanceFetcherFactory(
            TokenBalanceHelper(network_provider, ContractFactory(), StaticPositionSource())
        )

        assert await factory.build(JAR_SELECTOR).get_balances(WALLET_A) == []

    def test_build_rejects_position_selector(self, network_provider):
        """Test that the token factory only builds for token groups."""
        factory = DefaultTokenBalanceFetcherFactory(
            TokenBalanceHelper(network_provider, ContractFactory(), StaticPositionSource())
        )

        with pytest.raises(ValueError):
            factory.build(FARM_SELECTOR)


class TestDefaultContractPositionBalanceFetcher:
    """Test suite for the default contract position balance fetcher."""

    @pytest.mark.asyncio
    async def test_balance_of_reported_on_supplied_token(self, source, network_provider, fake_multicall):
        """Test that the position contract balance fills the supplied slot only."""
        fake_multicall.responses[(FARM_ADDRESS, "balanceOf", (WALLET_A,))] = 77
        factory = DefaultContractPositionBalanceFetcherFactory(network_provider, ContractFactory(), source)

        [balance] = await factory.build(FARM_SELECTOR).get_balances(WALLET_A)

        assert balance.type == ContractType.POSITION
        assert [(t.meta_type, t.balance_raw) for t in balance.tokens] == [
            (MetaType.SUPPLIED, 77),
            (MetaType.CLAIMABLE, 0),
            (MetaType.CLAIMABLE, 0),
        ]
        assert balance.has_balance()
        # No reward reads
        assert fake_multicall.calls_to("pendingPickle") == []

    @pytest.mark.asyncio
    async def test_zero_balance_position_is_kept(self, source, network_provider):
        """Test that positions are returned even when nothing is staked."""
        factory = DefaultContractPositionBalanceFetcherFactory(network_provider, ContractFactory(), source)

        [balance] = await factory.build(FARM_SELECTOR).get_balances(WALLET_A)

        assert not balance.has_balance()

    def test_build_rejects_token_selector(self, network_provider):
        """Test that the position factory only builds for position groups."""
        factory = DefaultContractPositionBalanceFetcherFactory(
            network_provider, ContractFactory(), StaticPositionSource()
        )

        with pytest.raises(ValueError):
            factory.build(JAR_SELECTOR)
