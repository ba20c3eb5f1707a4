"""Tests for the Pickle app integration across its three networks."""

import pytest
from unittest.mock import MagicMock

from balance_api.bootstrap import build_container
from services.apps.pickle.arbitrum.farm_balance_fetcher import ArbitrumPickleFarmContractPositionBalanceFetcher
from services.apps.pickle.arbitrum.jar_token_fetcher import ArbitrumPickleJarTokenFetcher
from services.apps.pickle.polygon.balance_fetcher import PolygonPickleBalanceFetcher
from services.balance import AppNotSupportedError
from services.balance.defaults import DefaultTokenBalanceFetcher
from services.positions.models import ContractType, FetcherSelector, Network
from services.positions.source import StaticPositionSource
from conftest import (
    FARM_ADDRESS,
    JAR_ADDRESS,
    OTHER_JAR_ADDRESS,
    REWARDER_ADDRESS,
    WALLET_A,
    WALLET_B,
    make_farm_position,
    make_jar,
)


def selector(network, group_id, type):
    return FetcherSelector(app_id="pickle", network=network, group_id=group_id, type=type)


@pytest.fixture
def source():
    source = StaticPositionSource()
    for network in (Network.POLYGON_MAINNET, Network.ARBITRUM_MAINNET):
        source.add_contract_position(make_farm_position(0, network=network))
        source.add_contract_position(make_farm_position(1, network=network))
        source.add_app_token(make_jar(JAR_ADDRESS, network=network))
    source.add_app_token(make_jar(OTHER_JAR_ADDRESS, network=Network.ETHEREUM_MAINNET))
    return source


@pytest.fixture
def container(source, network_provider):
    settings = MagicMock()
    settings.positions_file = ""
    settings.isolate_group_failures = False
    return build_container(settings=settings, position_source=source, network_provider=network_provider)


class TestPickleRegistration:
    """Test suite for Pickle fetcher registration."""

    def test_polygon_uses_legacy_fetcher(self, container):
        """Test that Polygon has a whole-app fetcher."""
        fetcher = container.toolkit.balance_fetcher_registry.get("pickle", Network.POLYGON_MAINNET)

        assert isinstance(fetcher, PolygonPickleBalanceFetcher)

    def test_arbitrum_resolution(self, container):
        """Test that Arbitrum jars resolve to the template and farms to the custom fetcher."""
        resolver = container.fetcher_resolver

        jar = resolver.resolve(selector(Network.ARBITRUM_MAINNET, "jar", ContractType.APP_TOKEN))
        farm = resolver.resolve(selector(Network.ARBITRUM_MAINNET, "masterchefV2Farm", ContractType.POSITION))

        assert isinstance(jar, ArbitrumPickleJarTokenFetcher)
        assert isinstance(farm, ArbitrumPickleFarmContractPositionBalanceFetcher)
        assert container.toolkit.balance_fetcher_registry.get("pickle", Network.ARBITRUM_MAINNET) is None

    def test_ethereum_jars_use_default_fetcher(self, container):
        """Test that Ethereum jars fall back to the default token balance fetcher."""
        jar = container.fetcher_resolver.resolve(selector(Network.ETHEREUM_MAINNET, "jar", ContractType.APP_TOKEN))

        assert isinstance(jar, DefaultTokenBalanceFetcher)

    def test_definition_is_registered(self, container):
        """Test the Pickle app definition labels."""
        definition = container.toolkit.app_definitions.get("pickle")

        assert definition.group_label("jar") == "Jars"
        assert definition.group_label("masterchefV2Farm") == "Farms"


class TestPickleBalances:
    """Test suite for Pickle balances end to end."""

    @pytest.mark.asyncio
    async def test_polygon_farms_and_jars(self, container, fake_multicall):
        """Test the legacy Polygon response with secondary rewards from the rewarder."""
        fake_multicall.responses.update({
            (FARM_ADDRESS, "userInfo", (1, WALLET_A)): {"amount": 1000, "rewardDebt": 0},
            (FARM_ADDRESS, "pendingPickle", (1, WALLET_A)): 50,
            (FARM_ADDRESS, "rewarder", (1,)): REWARDER_ADDRESS,
            (REWARDER_ADDRESS, "pendingTokens", (1, WALLET_A, 0)): {
                "rewardTokens": (REWARDER_ADDRESS,),
                "rewardAmounts": (25,),
            },
            (JAR_ADDRESS, "balanceOf", (WALLET_A,)): 8,
        })

        result = await container.balance_service.get_balances(
            app_id="pickle",
            addresses=[WALLET_A, WALLET_B],
            network=Network.POLYGON_MAINNET,
        )

        presented = result[WALLET_A]
        assert [p.label for p in presented.products] == ["Farms", "Jars"]
        [pool] = presented.product("Farms").assets
        assert pool.position.pool_index == 1
        assert [t.balance_raw for t in pool.tokens] == [1000, 50, 25]
        assert presented.product("Jars").assets[0].balance_raw == 8
        assert presented.meta == [{"label": "Assets", "type": "number", "value": 2}]

        assert result[WALLET_B].meta[0]["value"] == 0

    @pytest.mark.asyncio
    async def test_polygon_failure_is_isolated_per_address(self, container, fake_multicall):
        """Test that a failing read only fails its own address on Polygon."""
        fake_multicall.responses[(JAR_ADDRESS, "balanceOf", (WALLET_B,))] = RuntimeError("Call reverted")

        result = await container.balance_service.get_balances(
            app_id="pickle",
            addresses=[WALLET_A, WALLET_B],
            network="polygon-mainnet",
        )

        assert result[WALLET_A].meta[0]["value"] == 0
        assert result[WALLET_B].error == "Call reverted"

    @pytest.mark.asyncio
    async def test_arbitrum_generalized(self, container, fake_multicall):
        """Test the generalized Arbitrum response ordered by the app definition."""
        fake_multicall.responses.update({
            (FARM_ADDRESS, "userInfo", (0, WALLET_A)): {"amount": 300, "rewardDebt": 0},
            (JAR_ADDRESS, "balanceOf", (WALLET_A,)): 4,
        })

        result = await container.balance_service.get_balances(
            app_id="pickle",
            addresses=[WALLET_A],
            network=Network.ARBITRUM_MAINNET,
        )

        presented = result[WALLET_A]
        assert [p.label for p in presented.products] == ["Jars", "Farms"]
        assert presented.product("Jars").assets[0].balance_raw == 4
        [pool] = presented.product("Farms").assets
        assert [t.balance_raw for t in pool.tokens] == [300, 0, 0]

    @pytest.mark.asyncio
    async def test_ethereum_default_jars(self, container, fake_multicall, network_provider):
        """Test Ethereum jar balances through the default fetcher."""
        fake_multicall.responses[(OTHER_JAR_ADDRESS, "balanceOf", (WALLET_A,))] = 12

        result = await container.balance_service.get_balances(
            app_id="pickle",
            addresses=[WALLET_A],
            network=Network.ETHEREUM_MAINNET,
        )

        assert [p.label for p in result[WALLET_A].products] == ["Jars"]
        assert result[WALLET_A].product("Jars").assets[0].balance_raw == 12
        assert network_provider.requested == [Network.ETHEREUM_MAINNET]

    @pytest.mark.asyncio
    async def test_optimism_not_supported(self, container):
        """Test that Pickle is not served on a network it does not register."""
        with pytest.raises(AppNotSupportedError):
            await container.balance_service.get_balances(
                app_id="pickle",
                addresses=[WALLET_A],
                network=Network.OPTIMISM_MAINNET,
            )
