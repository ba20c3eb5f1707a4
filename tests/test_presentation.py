"""Tests for balance presentation."""

import pytest

from services.apps.definition import AppDefinition, AppDefinitionRegistry, AppGroup
from services.balance.presentation import (
    BalancePresentationService,
    BalancePresenterRegistry,
    DefaultBalancePresenterFactory,
    present_balance_fetcher_response,
)
from services.positions.models import (
    ContractPositionBalance,
    ContractType,
    FetcherSelector,
    MetaType,
    Network,
    PresentedBalance,
    TokenBalance,
)
from services.positions.registry import DuplicateFetcherError, PositionFetcherRegistry
from conftest import JAR_ADDRESS, OTHER_JAR_ADDRESS, WALLET_A, make_farm_position, make_jar

NETWORK = Network.ARBITRUM_MAINNET


def jar_balance(balance_raw, address=JAR_ADDRESS, group_id="jar"):
    return TokenBalance(token=make_jar(address, network=NETWORK, group_id=group_id), balance_raw=balance_raw)


def farm_balance(*amounts):
    position = make_farm_position(0, network=NETWORK)
    return ContractPositionBalance(
        position=position,
        tokens=[
            TokenBalance(token=slot.token, balance_raw=amount, meta_type=slot.meta_type)
            for slot, amount in zip(position.tokens, amounts)
        ],
    )


def register_groups(registry, *groups):
    for group_id, type in groups:
        registry.register(
            FetcherSelector(app_id="pickle", network=NETWORK, group_id=group_id, type=type),
            object(),
        )


@pytest.fixture
def definitions():
    registry = AppDefinitionRegistry()
    registry.register(AppDefinition(
        id="pickle",
        name="Pickle",
        groups={
            "masterchefV2Farm": AppGroup(id="masterchefV2Farm", type=ContractType.POSITION, label="Farms"),
            "jar": AppGroup(id="jar", type=ContractType.APP_TOKEN, label="Jars"),
        },
    ))
    return registry


class TestPresentBalanceFetcherResponse:
    """Test suite for present_balance_fetcher_response."""

    def test_zero_balances_are_filtered(self):
        """Test that only assets with a balance are shown."""
        result = present_balance_fetcher_response([
            {"label": "Jars", "assets": [jar_balance(0), jar_balance(5, OTHER_JAR_ADDRESS)]},
            {"label": "Farms", "assets": [farm_balance(0, 0, 0), farm_balance(0, 3, 0)]},
        ])

        assert [p.label for p in result.products] == ["Jars", "Farms"]
        assert [a.balance_raw for a in result.product("Jars").assets] == [5]
        assert len(result.product("Farms").assets) == 1
        assert result.meta == [{"label": "Assets", "type": "number", "value": 2}]

    def test_empty_groups_keep_their_product(self):
        """Test that a group with nothing to show still yields a product."""
        result = present_balance_fetcher_response([{"label": "Farms", "assets": [farm_balance(0, 0, 0)]}])

        assert result.product("Farms").assets == []
        assert result.meta[0]["value"] == 0

    def test_to_dict(self):
        """Test the serialized response shape."""
        result = present_balance_fetcher_response([{"label": "Jars", "assets": [jar_balance(10 ** 30)]}])

        data = result.to_dict()
        [asset] = data["products"][0]["assets"]
        assert data["products"][0]["label"] == "Jars"
        assert asset["balanceRaw"] == str(10 ** 30)
        assert asset["type"] == "app-token"
        assert asset["groupId"] == "jar"
        assert data["meta"][0]["value"] == 1

    def test_position_to_dict(self):
        """Test serialization of a contract position balance."""
        data = farm_balance(7, 0, 1).to_dict()

        assert data["type"] == "contract-position"
        assert data["key"].endswith(":0")
        assert [t["metaType"] for t in data["tokens"]] == ["supplied", "claimable", "claimable"]
        assert [t["balanceRaw"] for t in data["tokens"]] == ["7", "0", "1"]


class TestDefaultBalancePresenter:
    """Test suite for the default presenter built from app definitions."""

    @pytest.mark.asyncio
    async def test_groups_follow_definition_order(self, definitions):
        """Test that products are ordered and labeled from the app definition."""
        registry = PositionFetcherRegistry()
        register_groups(registry, ("jar", ContractType.APP_TOKEN), ("masterchefV2Farm", ContractType.POSITION))
        presenter = DefaultBalancePresenterFactory(definitions, registry).build("pickle", NETWORK)

        result = await presenter.present(WALLET_A, [jar_balance(1), farm_balance(2, 0, 0)])

        assert [p.label for p in result.products] == ["Farms", "Jars"]
        assert len(result.product("Farms").assets) == 1
        assert len(result.product("Jars").assets) == 1

    @pytest.mark.asyncio
    async def test_unknown_groups_use_group_id(self, definitions):
        """Test that groups without a definition label are labeled by id."""
        registry = PositionFetcherRegistry()
        register_groups(registry, ("vault", ContractType.APP_TOKEN))
        presenter = DefaultBalancePresenterFactory(definitions, registry).build("pickle", NETWORK)

        result = await presenter.present(WALLET_A, [jar_balance(1, group_id="vault")])

        assert [p.label for p in result.products] == ["vault"]

    @pytest.mark.asyncio
    async def test_app_without_definition(self):
        """Test presentation for an app that only has registered groups."""
        registry = PositionFetcherRegistry()
        register_groups(registry, ("jar", ContractType.APP_TOKEN))
        presenter = DefaultBalancePresenterFactory(AppDefinitionRegistry(), registry).build("pickle", NETWORK)

        result = await presenter.present(WALLET_A, [])

        assert [p.label for p in result.products] == ["jar"]
        assert result.meta[0]["value"] == 0


class TestBalancePresentationService:
    """Test suite for BalancePresentationService."""

    @pytest.mark.asyncio
    async def test_custom_presenter_wins(self, definitions):
        """Test that a registered presenter replaces the default one."""
        class OnePresenter:
            async def present(self, address, balances):
                return PresentedBalance(meta=[{"label": "Custom", "value": len(balances)}])

        presenters = BalancePresenterRegistry()
        presenters.register("pickle", NETWORK, OnePresenter())
        service = BalancePresentationService(
            presenters,
            DefaultBalancePresenterFactory(definitions, PositionFetcherRegistry()),
        )

        result = await service.present(app_id="pickle", network=NETWORK, address=WALLET_A, balances=[jar_balance(1)])

        assert result.meta == [{"label": "Custom", "value": 1}]

    @pytest.mark.asyncio
    async def test_default_presenter_fallback(self, definitions):
        """Test fallback to the default presenter."""
        registry = PositionFetcherRegistry()
        register_groups(registry, ("jar", ContractType.APP_TOKEN))
        service = BalancePresentationService(
            BalancePresenterRegistry(),
            DefaultBalancePresenterFactory(definitions, registry),
        )

        result = await service.present(app_id="pickle", network=NETWORK, address=WALLET_A, balances=[jar_balance(4)])

        assert result.product("Jars").assets[0].balance_raw == 4

    def test_duplicate_presenter_raises(self):
        """Test that presenters are registered once per app and network."""
        presenters = BalancePresenterRegistry()
        presenters.register("pickle", NETWORK, object())

        with pytest.raises(DuplicateFetcherError):
            presenters.register("pickle", NETWORK, object())


def test_meta_type_values():
    """Test that position token roles serialize with their wire names."""
    assert [m.value for m in MetaType] == ["supplied", "borrowed", "claimable"]
