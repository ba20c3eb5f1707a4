"""Precomputed app tokens and contract positions.

Position discovery runs outside the balance engine; this module holds its
output in memory and hands it to fetchers by selector.
"""

import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union, runtime_checkable

from balance_api.common.logging_setup import get_logger
from .models import (
    AppToken,
    ContractPosition,
    ContractType,
    FetcherSelector,
    MetaType,
    Network,
    PositionToken,
    Token,
)

logger = get_logger(__name__)


@runtime_checkable
class PositionSource(Protocol):
    async def get_app_tokens(self, selector: FetcherSelector) -> List[AppToken]:
        ...

    async def get_contract_positions(self, selector: FetcherSelector) -> List[ContractPosition]:
        ...


def _token_from_dict(data: Dict[str, Any], network: Network) -> Token:
    return Token(
        address=data["address"],
        symbol=data.get("symbol", ""),
        decimals=int(data.get("decimals", 18)),
        network=network,
    )


class StaticPositionSource:
    """In-memory position source, populated once at startup."""

    def __init__(self):
        self._app_tokens: Dict[FetcherSelector, List[AppToken]] = defaultdict(list)
        self._contract_positions: Dict[FetcherSelector, List[ContractPosition]] = defaultdict(list)

    def add_app_token(self, app_token: AppToken) -> None:
        selector = FetcherSelector(
            app_id=app_token.app_id,
            network=app_token.network,
            group_id=app_token.group_id,
            type=ContractType.APP_TOKEN,
        )
        self._app_tokens[selector].append(app_token)

    def add_contract_position(self, position: ContractPosition) -> None:
        selector = FetcherSelector(
            app_id=position.app_id,
            network=position.network,
            group_id=position.group_id,
            type=ContractType.POSITION,
        )
        self._contract_positions[selector].append(position)

    async def get_app_tokens(self, selector: FetcherSelector) -> List[AppToken]:
        return list(self._app_tokens.get(selector, []))

    async def get_contract_positions(self, selector: FetcherSelector) -> List[ContractPosition]:
        return list(self._contract_positions.get(selector, []))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StaticPositionSource":
        source = cls()

        for item in data.get("appTokens", []):
            network = Network(item["network"])
            source.add_app_token(AppToken(
                address=item["address"],
                symbol=item.get("symbol", ""),
                decimals=int(item.get("decimals", 18)),
                network=network,
                app_id=item["appId"],
                group_id=item["groupId"],
                tokens=tuple(_token_from_dict(t, network) for t in item.get("tokens", [])),
                data_props=dict(item.get("dataProps", {})),
            ))

        for item in data.get("contractPositions", []):
            network = Network(item["network"])
            source.add_contract_position(ContractPosition(
                address=item["address"],
                network=network,
                app_id=item["appId"],
                group_id=item["groupId"],
                tokens=tuple(
                    PositionToken(MetaType(t["metaType"]), _token_from_dict(t, network))
                    for t in item.get("tokens", [])
                ),
                data_props=dict(item.get("dataProps", {})),
            ))

        return source

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StaticPositionSource":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        source = cls.from_dict(data)
        logger.info(
            f"Loaded {len(data.get('appTokens', []))} app tokens and "
            f"{len(data.get('contractPositions', []))} contract positions from {path}"
        )
        return source


class StaticPositionFetcher:
    """Discovery-only position fetcher: makes a group enumerable, serves its positions."""

    def __init__(self, selector: FetcherSelector, source: PositionSource):
        self.selector = selector
        self.source = source

    async def get_positions(self) -> List[Union[AppToken, ContractPosition]]:
        if self.selector.type == ContractType.APP_TOKEN:
            return await self.source.get_app_tokens(self.selector)
        return await self.source.get_contract_positions(self.selector)
