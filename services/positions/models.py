"""Data models for app tokens, contract positions and balance records.

Token-shaped and position-shaped balance records share one asset-like
interface (``key``, ``type``, ``has_balance()``, ``to_dict()``) so they can be
concatenated into one flat sequence before presentation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator
from web3 import Web3


class Network(str, Enum):
    ETHEREUM_MAINNET = "ethereum-mainnet"
    POLYGON_MAINNET = "polygon-mainnet"
    ARBITRUM_MAINNET = "arbitrum-mainnet"
    OPTIMISM_MAINNET = "optimism-mainnet"


class ContractType(str, Enum):
    BASE_TOKEN = "base-token"
    APP_TOKEN = "app-token"
    POSITION = "contract-position"


class MetaType(str, Enum):
    SUPPLIED = "supplied"
    BORROWED = "borrowed"
    CLAIMABLE = "claimable"


@dataclass(frozen=True)
class FetcherSelector:
    """Composite key identifying one balance group."""

    app_id: str
    network: Network
    group_id: str
    type: ContractType

    def __post_init__(self):
        # Plain strings hash differently from the enum members
        object.__setattr__(self, "network", Network(self.network))
        object.__setattr__(self, "type", ContractType(self.type))


@dataclass(frozen=True)
class Token:
    """A plain ERC20 token."""

    address: str
    symbol: str
    decimals: int
    network: Network

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": ContractType.BASE_TOKEN.value,
            "address": self.address,
            "network": self.network.value,
            "symbol": self.symbol,
            "decimals": self.decimals,
        }


@dataclass(frozen=True)
class AppToken:
    """A tradeable token issued by an app (e.g. vault/jar shares)."""

    address: str
    symbol: str
    decimals: int
    network: Network
    app_id: str
    group_id: str
    tokens: tuple = ()
    data_props: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class PositionToken:
    """A token slot inside a contract position, tagged supplied/claimable."""

    meta_type: MetaType
    token: Token


@dataclass(frozen=True)
class ContractPosition:
    """One stake-able slot of a contract, e.g. a single farm pool."""

    address: str
    network: Network
    app_id: str
    group_id: str
    tokens: tuple = ()
    data_props: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def key(self) -> str:
        pool_index = self.data_props.get("poolIndex")
        suffix = f":{pool_index}" if pool_index is not None else ""
        return f"{self.network.value}:{self.address.lower()}{suffix}"

    @property
    def pool_index(self) -> int:
        return int(self.data_props["poolIndex"])

    def tokens_of(self, meta_type: MetaType) -> List[Token]:
        return [t.token for t in self.tokens if t.meta_type == meta_type]


@dataclass
class TokenBalance:
    """Raw balance of a single token, optionally tagged with its position role."""

    token: Union[Token, AppToken]
    balance_raw: int
    meta_type: Optional[MetaType] = None

    @property
    def key(self) -> str:
        return f"{self.token.network.value}:{self.token.address.lower()}"

    @property
    def type(self) -> ContractType:
        if isinstance(self.token, AppToken):
            return ContractType.APP_TOKEN
        return ContractType.BASE_TOKEN

    @property
    def network(self) -> Network:
        return self.token.network

    @property
    def app_id(self) -> Optional[str]:
        return getattr(self.token, "app_id", None)

    @property
    def group_id(self) -> Optional[str]:
        return getattr(self.token, "group_id", None)

    def has_balance(self) -> bool:
        return self.balance_raw != 0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "key": self.key,
            "type": self.type.value,
            "address": self.token.address,
            "network": self.token.network.value,
            "symbol": self.token.symbol,
            "decimals": self.token.decimals,
            "balanceRaw": str(self.balance_raw),
        }
        if self.meta_type is not None:
            data["metaType"] = self.meta_type.value
        if isinstance(self.token, AppToken):
            data["appId"] = self.token.app_id
            data["groupId"] = self.token.group_id
            data["tokens"] = [t.to_dict() for t in self.token.tokens]
            data["dataProps"] = dict(self.token.data_props)
        return data


@dataclass
class ContractPositionBalance:
    """Raw balances of every token slot of one contract position."""

    position: ContractPosition
    tokens: List[TokenBalance]

    @property
    def key(self) -> str:
        return self.position.key

    @property
    def type(self) -> ContractType:
        return ContractType.POSITION

    @property
    def network(self) -> Network:
        return self.position.network

    @property
    def app_id(self) -> str:
        return self.position.app_id

    @property
    def group_id(self) -> str:
        return self.position.group_id

    def has_balance(self) -> bool:
        return any(t.has_balance() for t in self.tokens)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "type": self.type.value,
            "address": self.position.address,
            "network": self.position.network.value,
            "appId": self.position.app_id,
            "groupId": self.position.group_id,
            "tokens": [t.to_dict() for t in self.tokens],
            "dataProps": dict(self.position.data_props),
        }


BalanceRecord = Union[TokenBalance, ContractPositionBalance]


@dataclass
class BalanceProduct:
    label: str
    assets: List[BalanceRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "assets": [a.to_dict() for a in self.assets]}


@dataclass
class PresentedBalance:
    """The uniform per-address response shape."""

    products: List[BalanceProduct] = field(default_factory=list)
    meta: List[Dict[str, Any]] = field(default_factory=list)

    def product(self, label: str) -> Optional[BalanceProduct]:
        return next((p for p in self.products if p.label == label), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "products": [p.to_dict() for p in self.products],
            "meta": list(self.meta),
        }


@dataclass
class AddressBalanceError:
    """Placeholder stored for an address whose legacy fetch failed."""

    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}


class GetBalancesQuery(BaseModel):
    """Validated input of a balance request."""

    app_id: str = Field(min_length=1)
    network: Network
    addresses: List[str] = Field(min_length=1)

    @field_validator("addresses")
    @classmethod
    def validate_addresses(cls, v: List[str]) -> List[str]:
        """Validate Ethereum address format, lower-case and de-duplicate."""
        normalized = []
        for address in v:
            if not address.startswith("0x") or not Web3.is_address(address):
                raise ValueError(f"Invalid Ethereum address: {address}")
            address = address.lower()
            if address not in normalized:
                normalized.append(address)
        return normalized
