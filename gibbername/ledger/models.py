"""Ledger data model: coordinates, denominations, coins and transactions."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
import enum
from typing import Any

from gibbername.codec import MAX_HEIGHT, MAX_INDEX

# Marker carried in the data field of every name-minting transaction
GIBBERNAME_MARKER = b"gibbername-v1"

# Custody coins always hold exactly one micro-unit
CUSTODY_COIN_VALUE = 1

MICRO_UNITS_PER_MEL = 1_000_000


@dataclass(frozen=True)
class LedgerCoordinate:
    """Position of a transaction within a confirmed block."""

    height: int
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.height <= MAX_HEIGHT:
            raise ValueError(f"height out of range: {self.height}")
        if not 0 <= self.index <= MAX_INDEX:
            raise ValueError(f"index out of range: {self.index}")

    def __str__(self) -> str:
        return f"{self.height}:{self.index}"


class DenomKind(str, enum.Enum):
    """Token type of a coin."""

    MEL = "MEL"
    SYM = "SYM"
    ERG = "ERG"
    NEW_CUSTOM = "(NEWCUSTOM)"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class Denom:
    """A denomination tag.

    ``CUSTOM`` denominations carry the content hash of the transaction that
    minted the token class.
    """

    kind: DenomKind
    token_id: str | None = None

    @classmethod
    def mel(cls) -> "Denom":
        return cls(DenomKind.MEL)

    @classmethod
    def new_custom(cls) -> "Denom":
        return cls(DenomKind.NEW_CUSTOM)

    @classmethod
    def custom(cls, txhash: str) -> "Denom":
        return cls(DenomKind.CUSTOM, txhash)

    @classmethod
    def parse(cls, text: str) -> "Denom":
        """Parse the textual form used by wallets and the node API."""
        if text.startswith("CUSTOM-"):
            return cls.custom(text.removeprefix("CUSTOM-").lower())
        try:
            return cls(DenomKind(text))
        except ValueError:
            raise ValueError(f"unknown denomination: {text!r}") from None

    @property
    def is_new_custom(self) -> bool:
        return self.kind == DenomKind.NEW_CUSTOM

    def __str__(self) -> str:
        if self.kind == DenomKind.CUSTOM:
            return f"CUSTOM-{self.token_id}"
        return self.kind.value


@dataclass(frozen=True)
class CoinID:
    """Reference to one output of one transaction."""

    txhash: str
    index: int

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CoinID":
        return cls(txhash=data["txhash"], index=int(data["index"]))

    def to_api_dict(self) -> dict[str, Any]:
        return {"txhash": self.txhash, "index": self.index}

    def __str__(self) -> str:
        return f"{self.txhash}-{self.index}"


@dataclass(frozen=True)
class CoinData:
    """A coin produced by a transaction output."""

    covhash: str  # owning address
    value: int  # micro-units
    denom: Denom
    additional_data: bytes = b""

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CoinData":
        """Create from a node API output object."""
        return cls(
            covhash=data["covhash"],
            value=int(data["value"]),
            denom=Denom.parse(data["denom"]),
            additional_data=bytes.fromhex(data.get("additional_data", "")),
        )

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "covhash": self.covhash,
            "value": self.value,
            "denom": str(self.denom),
            "additional_data": self.additional_data.hex(),
        }


@dataclass
class Transaction:
    """A ledger transaction.

    The content hash excludes signatures, so a transaction keeps its identity
    while it is being signed. When the node reports a transaction's hash, that
    value is kept in ``node_hash`` and used in place of the local digest, so
    ``CUSTOM-<hash>`` denominations always match the node's own scheme.
    """

    kind: int = 0
    inputs: list[CoinID] = field(default_factory=list)
    outputs: list[CoinData] = field(default_factory=list)
    fee: int = 0
    covenants: list[bytes] = field(default_factory=list)
    data: bytes = b""
    sigs: list[bytes] = field(default_factory=list)
    node_hash: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Transaction":
        """Create from a node API transaction object."""
        return cls(
            kind=int(data.get("kind", 0)),
            inputs=[CoinID.from_api_response(i) for i in data.get("inputs", [])],
            outputs=[CoinData.from_api_response(o) for o in data.get("outputs", [])],
            fee=int(data.get("fee", 0)),
            covenants=[bytes.fromhex(c) for c in data.get("covenants", [])],
            data=bytes.fromhex(data.get("data", "")),
            sigs=[bytes.fromhex(s) for s in data.get("sigs", [])],
            node_hash=data["hash"].lower() if data.get("hash") else None,
        )

    def to_api_dict(self, include_sigs: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind,
            "inputs": [i.to_api_dict() for i in self.inputs],
            "outputs": [o.to_api_dict() for o in self.outputs],
            "fee": self.fee,
            "covenants": [c.hex() for c in self.covenants],
            "data": self.data.hex(),
        }
        if include_sigs:
            result["sigs"] = [s.hex() for s in self.sigs]
        return result

    def hash_nosigs(self) -> str:
        """Content hash with signatures excluded, as lower-case hex."""
        if self.node_hash is not None:
            return self.node_hash
        canonical = json.dumps(
            self.to_api_dict(include_sigs=False),
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.blake2b(canonical.encode("utf-8"), digest_size=32).hexdigest()

    def spends(self, coin: CoinID) -> bool:
        return coin in self.inputs

    def pays(self, address: str) -> bool:
        return any(output.covhash == address for output in self.outputs)
