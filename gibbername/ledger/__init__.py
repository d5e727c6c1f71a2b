"""Ledger access: data model and clients."""

from gibbername.ledger.base import LedgerClient, MatchFn, Snapshot
from gibbername.ledger.client import HttpLedgerClient
from gibbername.ledger.memory import MemoryLedger
from gibbername.ledger.models import (
    CUSTODY_COIN_VALUE,
    GIBBERNAME_MARKER,
    CoinData,
    CoinID,
    Denom,
    DenomKind,
    LedgerCoordinate,
    Transaction,
)

__all__ = [
    "CUSTODY_COIN_VALUE",
    "GIBBERNAME_MARKER",
    "CoinData",
    "CoinID",
    "Denom",
    "DenomKind",
    "HttpLedgerClient",
    "LedgerClient",
    "LedgerCoordinate",
    "MatchFn",
    "MemoryLedger",
    "Snapshot",
    "Transaction",
]
