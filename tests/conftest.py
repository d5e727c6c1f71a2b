"""Shared fixtures: an in-memory ledger and helpers to build custody chains."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import count

import pytest
from fastapi.testclient import TestClient

from gibbername.api.deps import get_ledger_client, get_resolver
from gibbername.errors import InvalidIdentifier
from gibbername.instructions import WalletInstruction
from gibbername.ledger.memory import MemoryLedger
from gibbername.ledger.models import (
    GIBBERNAME_MARKER,
    CoinData,
    CoinID,
    Denom,
    LedgerCoordinate,
    Transaction,
)
from gibbername.main import app
from gibbername.resolver import NameResolver, chain_output_index

OWNER = "t2k917e3f3r6wk5474sg3exmfpkh04a42w1chmek68fv5pnygywvsg"
OTHER_OWNER = "t1c7b7nb4dws6ydf5jvqf9rd5aas3hpbzx4xzdgvrv7gwy3v2yvsqg"


class TableCodec:
    """Codec backed by a fixed table, standing in for an external word list."""

    def __init__(self, table: dict[tuple[int, int], str]) -> None:
        self.table = table
        self.reverse = {name: coordinate for coordinate, name in table.items()}

    def encode(self, height: int, index: int) -> str:
        return self.table[(height, index)]

    def decode(self, name: str) -> tuple[int, int]:
        if name not in self.reverse:
            raise InvalidIdentifier(f"unknown name {name!r}")
        return self.reverse[name]


class ChainBuilder:
    """Appends genesis, transfer and deletion transactions to a MemoryLedger."""

    def __init__(self, ledger: MemoryLedger) -> None:
        self.ledger = ledger
        self._filler_ids = count()

    def filler(self) -> Transaction:
        """A unique transaction unrelated to any name."""
        return Transaction(
            outputs=[CoinData(OTHER_OWNER, 1000, Denom.mel())],
            data=f"filler-{next(self._filler_ids)}".encode(),
        )

    def genesis_tx(
        self,
        binding: bytes,
        owner: str = OWNER,
        marker: bytes = GIBBERNAME_MARKER,
        value: int = 1,
        new_outputs: int = 1,
    ) -> Transaction:
        outputs = [
            CoinData(owner, value, Denom.new_custom(), binding) for _ in range(new_outputs)
        ]
        outputs.append(CoinData(owner, 5000, Denom.mel()))
        # Distinct fees keep otherwise identical registrations apart
        return Transaction(outputs=outputs, fee=next(self._filler_ids), data=marker)

    def register(
        self, binding: bytes, position: int = 0, **kwargs
    ) -> tuple[LedgerCoordinate, Transaction]:
        """Confirm a genesis transaction at ``position`` in a new block."""
        tx = self.genesis_tx(binding, **kwargs)
        fillers = [self.filler() for _ in range(position)]
        height = self.ledger.append_block(*fillers, tx)
        return LedgerCoordinate(height, position), tx

    def transfer(
        self,
        previous: Transaction,
        chain_id: str,
        binding: bytes,
        owner: str = OWNER,
    ) -> Transaction:
        """Spend the chain coin of ``previous`` and re-mint it with ``binding``."""
        tx = Transaction(
            inputs=[self._chain_coin(previous, chain_id)],
            outputs=[
                CoinData(owner, 900, Denom.mel()),
                CoinData(owner, 1, Denom.custom(chain_id), binding),
            ],
        )
        self.ledger.append_block(tx)
        return tx

    def delete(self, previous: Transaction, chain_id: str) -> Transaction:
        """Spend the chain coin of ``previous`` without re-minting it."""
        tx = Transaction(
            inputs=[self._chain_coin(previous, chain_id)],
            outputs=[CoinData(OWNER, 900, Denom.mel())],
        )
        self.ledger.append_block(tx)
        return tx

    def _chain_coin(self, tx: Transaction, chain_id: str) -> CoinID:
        index = chain_output_index(tx, chain_id)
        assert index is not None, "transaction has no chain output to spend"
        return CoinID(tx.hash_nosigs(), index)


def wallet_transaction(
    instruction: WalletInstruction, inputs: list[CoinID] | None = None
) -> Transaction:
    """Build the transaction an external wallet would sign for ``instruction``."""
    return Transaction(
        inputs=inputs or [],
        outputs=[
            CoinData(
                covhash=instruction.destination,
                value=instruction.value,
                denom=instruction.denom,
                additional_data=instruction.additional_data,
            )
        ],
        data=instruction.data or b"",
    )


@pytest.fixture
def ledger() -> MemoryLedger:
    return MemoryLedger()


@pytest.fixture
def chain(ledger: MemoryLedger) -> ChainBuilder:
    return ChainBuilder(ledger)


@pytest.fixture
def resolver() -> NameResolver:
    return NameResolver()


@pytest.fixture
def client(ledger: MemoryLedger) -> Iterator[TestClient]:
    """API test client resolving against the in-memory ledger."""
    app.dependency_overrides[get_ledger_client] = lambda: ledger
    app.dependency_overrides[get_resolver] = lambda: NameResolver()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
