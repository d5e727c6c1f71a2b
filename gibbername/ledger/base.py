"""Ledger client capability surface used by the resolver and coordinators.

Concrete clients only have to provide block snapshots, the current head, and
a way to wait for the next block. Forward traversal and the per-address feed
are built on top of those primitives here, so every client walks the chain
the same way.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable

from gibbername.errors import NotFound
from gibbername.ledger.models import CoinID, Transaction

logger = logging.getLogger(__name__)

# Returns the position of the tracked output in a transaction, or None
MatchFn = Callable[[Transaction], "int | None"]


class Snapshot(ABC):
    """Read-only view of a single confirmed block."""

    def __init__(self, height: int) -> None:
        self.height = height

    @abstractmethod
    async def transactions(self) -> list[Transaction]:
        """All transactions in the block, in block order."""

    async def transaction_hashes(self) -> list[str]:
        return [tx.hash_nosigs() for tx in await self.transactions()]

    async def get_transaction_by_position(self, index: int) -> str | None:
        """Hash of the transaction at ``index``, or None past the end."""
        hashes = await self.transaction_hashes()
        if 0 <= index < len(hashes):
            return hashes[index]
        return None

    async def get_transaction(self, txhash: str) -> Transaction | None:
        for tx in await self.transactions():
            if tx.hash_nosigs() == txhash:
                return tx
        return None


class LedgerClient(ABC):
    """Asynchronous access to the ledger."""

    @abstractmethod
    async def snapshot(self, height: int) -> Snapshot:
        """Snapshot of the block at ``height``.

        Raises:
            NotFound: If the ledger has no block at that height.
        """

    @abstractmethod
    async def latest_head(self) -> int:
        """Height of the most recent confirmed block."""

    @abstractmethod
    async def wait_for_block(self, head: int) -> bool:
        """Suspend until the ledger grows past ``head``.

        Returns False if no further blocks will ever be observed, which ends
        any live feed built on this client.
        """

    async def transaction_position(self, height: int, txhash: str) -> int:
        """Position of ``txhash`` within the block at ``height``."""
        snapshot = await self.snapshot(height)
        hashes = await snapshot.transaction_hashes()
        try:
            return hashes.index(txhash)
        except ValueError:
            raise NotFound(
                f"transaction {txhash} not in block {height}",
                context={"height": height, "txhash": txhash},
            ) from None

    async def traverse_forward(
        self,
        start_height: int,
        start_txhash: str,
        match_fn: MatchFn,
    ) -> AsyncIterator[Transaction]:
        """Yield the chain of transactions spending a tracked coin.

        ``match_fn`` is applied to the start transaction to choose the first
        tracked output, then to each spender to choose the next one. The walk
        ends when a spender has no matching output or when the head observed
        at the start of the walk is reached.
        """
        start = await (await self.snapshot(start_height)).get_transaction(start_txhash)
        if start is None:
            raise NotFound(
                f"transaction {start_txhash} not in block {start_height}",
                context={"height": start_height, "txhash": start_txhash},
            )

        index = match_fn(start)
        if index is None:
            return
        coin = CoinID(start_txhash, index)
        head = await self.latest_head()

        height = start_height
        while height <= head:
            # A coin can be spent later in the same block that created it
            for tx in await (await self.snapshot(height)).transactions():
                if not tx.spends(coin):
                    continue
                logger.debug(f"traversing {coin} -> {tx.hash_nosigs()} at {height}")
                yield tx
                index = match_fn(tx)
                if index is None:
                    return
                coin = CoinID(tx.hash_nosigs(), index)
            height += 1

    async def watch_address(
        self,
        from_height: int,
        address: str,
    ) -> AsyncIterator[tuple[Transaction, int]]:
        """Yield ``(transaction, height)`` for transactions paying ``address``.

        Starts at ``from_height`` and follows the ledger as it grows for as
        long as ``wait_for_block`` keeps returning True.
        """
        height = from_height
        while True:
            head = await self.latest_head()
            while height <= head:
                for tx in await (await self.snapshot(height)).transactions():
                    if tx.pays(address):
                        yield tx, height
                height += 1
            if not await self.wait_for_block(head):
                return
