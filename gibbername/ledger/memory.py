"""In-process ledger for local development and tests."""

from __future__ import annotations

import asyncio
import logging

from gibbername.errors import NotFound
from gibbername.ledger.base import LedgerClient, Snapshot
from gibbername.ledger.models import Transaction

logger = logging.getLogger(__name__)


class MemorySnapshot(Snapshot):
    def __init__(self, height: int, transactions: list[Transaction]) -> None:
        super().__init__(height)
        self._transactions = transactions

    async def transactions(self) -> list[Transaction]:
        return list(self._transactions)


class MemoryLedger(LedgerClient):
    """A ledger held in memory as a list of blocks.

    Block ``n`` lives at height ``n``. With ``live=False`` the address feed
    ends at the current tip; with ``live=True`` it waits for new blocks.
    """

    def __init__(self, live: bool = False) -> None:
        self.live = live
        self._blocks: list[list[Transaction]] = [[]]
        self._grew = asyncio.Event()

    async def snapshot(self, height: int) -> MemorySnapshot:
        if not 0 <= height < len(self._blocks):
            raise NotFound(f"no block at height {height}", context={"height": height})
        return MemorySnapshot(height, self._blocks[height])

    async def latest_head(self) -> int:
        return len(self._blocks) - 1

    async def wait_for_block(self, head: int) -> bool:
        if not self.live:
            return False
        while len(self._blocks) - 1 <= head:
            self._grew.clear()
            await self._grew.wait()
        return True

    def append_block(self, *transactions: Transaction) -> int:
        """Confirm a new block holding ``transactions`` and return its height."""
        self._blocks.append(list(transactions))
        height = len(self._blocks) - 1
        logger.debug(f"appended block {height} with {len(transactions)} transactions")
        self._grew.set()
        return height

    def advance_to(self, height: int) -> None:
        """Append empty blocks until the tip is at ``height``."""
        while len(self._blocks) - 1 < height:
            self._blocks.append([])
        self._grew.set()
