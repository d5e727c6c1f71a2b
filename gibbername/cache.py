"""Resolution cache keyed by ledger coordinate.

The whole cache is stamped with one ledger head. Entries are served only
while the ledger is still at that head; the first lookup or store that sees a
newer head empties the cache. Nothing is persisted.

Keys are decoded coordinates, not raw names, so the cache is correct for any
codec regardless of how it treats case or spelling variants.
"""

from __future__ import annotations

import logging
from typing import Any

from gibbername.ledger.models import LedgerCoordinate

logger = logging.getLogger(__name__)


class ResolutionCache:
    """In-memory cache for latest-binding and history resolutions."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, LedgerCoordinate], Any] = {}
        self.tip: int | None = None
        self.hits = 0
        self.misses = 0

    # =========================================================================
    # Public API
    # =========================================================================

    def get(self, kind: str, coordinate: LedgerCoordinate, head: int) -> Any | None:
        """Return the cached value if it was computed at ``head``."""
        self._advance(head)
        if head != self.tip or (kind, coordinate) not in self._entries:
            self.misses += 1
            return None

        self.hits += 1
        return self._entries[(kind, coordinate)]

    def put(
        self, kind: str, coordinate: LedgerCoordinate, head: int, value: Any
    ) -> None:
        self._advance(head)
        if head != self.tip:
            # Computed against a head the cache has already moved past
            return
        self._entries[(kind, coordinate)] = value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    # =========================================================================
    # Internal
    # =========================================================================

    def _advance(self, head: int) -> None:
        if self.tip is not None and head <= self.tip:
            return
        if self._entries:
            logger.debug(
                f"Cache cleared: {len(self._entries)} entries (tip {self.tip} -> {head})"
            )
        self.clear()
        self.tip = head
