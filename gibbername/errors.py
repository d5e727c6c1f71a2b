"""Failure taxonomy for name resolution and coordination.

Every failure a caller can see is one of the tagged subclasses below. Validation
and traversal failures are final (the ledger is authoritative). ``LedgerError``
wraps transport problems and is the only one worth retrying at a higher layer.
"""

from __future__ import annotations

from typing import Any


class GibbernameError(Exception):
    """Base class for all tagged gibbername failures."""

    code = "GIBBERNAME_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidIdentifier(GibbernameError):
    """The string is not a well-formed gibbername."""

    code = "INVALID_IDENTIFIER"


class NotFound(GibbernameError):
    """No block or transaction exists at the requested location."""

    code = "NOT_FOUND"


class BadMarker(GibbernameError):
    """The genesis transaction does not carry the gibbername-v1 marker."""

    code = "BAD_MARKER"


class BadOutputs(GibbernameError):
    """The genesis transaction does not mint exactly one unit of a new token."""

    code = "BAD_OUTPUTS"


class Deleted(GibbernameError):
    """The custody chain was terminated by a spend that did not re-mint."""

    code = "DELETED"


class BrokenChain(GibbernameError):
    """A non-final custody link carries no continuing output."""

    code = "BROKEN_CHAIN"


class FeedExhausted(GibbernameError):
    """A finite transaction feed ended before the awaited transaction appeared."""

    code = "FEED_EXHAUSTED"


class LedgerError(GibbernameError):
    """Transport-level failure talking to the ledger node."""

    code = "LEDGER_ERROR"
