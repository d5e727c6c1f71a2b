"""FastAPI dependencies shared by the v1 endpoints."""

from collections.abc import AsyncIterator
from functools import lru_cache

from gibbername.cache import ResolutionCache
from gibbername.config import settings
from gibbername.ledger.base import LedgerClient
from gibbername.ledger.client import HttpLedgerClient
from gibbername.resolver import NameResolver


async def get_ledger_client() -> AsyncIterator[LedgerClient]:
    """Yield a ledger client for the duration of one request."""
    async with HttpLedgerClient() as client:
        yield client


@lru_cache
def get_resolver() -> NameResolver:
    """Process-wide resolver, with a cache when enabled in settings."""
    cache = ResolutionCache() if settings.resolution_cache_enabled else None
    return NameResolver(cache=cache)
