"""HTTP client for a ledger node's JSON API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from gibbername.errors import LedgerError, NotFound
from gibbername.ledger.base import LedgerClient, Snapshot
from gibbername.ledger.models import Transaction

logger = logging.getLogger(__name__)

# =============================================================================
# Ledger node API
# =============================================================================
# GET {base}/headers/latest   -> {"height": int}
# GET {base}/blocks/{height}  -> {"height": int, "transactions": [tx, ...]}
#
# Byte fields (data, additional_data, covenants, sigs) are hex encoded.
# A transaction may carry the node's own "hash"; when present it is the
# transaction's identity and names the CUSTOM denominations it mints.
# A block past the tip answers 404.
# =============================================================================


class HttpSnapshot(Snapshot):
    def __init__(self, height: int, transactions: list[Transaction]) -> None:
        super().__init__(height)
        self._transactions = transactions

    async def transactions(self) -> list[Transaction]:
        return list(self._transactions)


class HttpLedgerClient(LedgerClient):
    """Ledger client backed by a node's HTTP API.

    Server errors and connection failures are retried with exponential
    backoff; anything still failing after ``max_retries`` attempts surfaces as
    ``LedgerError``. Use as an async context manager to share one connection
    pool across calls.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        poll_interval: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the ledger client.

        Args:
            base_url: Node API root. Defaults to ``settings.ledger_url``.
            timeout: HTTP request timeout in seconds.
            max_retries: Attempts per request before giving up.
            retry_delay: Initial backoff delay in seconds.
            poll_interval: Seconds between head polls while watching an address.
            transport: Optional httpx transport, mainly for tests.
        """
        from gibbername.config import settings

        self.base_url = (base_url or settings.ledger_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_retries = (
            max_retries if max_retries is not None else settings.max_retries
        )
        self.retry_delay = (
            retry_delay if retry_delay is not None else settings.retry_delay
        )
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.watch_poll_interval
        )
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpLedgerClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._http

    async def _request_with_retry(self, method: str, url: str) -> httpx.Response:
        """Make HTTP request with retry logic for 5xx and transport errors.

        Raises:
            httpx.HTTPStatusError: For 4xx responses.
            LedgerError: After all retries are exhausted.
        """
        client = self._get_http()
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await client.request(method, url)
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    raise
                last_error = e
                reason = f"Server error {e.response.status_code}"
            except httpx.RequestError as e:
                last_error = e
                reason = f"Request error: {e}"

            if attempt < self.max_retries - 1:
                delay = self.retry_delay * (2**attempt)  # Exponential backoff
                logger.warning(
                    f"{reason}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                await asyncio.sleep(delay)

        raise LedgerError(
            f"ledger request failed: {method} {url}: {last_error}",
            context={"url": url},
        ) from last_error

    async def _get_json(self, url: str) -> dict[str, Any]:
        try:
            response = await self._request_with_retry("GET", url)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise NotFound(
                    f"ledger has no resource at {url}", context={"url": url}
                ) from e
            raise LedgerError(
                f"ledger rejected request {url}: {status}", context={"url": url}
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise LedgerError(f"malformed ledger response from {url}") from e

    async def latest_head(self) -> int:
        data = await self._get_json("/headers/latest")
        try:
            return int(data["height"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerError(f"malformed head response: {data!r}") from e

    async def snapshot(self, height: int) -> HttpSnapshot:
        try:
            data = await self._get_json(f"/blocks/{height}")
        except NotFound as e:
            raise NotFound(
                f"no block at height {height}", context={"height": height}
            ) from e

        try:
            transactions = [
                Transaction.from_api_response(tx)
                for tx in data.get("transactions", [])
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            # Missing fields, bad hex or an unknown denomination
            raise LedgerError(
                f"malformed block {height} from ledger: {e}", context={"height": height}
            ) from e

        logger.debug(f"Fetched block {height} ({len(transactions)} transactions)")
        return HttpSnapshot(height, transactions)

    async def wait_for_block(self, head: int) -> bool:
        while await self.latest_head() <= head:
            await asyncio.sleep(self.poll_interval)
        return True
