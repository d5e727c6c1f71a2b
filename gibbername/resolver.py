"""Name resolution: genesis validation and custody-chain traversal.

A gibbername decodes to the coordinate of its genesis transaction. That
transaction mints exactly one unit of a fresh custom token; the token's
denomination is the genesis content hash (the custody chain ID). Every later
binding is a spend that re-mints one coin of the same denomination, carrying
the new binding in its additional data. A spend without a re-mint deletes the
name for good.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gibbername.cache import ResolutionCache
from gibbername.codec import IdentifierCodec, default_codec
from gibbername.errors import (
    BadMarker,
    BadOutputs,
    BrokenChain,
    Deleted,
    InvalidIdentifier,
    NotFound,
)
from gibbername.ledger.base import LedgerClient
from gibbername.ledger.models import (
    CUSTODY_COIN_VALUE,
    GIBBERNAME_MARKER,
    Denom,
    LedgerCoordinate,
    Transaction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenesisRecord:
    """A validated name-minting transaction."""

    coordinate: LedgerCoordinate
    transaction: Transaction
    chain_id: str
    output_index: int

    @property
    def binding(self) -> bytes:
        return self.transaction.outputs[self.output_index].additional_data


def chain_output_index(tx: Transaction, chain_id: str) -> int | None:
    """Position of the first output continuing the custody chain ``chain_id``.

    The genesis transaction's own freshly minted output only counts when
    ``tx`` is the genesis transaction. This is the single predicate used both
    for traversal and for reading bindings off traversed links.
    """
    is_genesis = tx.hash_nosigs() == chain_id
    chain_denom = Denom.custom(chain_id)
    matches = [
        position
        for position, output in enumerate(tx.outputs)
        if output.denom == chain_denom or (is_genesis and output.denom.is_new_custom)
    ]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            f"Transaction {tx.hash_nosigs()} carries {len(matches)} outputs of chain "
            f"{chain_id}; using output {matches[0]}"
        )
    return matches[0]


class NameResolver:
    """Resolves gibbernames against a ledger.

    Every operation takes the ledger client explicitly; the resolver itself
    only holds the codec and an optional cache.
    """

    def __init__(
        self,
        codec: IdentifierCodec | None = None,
        cache: ResolutionCache | None = None,
    ):
        self.codec = codec or default_codec
        self.cache = cache

    def decode(self, name: str) -> LedgerCoordinate:
        height, index = self.codec.decode(name)
        try:
            return LedgerCoordinate(height, index)
        except ValueError as e:
            raise InvalidIdentifier(
                f"{name!r} decodes outside the ledger: {e}", context={"name": name}
            ) from e

    def encode(self, coordinate: LedgerCoordinate) -> str:
        return self.codec.encode(coordinate.height, coordinate.index)

    async def validate_genesis(
        self, client: LedgerClient, coordinate: LedgerCoordinate
    ) -> GenesisRecord:
        """Fetch and validate the transaction that minted a name.

        Raises:
            NotFound: No transaction exists at ``coordinate``.
            BadMarker: The transaction data is not exactly ``gibbername-v1``.
            BadOutputs: There is not exactly one newly minted output, or its
                value is not one unit.
        """
        snapshot = await client.snapshot(coordinate.height)
        txhash = await snapshot.get_transaction_by_position(coordinate.index)
        if txhash is None:
            raise NotFound(
                f"no transaction at {coordinate}",
                context={"height": coordinate.height, "index": coordinate.index},
            )

        tx = await snapshot.get_transaction(txhash)
        if tx is None:
            raise NotFound(f"transaction {txhash} missing from block {coordinate.height}")

        if tx.data != GIBBERNAME_MARKER:
            raise BadMarker(
                f"invalid data in genesis transaction at {coordinate}: {tx.data!r}",
                context={"txhash": txhash},
            )

        minted = [
            position
            for position, output in enumerate(tx.outputs)
            if output.denom.is_new_custom
        ]
        if len(minted) != 1:
            raise BadOutputs(
                f"genesis transaction at {coordinate} mints {len(minted)} new tokens",
                context={"txhash": txhash},
            )
        if tx.outputs[minted[0]].value != CUSTODY_COIN_VALUE:
            raise BadOutputs(
                f"genesis output at {coordinate} has value "
                f"{tx.outputs[minted[0]].value}, expected {CUSTODY_COIN_VALUE}",
                context={"txhash": txhash},
            )

        chain_id = tx.hash_nosigs()
        logger.debug(f"genesis at {coordinate} is valid, chain {chain_id}")
        return GenesisRecord(
            coordinate=coordinate,
            transaction=tx,
            chain_id=chain_id,
            output_index=minted[0],
        )

    async def custody_links(
        self, client: LedgerClient, genesis: GenesisRecord
    ) -> list[Transaction]:
        """All transactions that spent a coin of the chain, in chain order."""
        chain_id = genesis.chain_id
        return [
            tx
            async for tx in client.traverse_forward(
                genesis.coordinate.height,
                chain_id,
                lambda tx: chain_output_index(tx, chain_id),
            )
        ]

    async def resolve_latest(self, client: LedgerClient, name: str) -> bytes:
        """Return the data currently bound to ``name``.

        Raises:
            InvalidIdentifier, NotFound, BadMarker, BadOutputs: See
                ``validate_genesis`` and the codec.
            Deleted: The chain ends in a spend that did not re-mint.
        """
        coordinate = self.decode(name)
        head = await self._cache_head(client)
        if head is not None:
            cached = self.cache.get("latest", coordinate, head)
            if cached is not None:
                return cached

        genesis = await self.validate_genesis(client, coordinate)
        links = await self.custody_links(client, genesis)

        if not links:
            binding = genesis.binding
        else:
            last = links[-1]
            position = chain_output_index(last, genesis.chain_id)
            if position is None:
                raise Deleted(
                    f"{name} was permanently deleted",
                    context={"txhash": last.hash_nosigs()},
                )
            binding = last.outputs[position].additional_data

        logger.info(f"Resolved {name} after {len(links)} custody links")
        if head is not None:
            self.cache.put("latest", coordinate, head, binding)
        return binding

    async def resolve_history(self, client: LedgerClient, name: str) -> list[bytes]:
        """Return every binding of ``name`` from genesis to tip.

        Raises:
            InvalidIdentifier, NotFound, BadMarker, BadOutputs, Deleted: As
                for ``resolve_latest``.
            BrokenChain: A link other than the last has no continuing output.
        """
        coordinate = self.decode(name)
        head = await self._cache_head(client)
        if head is not None:
            cached = self.cache.get("history", coordinate, head)
            if cached is not None:
                return list(cached)

        genesis = await self.validate_genesis(client, coordinate)
        links = await self.custody_links(client, genesis)

        history = [genesis.binding]
        for number, tx in enumerate(links, start=1):
            position = chain_output_index(tx, genesis.chain_id)
            if position is None:
                if number == len(links):
                    raise Deleted(
                        f"{name} was permanently deleted",
                        context={"txhash": tx.hash_nosigs()},
                    )
                raise BrokenChain(
                    f"custody chain of {name} broke at link {number} of {len(links)}",
                    context={"txhash": tx.hash_nosigs(), "link": number},
                )
            history.append(tx.outputs[position].additional_data)

        logger.info(f"Resolved history of {name}: {len(history)} bindings")
        if head is not None:
            self.cache.put("history", coordinate, head, list(history))
        return history

    async def _cache_head(self, client: LedgerClient) -> int | None:
        if self.cache is None:
            return None
        return await client.latest_head()
