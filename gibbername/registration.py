"""Name registration: mint instruction plus confirmation from the live feed."""

from __future__ import annotations

import logging

from gibbername.codec import IdentifierCodec, default_codec
from gibbername.errors import FeedExhausted
from gibbername.instructions import WalletInstruction
from gibbername.ledger.base import LedgerClient
from gibbername.ledger.models import CUSTODY_COIN_VALUE, GIBBERNAME_MARKER, Denom

logger = logging.getLogger(__name__)


class RegistrationCoordinator:
    """Builds name-minting instructions and waits for them to confirm."""

    def __init__(
        self,
        wallet_name: str | None = None,
        codec: IdentifierCodec | None = None,
    ):
        if wallet_name is None:
            from gibbername.config import settings

            wallet_name = settings.wallet_name
        self.wallet_name = wallet_name
        self.codec = codec or default_codec

    def prepare_registration(
        self, owner_address: str, initial_binding: bytes
    ) -> WalletInstruction:
        """Instruction minting one unit of a new token to ``owner_address``."""
        instruction = WalletInstruction(
            wallet_name=self.wallet_name,
            destination=owner_address,
            value=CUSTODY_COIN_VALUE,
            denom=Denom.new_custom(),
            additional_data=initial_binding,
            data=GIBBERNAME_MARKER,
        )
        logger.info(f"Prepared registration for {owner_address}")
        return instruction

    async def confirm_registration(
        self,
        client: LedgerClient,
        address_watched: str,
        since_height: int,
    ) -> str:
        """Wait for a marker transaction paying ``address_watched`` and name it.

        Suspends for as long as the feed does; cancel the awaiting task to
        stop waiting.

        Raises:
            FeedExhausted: The feed ended without a marker transaction.
        """
        async for tx, height in client.watch_address(since_height, address_watched):
            if tx.data != GIBBERNAME_MARKER:
                continue

            txhash = tx.hash_nosigs()
            position = await client.transaction_position(height, txhash)
            name = self.codec.encode(height, position)
            logger.info(f"Registered {name} at {height}:{position} ({txhash})")
            return name

        raise FeedExhausted(
            f"no registration for {address_watched} since height {since_height}",
            context={"address": address_watched, "since_height": since_height},
        )
