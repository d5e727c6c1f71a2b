"""Binding updates: re-mint instruction plus confirmation from the live feed."""

from __future__ import annotations

import logging

from gibbername.codec import IdentifierCodec, default_codec
from gibbername.errors import FeedExhausted, NotFound
from gibbername.instructions import WalletInstruction
from gibbername.ledger.base import LedgerClient
from gibbername.ledger.models import CUSTODY_COIN_VALUE, CoinData, Denom

logger = logging.getLogger(__name__)


class TransferCoordinator:
    """Builds instructions that move a name's custody coin with a new binding."""

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

    async def prepare_transfer(
        self,
        client: LedgerClient,
        gibbername: str,
        new_owner_address: str,
        new_binding: bytes,
    ) -> WalletInstruction:
        """Instruction sending the name's custody coin to ``new_owner_address``.

        Raises:
            InvalidIdentifier: ``gibbername`` does not decode.
            NotFound: No genesis transaction exists for the name.
        """
        height, index = self.codec.decode(gibbername)
        snapshot = await client.snapshot(height)
        txhash = await snapshot.get_transaction_by_position(index)
        if txhash is None:
            raise NotFound(
                f"couldn't find genesis transaction for {gibbername}",
                context={"height": height, "index": index},
            )

        instruction = WalletInstruction(
            wallet_name=self.wallet_name,
            destination=new_owner_address,
            value=CUSTODY_COIN_VALUE,
            denom=Denom.custom(txhash),
            additional_data=new_binding,
        )
        logger.info(f"Prepared transfer of {gibbername} to {new_owner_address}")
        return instruction

    async def confirm_transfer(
        self,
        client: LedgerClient,
        address_watched: str,
        since_height: int,
        expected_binding: bytes,
    ) -> CoinData:
        """Wait for an output carrying ``expected_binding`` to reach the address.

        Returns the matching output.

        Raises:
            FeedExhausted: The feed ended without a matching transaction.
        """
        async for tx, height in client.watch_address(since_height, address_watched):
            for output in tx.outputs:
                if output.additional_data == expected_binding:
                    logger.info(
                        f"Transfer confirmed at height {height} "
                        f"({tx.hash_nosigs()}, {output.denom})"
                    )
                    return output

        raise FeedExhausted(
            f"no transfer to {address_watched} since height {since_height}",
            context={"address": address_watched, "since_height": since_height},
        )
