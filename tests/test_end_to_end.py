"""Register, transfer and resolve a name through the full stack."""

import pytest

from conftest import OTHER_OWNER, OWNER, ChainBuilder, TableCodec, wallet_transaction
from gibbername.ledger.memory import MemoryLedger
from gibbername.ledger.models import CoinID
from gibbername.registration import RegistrationCoordinator
from gibbername.resolver import NameResolver
from gibbername.transfer import TransferCoordinator


async def register_and_transfer(
    ledger: MemoryLedger,
    chain: ChainBuilder,
    codec,
) -> str:
    """Mint a name at coordinate (216, 2), then rebind it once."""
    registration = RegistrationCoordinator(wallet_name="alice", codec=codec)
    transfer = TransferCoordinator(wallet_name="alice", codec=codec)

    ledger.advance_to(215)
    since = await ledger.latest_head()
    instruction = registration.prepare_registration(OWNER, b"henlo world lmao")
    genesis = wallet_transaction(instruction)
    assert ledger.append_block(chain.filler(), chain.filler(), genesis) == 216

    name = await registration.confirm_registration(ledger, OWNER, since)

    since = await ledger.latest_head()
    instruction = await transfer.prepare_transfer(
        ledger, name, OTHER_OWNER, b"it is wednesday my dudes"
    )
    ledger.append_block(
        chain.filler(),
        wallet_transaction(instruction, inputs=[CoinID(genesis.hash_nosigs(), 0)]),
    )
    await transfer.confirm_transfer(
        ledger, OTHER_OWNER, since, b"it is wednesday my dudes"
    )
    return name


class TestEndToEnd:
    """Full lifecycle of a name."""

    @pytest.mark.asyncio
    async def test_with_word_list_codec(
        self, ledger: MemoryLedger, chain: ChainBuilder
    ) -> None:
        codec = TableCodec({(216, 2): "lol"})
        resolver = NameResolver(codec=codec)

        name = await register_and_transfer(ledger, chain, codec)

        assert name == "lol"
        assert await resolver.resolve_latest(ledger, "lol") == (
            b"it is wednesday my dudes"
        )
        assert await resolver.resolve_history(ledger, "lol") == [
            b"henlo world lmao",
            b"it is wednesday my dudes",
        ]

    @pytest.mark.asyncio
    async def test_with_syllable_codec(
        self, ledger: MemoryLedger, chain: ChainBuilder, resolver: NameResolver
    ) -> None:
        name = await register_and_transfer(ledger, chain, resolver.codec)

        assert name == "biri-ko"
        assert await resolver.resolve_latest(ledger, "BIRI-KO") == (
            b"it is wednesday my dudes"
        )
        assert await resolver.resolve_history(ledger, name) == [
            b"henlo world lmao",
            b"it is wednesday my dudes",
        ]
