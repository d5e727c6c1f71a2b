"""Tests for TransferCoordinator."""

import asyncio

import pytest

from conftest import OTHER_OWNER, OWNER, ChainBuilder, wallet_transaction
from gibbername.errors import FeedExhausted, InvalidIdentifier, NotFound
from gibbername.ledger.memory import MemoryLedger
from gibbername.ledger.models import CoinID, Denom, LedgerCoordinate
from gibbername.resolver import NameResolver
from gibbername.transfer import TransferCoordinator


@pytest.fixture
def coordinator() -> TransferCoordinator:
    return TransferCoordinator(wallet_name="alice")


class TestPrepareTransfer:
    """Tests for building the re-mint instruction."""

    @pytest.mark.asyncio
    async def test_instruction_uses_chain_denomination(
        self,
        ledger: MemoryLedger,
        chain: ChainBuilder,
        coordinator: TransferCoordinator,
        resolver: NameResolver,
    ) -> None:
        coordinate, genesis = chain.register(b"v0", position=1)
        name = resolver.encode(coordinate)

        instruction = await coordinator.prepare_transfer(
            ledger, name, OTHER_OWNER, b"v1"
        )

        assert instruction.destination == OTHER_OWNER
        assert instruction.value == 1
        assert instruction.denom == Denom.custom(genesis.hash_nosigs())
        assert instruction.additional_data == b"v1"
        assert instruction.data is None

    @pytest.mark.asyncio
    async def test_missing_genesis(
        self,
        ledger: MemoryLedger,
        chain: ChainBuilder,
        coordinator: TransferCoordinator,
        resolver: NameResolver,
    ) -> None:
        coordinate, _ = chain.register(b"v0")
        name = resolver.encode(LedgerCoordinate(coordinate.height, 3))

        with pytest.raises(NotFound):
            await coordinator.prepare_transfer(ledger, name, OWNER, b"v1")

    @pytest.mark.asyncio
    async def test_invalid_name(
        self, ledger: MemoryLedger, coordinator: TransferCoordinator
    ) -> None:
        with pytest.raises(InvalidIdentifier):
            await coordinator.prepare_transfer(ledger, "xa", OWNER, b"v1")


class TestConfirmTransfer:
    """Tests for watching the feed for the re-minted coin."""

    @pytest.mark.asyncio
    async def test_returns_matching_output(
        self,
        ledger: MemoryLedger,
        chain: ChainBuilder,
        coordinator: TransferCoordinator,
        resolver: NameResolver,
    ) -> None:
        coordinate, genesis = chain.register(b"v0")
        name = resolver.encode(coordinate)
        since = await ledger.latest_head()
        instruction = await coordinator.prepare_transfer(
            ledger, name, OTHER_OWNER, b"v1"
        )
        ledger.append_block(
            wallet_transaction(instruction, inputs=[CoinID(genesis.hash_nosigs(), 0)])
        )

        output = await coordinator.confirm_transfer(ledger, OTHER_OWNER, since, b"v1")

        assert output.additional_data == b"v1"
        assert output.denom == Denom.custom(genesis.hash_nosigs())
        assert await resolver.resolve_latest(ledger, name) == b"v1"

    @pytest.mark.asyncio
    async def test_feed_exhausted(
        self,
        ledger: MemoryLedger,
        chain: ChainBuilder,
        coordinator: TransferCoordinator,
    ) -> None:
        chain.register(b"v0", owner=OTHER_OWNER)

        with pytest.raises(FeedExhausted):
            await coordinator.confirm_transfer(ledger, OTHER_OWNER, 0, b"v1")

    @pytest.mark.asyncio
    async def test_waits_on_live_feed(self, coordinator: TransferCoordinator) -> None:
        ledger = MemoryLedger(live=True)
        builder = ChainBuilder(ledger)
        _, genesis = builder.register(b"v0")
        since = await ledger.latest_head()

        task = asyncio.create_task(
            coordinator.confirm_transfer(ledger, OWNER, since, b"v1")
        )
        await asyncio.sleep(0.01)
        assert not task.done()

        builder.transfer(genesis, genesis.hash_nosigs(), b"v1")

        output = await asyncio.wait_for(task, timeout=1)
        assert output.additional_data == b"v1"

    @pytest.mark.asyncio
    async def test_cancellation(self, coordinator: TransferCoordinator) -> None:
        ledger = MemoryLedger(live=True)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(
                coordinator.confirm_transfer(ledger, OWNER, 0, b"v1"), timeout=0.05
            )
