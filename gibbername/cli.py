"""CLI for resolving, registering and transferring gibbernames."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from gibbername.codec import decode_gibbername, encode_gibbername
from gibbername.errors import GibbernameError
from gibbername.ledger.base import LedgerClient
from gibbername.ledger.client import HttpLedgerClient
from gibbername.registration import RegistrationCoordinator
from gibbername.resolver import NameResolver
from gibbername.transfer import TransferCoordinator

logger = logging.getLogger(__name__)


def _render(binding: bytes) -> str:
    return binding.decode("utf-8", errors="replace")


async def lookup_command(client: LedgerClient, name: str) -> int:
    """Print the data currently bound to a gibbername.

    Returns:
        0 on success, 1 on failure.
    """
    binding = await NameResolver().resolve_latest(client, name)
    print(_render(binding))
    return 0


async def history_command(client: LedgerClient, name: str) -> int:
    """Print every binding of a gibbername, oldest first."""
    history = await NameResolver().resolve_history(client, name)
    for number, binding in enumerate(history):
        print(f"{number:>4}  {_render(binding)}")
    return 0


async def register_command(
    client: LedgerClient,
    address: str,
    binding: str,
    wallet_name: str | None = None,
) -> int:
    """Print a registration instruction and wait for it to confirm.

    Watching starts at the head read before the instruction is shown, so a
    transaction sent immediately is still observed.
    """
    coordinator = RegistrationCoordinator(wallet_name=wallet_name)
    height = await client.latest_head()
    instruction = coordinator.prepare_registration(address, binding.encode("utf-8"))
    print(f"Send this command with your wallet: {instruction}")

    logger.info(f"Waiting for registration to {address} from height {height}...")
    name = await coordinator.confirm_registration(client, address, height)
    print(f"Registered gibbername: {name}")
    return 0


async def transfer_command(
    client: LedgerClient,
    name: str,
    address: str,
    binding: str,
    wallet_name: str | None = None,
) -> int:
    """Print a transfer instruction and wait for it to confirm."""
    coordinator = TransferCoordinator(wallet_name=wallet_name)
    height = await client.latest_head()
    new_binding = binding.encode("utf-8")
    instruction = await coordinator.prepare_transfer(client, name, address, new_binding)
    print(f"Send this command with your wallet: {instruction}")

    logger.info(f"Waiting for transfer to {address} from height {height}...")
    await coordinator.confirm_transfer(client, address, height, new_binding)
    print(f"Gibbername {name} transferred to {address} with new binding {binding}")
    return 0


async def _run_with_ledger(args: argparse.Namespace) -> int:
    async with HttpLedgerClient(base_url=args.ledger_url) as client:
        if args.command == "lookup":
            return await lookup_command(client, args.name)
        if args.command == "history":
            return await history_command(client, args.name)
        if args.command == "register":
            return await register_command(
                client, args.address, args.binding, args.wallet
            )
        return await transfer_command(
            client, args.name, args.address, args.binding, args.wallet
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gibbername",
        description="Resolve and manage gibbernames on the ledger",
    )
    parser.add_argument(
        "--ledger-url",
        default=None,
        help="Ledger node API root (default: LEDGER_URL setting)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup_parser = subparsers.add_parser("lookup", help="Show a name's current binding")
    lookup_parser.add_argument("name", help="Gibbername to resolve")

    history_parser = subparsers.add_parser("history", help="Show all bindings of a name")
    history_parser.add_argument("name", help="Gibbername to resolve")

    register_parser = subparsers.add_parser("register", help="Register a new name")
    register_parser.add_argument("--address", required=True, help="Owner address")
    register_parser.add_argument("--binding", required=True, help="Initial binding")
    register_parser.add_argument("--wallet", default=None, help="Wallet name")

    transfer_parser = subparsers.add_parser(
        "transfer", help="Update a name's binding and owner"
    )
    transfer_parser.add_argument("name", help="Gibbername to transfer")
    transfer_parser.add_argument("--address", required=True, help="New owner address")
    transfer_parser.add_argument("--binding", required=True, help="New binding")
    transfer_parser.add_argument("--wallet", default=None, help="Wallet name")

    encode_parser = subparsers.add_parser("encode", help="Encode a ledger coordinate")
    encode_parser.add_argument("height", type=int, help="Block height")
    encode_parser.add_argument("index", type=int, help="Position within the block")

    decode_parser = subparsers.add_parser("decode", help="Decode a gibbername")
    decode_parser.add_argument("name", help="Gibbername to decode")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)-5.5s [%(name)s] %(message)s",
    )

    try:
        if args.command == "encode":
            print(encode_gibbername(args.height, args.index))
            return 0
        if args.command == "decode":
            height, index = decode_gibbername(args.name)
            print(f"height={height} index={index}")
            return 0
        return asyncio.run(_run_with_ledger(args))
    except GibbernameError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
