"""Wallet instructions handed to an external signer.

The coordinators never sign or broadcast. They describe the transaction they
need as a ``melwallet-cli send`` command line for the name owner to run.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from gibbername.ledger.models import MICRO_UNITS_PER_MEL, Denom

WALLET_COMMAND = "melwallet-cli"


@dataclass(frozen=True)
class WalletInstruction:
    """A single-output send for an external wallet to sign."""

    wallet_name: str
    destination: str
    value: int  # micro-units
    denom: Denom
    additional_data: bytes
    data: bytes | None = None

    @property
    def formatted_value(self) -> str:
        """Value in whole units with six decimal places, e.g. ``0.000001``."""
        whole, micro = divmod(self.value, MICRO_UNITS_PER_MEL)
        return f"{whole}.{micro:06d}"

    def to_command(self) -> str:
        output = ",".join(
            [
                self.destination,
                self.formatted_value,
                str(self.denom),
                self.additional_data.hex(),
            ]
        )
        parts = [
            WALLET_COMMAND,
            "send",
            "-w",
            shlex.quote(self.wallet_name),
            "--to",
            shlex.quote(output),
        ]
        if self.data is not None:
            parts += ["--hex-data", self.data.hex()]
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_command()
