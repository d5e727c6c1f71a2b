"""Identifier codec: ledger coordinates <-> pronounceable gibbernames.

A coordinate ``(height, index)`` is folded into a single integer with the
Cantor pairing function, then written in bijective base-80 where each digit
is a consonant-vowel syllable. Syllables are grouped in pairs from the left
and joined with ``-``, e.g. ``(216, 2) -> "biri-ko"``.

Bijective numeration means every non-empty syllable string decodes to exactly
one integer, so the only non-canonical inputs are bad hyphenation and
coordinates that overflow the ledger's integer widths.
"""

from __future__ import annotations

from math import isqrt
from typing import Protocol

from gibbername.errors import InvalidIdentifier

CONSONANTS = "bdfghjklmnprstvz"
VOWELS = "aeiou"
SYLLABLES: tuple[str, ...] = tuple(c + v for c in CONSONANTS for v in VOWELS)
BASE = len(SYLLABLES)  # 80

SYLLABLES_PER_GROUP = 2
GROUP_SEPARATOR = "-"

MAX_HEIGHT = 2**64 - 1
MAX_INDEX = 2**32 - 1

_SYLLABLE_VALUES = {syllable: value for value, syllable in enumerate(SYLLABLES)}


class IdentifierCodec(Protocol):
    """Anything that bijects ledger coordinates to strings."""

    def encode(self, height: int, index: int) -> str: ...

    def decode(self, name: str) -> tuple[int, int]: ...


def _pair(height: int, index: int) -> int:
    total = height + index
    return total * (total + 1) // 2 + index


def _unpair(value: int) -> tuple[int, int]:
    total = (isqrt(8 * value + 1) - 1) // 2
    index = value - total * (total + 1) // 2
    return total - index, index


class SyllableCodec:
    """Default codec writing coordinates as hyphenated syllable groups."""

    def encode(self, height: int, index: int) -> str:
        if not 0 <= height <= MAX_HEIGHT:
            raise ValueError(f"height out of range: {height}")
        if not 0 <= index <= MAX_INDEX:
            raise ValueError(f"index out of range: {index}")

        # Shift by one so that zero also gets a non-empty bijective form
        remaining = _pair(height, index) + 1
        digits: list[str] = []
        while remaining > 0:
            remaining -= 1
            digits.append(SYLLABLES[remaining % BASE])
            remaining //= BASE
        digits.reverse()

        groups = [
            "".join(digits[i : i + SYLLABLES_PER_GROUP])
            for i in range(0, len(digits), SYLLABLES_PER_GROUP)
        ]
        return GROUP_SEPARATOR.join(groups)

    def decode(self, name: str) -> tuple[int, int]:
        normalized = name.strip().lower()
        if not normalized:
            raise InvalidIdentifier("empty gibbername")

        letters = normalized.replace(GROUP_SEPARATOR, "")
        if len(letters) % 2 != 0:
            raise InvalidIdentifier(f"truncated syllable in gibbername: {name!r}")

        value = 0
        for i in range(0, len(letters), 2):
            syllable = letters[i : i + 2]
            digit = _SYLLABLE_VALUES.get(syllable)
            if digit is None:
                raise InvalidIdentifier(
                    f"unknown syllable {syllable!r} in gibbername: {name!r}"
                )
            value = value * BASE + digit + 1

        height, index = _unpair(value - 1)
        if height > MAX_HEIGHT or index > MAX_INDEX:
            raise InvalidIdentifier(f"gibbername out of ledger range: {name!r}")

        if self.encode(height, index) != normalized:
            raise InvalidIdentifier(f"non-canonical gibbername: {name!r}")
        return height, index


default_codec = SyllableCodec()


def encode_gibbername(height: int, index: int) -> str:
    """Encode a ledger coordinate with the default codec."""
    return default_codec.encode(height, index)


def decode_gibbername(name: str) -> tuple[int, int]:
    """Decode a gibbername with the default codec."""
    return default_codec.decode(name)
