"""Human-typeable names bound to data on a UTXO ledger."""

from gibbername.codec import (
    IdentifierCodec,
    SyllableCodec,
    decode_gibbername,
    encode_gibbername,
)
from gibbername.errors import (
    BadMarker,
    BadOutputs,
    BrokenChain,
    Deleted,
    FeedExhausted,
    GibbernameError,
    InvalidIdentifier,
    LedgerError,
    NotFound,
)
from gibbername.registration import RegistrationCoordinator
from gibbername.resolver import GenesisRecord, NameResolver, chain_output_index
from gibbername.transfer import TransferCoordinator

__version__ = "0.1.0"

__all__ = [
    "BadMarker",
    "BadOutputs",
    "BrokenChain",
    "Deleted",
    "FeedExhausted",
    "GenesisRecord",
    "GibbernameError",
    "IdentifierCodec",
    "InvalidIdentifier",
    "LedgerError",
    "NameResolver",
    "NotFound",
    "RegistrationCoordinator",
    "SyllableCodec",
    "TransferCoordinator",
    "chain_output_index",
    "decode_gibbername",
    "encode_gibbername",
]
