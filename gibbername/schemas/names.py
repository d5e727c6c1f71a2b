"""Pydantic schemas for name and codec endpoints."""

from pydantic import BaseModel


class BindingSchema(BaseModel):
    """A binding rendered both as text and as raw hex."""

    binding: str
    binding_hex: str

    @classmethod
    def from_bytes(cls, data: bytes) -> "BindingSchema":
        return cls(
            binding=data.decode("utf-8", errors="replace"),
            binding_hex=data.hex(),
        )


class NameBindingSchema(BindingSchema):
    """Current binding of a gibbername."""

    name: str
    height: int
    index: int


class NameHistorySchema(BaseModel):
    """Every binding of a gibbername, oldest first."""

    name: str
    height: int
    index: int
    bindings: list[BindingSchema]


class CoordinateSchema(BaseModel):
    """A gibbername together with the ledger coordinate it encodes."""

    name: str
    height: int
    index: int


class ErrorSchema(BaseModel):
    """Body returned for tagged resolution failures."""

    detail: str
    code: str
