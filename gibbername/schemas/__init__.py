"""Pydantic response schemas."""

from gibbername.schemas.names import (
    BindingSchema,
    CoordinateSchema,
    ErrorSchema,
    NameBindingSchema,
    NameHistorySchema,
)

__all__ = [
    "BindingSchema",
    "CoordinateSchema",
    "ErrorSchema",
    "NameBindingSchema",
    "NameHistorySchema",
]
