"""Codec endpoints for converting between gibbernames and coordinates."""

from fastapi import APIRouter, Depends, HTTPException, Query

from gibbername.api.deps import get_resolver
from gibbername.ledger.models import LedgerCoordinate
from gibbername.resolver import NameResolver
from gibbername.schemas.names import CoordinateSchema

router = APIRouter()


@router.get("/encode")
async def encode(
    height: int = Query(..., ge=0, description="Block height"),
    index: int = Query(..., ge=0, description="Transaction position within the block"),
    resolver: NameResolver = Depends(get_resolver),
) -> CoordinateSchema:
    """Encode a ledger coordinate as a gibbername."""
    try:
        coordinate = LedgerCoordinate(height, index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return CoordinateSchema(name=resolver.encode(coordinate), height=height, index=index)


@router.get("/decode/{name}")
async def decode(
    name: str,
    resolver: NameResolver = Depends(get_resolver),
) -> CoordinateSchema:
    """Decode a gibbername into its ledger coordinate."""
    coordinate = resolver.decode(name)
    return CoordinateSchema(name=name, height=coordinate.height, index=coordinate.index)
