"""Name resolution endpoints."""

from fastapi import APIRouter, Depends

from gibbername.api.deps import get_ledger_client, get_resolver
from gibbername.ledger.base import LedgerClient
from gibbername.resolver import NameResolver
from gibbername.schemas.names import BindingSchema, NameBindingSchema, NameHistorySchema

router = APIRouter()


@router.get("/{name}")
async def get_binding(
    name: str,
    client: LedgerClient = Depends(get_ledger_client),
    resolver: NameResolver = Depends(get_resolver),
) -> NameBindingSchema:
    """Get the data currently bound to a gibbername."""
    coordinate = resolver.decode(name)
    binding = await resolver.resolve_latest(client, name)
    return NameBindingSchema(
        name=name,
        height=coordinate.height,
        index=coordinate.index,
        **BindingSchema.from_bytes(binding).model_dump(),
    )


@router.get("/{name}/history")
async def get_history(
    name: str,
    client: LedgerClient = Depends(get_ledger_client),
    resolver: NameResolver = Depends(get_resolver),
) -> NameHistorySchema:
    """Get every binding of a gibbername, oldest first."""
    coordinate = resolver.decode(name)
    history = await resolver.resolve_history(client, name)
    return NameHistorySchema(
        name=name,
        height=coordinate.height,
        index=coordinate.index,
        bindings=[BindingSchema.from_bytes(binding) for binding in history],
    )
