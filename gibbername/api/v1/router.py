"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from gibbername.api.v1 import codec, names

api_router = APIRouter()

api_router.include_router(names.router, prefix="/names", tags=["names"])
api_router.include_router(codec.router, prefix="/codec", tags=["codec"])
