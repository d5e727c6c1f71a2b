"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gibbername.api.v1.router import api_router
from gibbername.config import settings
from gibbername.core.logging_middleware import RequestLoggingMiddleware
from gibbername.errors import (
    BadMarker,
    BadOutputs,
    BrokenChain,
    Deleted,
    GibbernameError,
    InvalidIdentifier,
    LedgerError,
    NotFound,
)
from gibbername.schemas.names import ErrorSchema

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[GibbernameError], int]] = [
    (InvalidIdentifier, 400),
    (NotFound, 404),
    (BadMarker, 422),
    (BadOutputs, 422),
    (Deleted, 410),
    (BrokenChain, 502),
    (LedgerError, 503),
]

app = FastAPI(
    title=f"{settings.app_name} API",
    description="Resolve human-typeable names bound to data on the ledger",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


def status_for(error: GibbernameError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


@app.exception_handler(GibbernameError)
async def gibbername_error_handler(
    request: Request, exc: GibbernameError
) -> JSONResponse:
    """Render tagged failures as ``{"detail", "code"}`` bodies."""
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorSchema(detail=exc.message, code=exc.code).model_dump(),
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8080)
