"""
BALLOT v1.0 - REST API.

FastAPI host for the voting engine. The host supplies caller identity
per request (``X-Caller-Id``) and serializes calls against the store.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ballot import __version__, config
from ballot.engine import BallotEngine
from ballot.exceptions import (
    AlreadyInitialized,
    AlreadyVoted,
    BallotError,
    DelegationCycle,
    NotInitialized,
    StorageError,
    Unauthorized,
)
from ballot.routes import ballot as ballot_router
from ballot.storage import get_store

logger = logging.getLogger("ballot.api")

_STATUS_BY_ERROR: list[tuple[type[BallotError], int]] = [
    (Unauthorized, 403),
    (NotInitialized, 404),
    (AlreadyInitialized, 409),
    (AlreadyVoted, 409),
    (DelegationCycle, 409),
    (StorageError, 500),
]


def status_for(exc: BallotError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return status
    return 422


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and engine from configuration read at startup."""
    store = get_store(config.STORAGE_MODE, config.DB_PATH)
    app.state.engine = BallotEngine(store)
    logger.info("Ballot API started (storage=%s)", config.STORAGE_MODE)
    try:
        yield
    finally:
        store.close()
        app.state.engine = None


app = FastAPI(
    title="BALLOT - Weighted Delegated Voting API",
    description="Grant rights, delegate, vote and read the tally.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Caller-Id"],
)


# ─── Exception Handlers ──────────────────────────────────────────────


@app.exception_handler(BallotError)
async def ballot_error_handler(request: Request, exc: BallotError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc),
        content={"detail": str(exc), "code": exc.code},
    )


@app.exception_handler(Exception)
async def universal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "An unexpected server error occurred."})


# ─── Routes ──────────────────────────────────────────────────────────


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    """Simple status check for load balancers."""
    return {"status": "ok", "service": "ballot", "version": __version__}


app.include_router(ballot_router.router)
