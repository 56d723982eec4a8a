"""
BALLOT v1.0 - API Dependencies.
Shared dependencies for FastAPI routes.
"""

from __future__ import annotations

from fastapi import Header, HTTPException, Request

from ballot.engine import BallotEngine


def get_engine(request: Request) -> BallotEngine:
    """Inject the engine built during lifespan."""
    return request.app.state.engine


def get_caller(x_caller_id: str | None = Header(default=None)) -> str:
    """Caller identity, supplied by the host in ``X-Caller-Id``."""
    if not x_caller_id or not x_caller_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Caller-Id header")
    return x_caller_id.strip()
