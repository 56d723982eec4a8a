"""
BALLOT v1.0 - Ballot Router.
Right-granting, delegation, voting and tally queries.
"""

import logging
import threading

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from ballot.api_deps import get_caller, get_engine
from ballot.engine import BallotEngine
from ballot.models import (
    CallResponse,
    DelegateRequest,
    DelegateResponse,
    InitRequest,
    LedgerReportResponse,
    ProposalResponse,
    RightRequest,
    StatusResponse,
    VoteRequest,
    VoterResponse,
    WinnerResponse,
)

logger = logging.getLogger("ballot.api")
router = APIRouter(prefix="/v1/ballot", tags=["ballot"])

# One call completes, committed or rolled back, before the next is applied.
_call_lock = threading.Lock()


async def _serialized(fn, *args):
    def _run():
        with _call_lock:
            return fn(*args)

    return await run_in_threadpool(_run)


@router.post("/init", response_model=CallResponse)
async def init_ballot(
    req: InitRequest,
    caller: str = Depends(get_caller),
    engine: BallotEngine = Depends(get_engine),
) -> CallResponse:
    """Initialize the ballot; the caller becomes chairperson."""
    await _serialized(engine.construct, caller, req.proposals)
    return CallResponse(caller=caller, action="init")


@router.post("/rights", response_model=CallResponse)
async def give_right_to_vote(
    req: RightRequest,
    caller: str = Depends(get_caller),
    engine: BallotEngine = Depends(get_engine),
) -> CallResponse:
    """Give an account the right to vote (chairperson only)."""
    await _serialized(engine.give_right_to_vote, caller, req.voter)
    return CallResponse(caller=caller, action="give_right")


@router.post("/delegate", response_model=DelegateResponse)
async def delegate(
    req: DelegateRequest,
    caller: str = Depends(get_caller),
    engine: BallotEngine = Depends(get_engine),
) -> DelegateResponse:
    """Delegate the caller's vote along the chain starting at ``to``."""
    resolved = await _serialized(engine.delegate, caller, req.to)
    return DelegateResponse(caller=caller, action="delegate", delegate=resolved)


@router.post("/vote", response_model=CallResponse)
async def vote(
    req: VoteRequest,
    caller: str = Depends(get_caller),
    engine: BallotEngine = Depends(get_engine),
) -> CallResponse:
    """Cast the caller's vote, including weight delegated to it."""
    await _serialized(engine.vote, caller, req.proposal)
    return CallResponse(caller=caller, action="vote")


@router.get("/winner", response_model=WinnerResponse)
async def get_winner(engine: BallotEngine = Depends(get_engine)) -> WinnerResponse:
    result = await _serialized(engine.winner)
    if result is None:
        return WinnerResponse()
    index, name = result
    return WinnerResponse(index=index, name=name)


@router.get("/proposals", response_model=list[ProposalResponse])
async def list_proposals(engine: BallotEngine = Depends(get_engine)) -> list[ProposalResponse]:
    rows = await _serialized(engine.tally)
    return [ProposalResponse(index=i, name=name, vote_count=count) for i, name, count in rows]


@router.get("/voters/{account}", response_model=VoterResponse)
async def get_voter(account: str, engine: BallotEngine = Depends(get_engine)) -> VoterResponse:
    record = await _serialized(engine.get_voter, account)
    if record is None:
        raise HTTPException(status_code=404, detail="Voter not found")
    return VoterResponse(account=account, **record.to_dict())


@router.get("/status", response_model=StatusResponse)
async def get_status(engine: BallotEngine = Depends(get_engine)) -> StatusResponse:
    info = await _serialized(engine.status)
    return StatusResponse(**info)


@router.get("/ledger/verify", response_model=LedgerReportResponse)
async def verify_ledger(engine: BallotEngine = Depends(get_engine)) -> LedgerReportResponse:
    """Full hash-chain verification of the audit ledger."""
    report = await _serialized(engine.ledger.verify_integrity)
    if not report["valid"]:
        logger.error("Ledger integrity violation: %s", report["violations"])
    return LedgerReportResponse(**report)
