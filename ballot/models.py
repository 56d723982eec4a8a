"""
BALLOT v1.0 - API Models.
Centralized Pydantic models for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator


class InitRequest(BaseModel):
    proposals: list[str] = Field(default_factory=list, description="Proposal names, in index order")

    @field_validator("proposals")
    @classmethod
    def names_not_empty(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name or not name.strip():
                raise ValueError("Proposal names must not be empty or whitespace only")
        return v


class RightRequest(BaseModel):
    voter: str = Field(..., min_length=1, max_length=200, description="Account to grant the right to")


class DelegateRequest(BaseModel):
    to: str = Field(..., min_length=1, max_length=200, description="Account to delegate to")


class VoteRequest(BaseModel):
    proposal: int = Field(..., description="Index of the chosen proposal")


class CallResponse(BaseModel):
    caller: str
    action: str
    status: str = "committed"


class DelegateResponse(CallResponse):
    delegate: str


class ProposalResponse(BaseModel):
    index: int
    name: str
    vote_count: int


class VoterResponse(BaseModel):
    account: str
    weight: int
    voted: bool
    delegate: str | None = None
    vote: int | None = None


class WinnerResponse(BaseModel):
    index: int | None = None
    name: str | None = None


class StatusResponse(BaseModel):
    initialized: bool
    chairperson: str | None = None
    voters: int
    voted: int
    proposals: int
    total_votes: int
    winner: str | None = None


class LedgerReportResponse(BaseModel):
    valid: bool
    violations: list[dict]
    transactions_checked: int
