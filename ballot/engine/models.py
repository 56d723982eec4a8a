"""BALLOT Engine - Voter and Proposal records and row helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Voter:
    weight: int = 0
    voted: bool = False
    delegate: Optional[str] = None
    vote: Optional[int] = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"voter weight must be non-negative, got {self.weight}")
        if self.voted and (self.delegate is None) == (self.vote is None):
            raise ValueError("a voter that voted must have exactly one of delegate/vote")
        if not self.voted and (self.delegate is not None or self.vote is not None):
            raise ValueError("a voter that has not voted cannot carry a delegate or vote")

    @property
    def has_right(self) -> bool:
        return self.weight != 0

    @property
    def delegated(self) -> bool:
        return self.voted and self.delegate is not None

    def to_dict(self) -> dict:
        return {
            "weight": self.weight,
            "voted": self.voted,
            "delegate": self.delegate,
            "vote": self.vote,
        }


@dataclass
class Proposal:
    name: str
    vote_count: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "vote_count": self.vote_count}


@dataclass
class Transaction:
    """One entry of the hash-chained audit ledger."""

    id: int
    action: str
    detail: str
    prev_hash: str
    hash: str
    timestamp: str


def row_to_voter(row: tuple) -> Voter:
    # (weight, voted, delegate, vote)
    return Voter(
        weight=int(row[0]),
        voted=bool(row[1]),
        delegate=row[2],
        vote=row[3],
    )


def row_to_proposal(row: tuple) -> Proposal:
    return Proposal(name=row[0], vote_count=int(row[1]))


def row_to_transaction(row: tuple) -> Transaction:
    return Transaction(
        id=row[0],
        action=row[1],
        detail=row[2],
        prev_hash=row[3],
        hash=row[4],
        timestamp=row[5],
    )
