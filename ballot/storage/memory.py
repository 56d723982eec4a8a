"""In-memory entity store.

Backs tests and throwaway ballots. Transactions snapshot the whole state
on entry and restore it if the block raises.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional

from ballot.engine.models import Proposal, Transaction, Voter

logger = logging.getLogger("ballot.storage")


class MemoryStore:
    """Dict/list backed implementation of the EntityStore protocol."""

    def __init__(self) -> None:
        self._chairperson: Optional[str] = None
        self._voters: dict[str, Voter] = {}
        self._proposals: list[Proposal] = []
        self._transactions: list[Transaction] = []
        self._in_tx = False

    # ─── Transactions ─────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        if self._in_tx:
            raise RuntimeError("MemoryStore transactions are not re-entrant")
        snapshot = (
            self._chairperson,
            copy.deepcopy(self._voters),
            copy.deepcopy(self._proposals),
            list(self._transactions),
        )
        self._in_tx = True
        try:
            yield self
        except BaseException:
            (
                self._chairperson,
                self._voters,
                self._proposals,
                self._transactions,
            ) = snapshot
            logger.debug("MemoryStore transaction rolled back")
            raise
        finally:
            self._in_tx = False

    # ─── Singleton ────────────────────────────────────────────────

    def is_initialized(self) -> bool:
        return self._chairperson is not None

    def get_chairperson(self) -> Optional[str]:
        return self._chairperson

    def set_chairperson(self, account: str) -> None:
        self._chairperson = account

    # ─── Voters ───────────────────────────────────────────────────

    def get_voter(self, account: str) -> Optional[Voter]:
        voter = self._voters.get(account)
        return replace(voter) if voter is not None else None

    def put_voter(self, account: str, voter: Voter) -> None:
        self._voters[account] = replace(voter)

    def voter_count(self) -> int:
        return len(self._voters)

    def iter_voters(self) -> Iterator[tuple[str, Voter]]:
        for account, voter in list(self._voters.items()):
            yield account, replace(voter)

    # ─── Proposals ────────────────────────────────────────────────

    def get_proposal(self, index: int) -> Optional[Proposal]:
        if 0 <= index < len(self._proposals):
            return replace(self._proposals[index])
        return None

    def replace_proposal(self, index: int, proposal: Proposal) -> None:
        if not 0 <= index < len(self._proposals):
            raise IndexError(f"proposal index {index} out of range")
        self._proposals[index] = replace(proposal)

    def append_proposal(self, proposal: Proposal) -> int:
        self._proposals.append(replace(proposal))
        return len(self._proposals) - 1

    def proposal_count(self) -> int:
        return len(self._proposals)

    def iter_proposals(self) -> Iterator[Proposal]:
        for proposal in list(self._proposals):
            yield replace(proposal)

    # ─── Audit Ledger ─────────────────────────────────────────────

    def last_transaction(self) -> Optional[Transaction]:
        return self._transactions[-1] if self._transactions else None

    def append_transaction(
        self, action: str, detail: str, prev_hash: str, hash: str, timestamp: str
    ) -> int:
        tx_id = len(self._transactions) + 1
        self._transactions.append(
            Transaction(
                id=tx_id,
                action=action,
                detail=detail,
                prev_hash=prev_hash,
                hash=hash,
                timestamp=timestamp,
            )
        )
        return tx_id

    def iter_transactions(self) -> Iterator[Transaction]:
        yield from list(self._transactions)

    def close(self) -> None:
        pass
