"""BALLOT Engine - Package init."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterable, Optional

from ballot.engine.models import Proposal, Voter
from ballot.engine.resolver import resolve_delegate
from ballot.engine.selector import winning_proposal
from ballot.engine.tally import add_to_proposal, apply_delegated_weight
from ballot.exceptions import (
    AlreadyInitialized,
    AlreadyVoted,
    BallotError,
    InvalidProposalIndex,
    NotInitialized,
    NoVotingRight,
    SelfDelegation,
    Unauthorized,
)
from ballot.ledger import AuditLedger

if TYPE_CHECKING:
    from ballot.storage import EntityStore

logger = logging.getLogger("ballot")


class BallotEngine:
    """Weighted delegated voting over an injected entity store.

    Every public call takes the caller identity explicitly and runs as a
    single store transaction: either all of its writes are committed or
    none of them are.
    """

    def __init__(self, store: "EntityStore"):
        self._store = store
        self._ledger = AuditLedger(store)

    @property
    def store(self) -> "EntityStore":
        return self._store

    @property
    def ledger(self) -> AuditLedger:
        return self._ledger

    @contextmanager
    def _call(self, action: str, caller: str):
        try:
            with self._store.transaction():
                yield
        except BallotError as e:
            logger.warning("Rejected %s from %s: %s", action, caller, e.code)
            raise

    def _require_initialized(self) -> str:
        chairperson = self._store.get_chairperson()
        if chairperson is None:
            raise NotInitialized()
        return chairperson

    def _load_sender(self, caller: str) -> Voter:
        sender = self._store.get_voter(caller)
        if sender is None or not sender.has_right:
            raise NoVotingRight()
        if sender.voted:
            raise AlreadyVoted("You have already voted.")
        return sender

    # ─── Mutations ────────────────────────────────────────────────

    def construct(self, caller: str, proposal_names: Iterable[str]) -> None:
        """Initialize the ballot with ``caller`` as chairperson."""
        names = list(proposal_names)
        with self._call("init", caller):
            if self._store.is_initialized():
                raise AlreadyInitialized()
            self._store.set_chairperson(caller)
            self._store.put_voter(caller, Voter(weight=1))
            for name in names:
                self._store.append_proposal(Proposal(name=name))
            self._ledger.record("init", {"chairperson": caller, "proposals": names})
        logger.info("Ballot initialized by %s with %d proposal(s)", caller, len(names))

    def give_right_to_vote(self, caller: str, target: str) -> None:
        """Give ``target`` the right to vote. Chairperson only."""
        with self._call("give_right", caller):
            if caller != self._require_initialized():
                raise Unauthorized()
            voter = self._store.get_voter(target)
            if voter is None:
                voter = Voter(weight=1)
            elif voter.voted:
                raise AlreadyVoted()
            elif not voter.has_right:
                voter.weight = 1
            self._store.put_voter(target, voter)
            self._ledger.record("give_right", {"chairperson": caller, "voter": target})
        logger.info("Chairperson gave right to voter %s", target)

    def delegate(self, caller: str, target: str) -> str:
        """Delegate the caller's vote to ``target``.

        Returns the terminal delegate the weight was credited to, which
        differs from ``target`` when ``target`` itself delegated.
        """
        with self._call("delegate", caller):
            self._require_initialized()
            sender = self._load_sender(caller)
            if target == caller:
                raise SelfDelegation()

            delegate, delegate_voter = resolve_delegate(self._store, caller, target)

            sender.voted = True
            sender.delegate = delegate
            self._store.put_voter(caller, sender)
            apply_delegated_weight(self._store, delegate, delegate_voter, sender.weight)
            self._ledger.record(
                "delegate",
                {"voter": caller, "target": target, "delegate": delegate, "weight": sender.weight},
            )
        logger.info("%s delegated weight %d to %s", caller, sender.weight, delegate)
        return delegate

    def vote(self, caller: str, proposal_index: int) -> None:
        """Cast the caller's vote, including weight delegated to it."""
        with self._call("vote", caller):
            self._require_initialized()
            sender = self._load_sender(caller)
            if not 0 <= proposal_index < self._store.proposal_count():
                raise InvalidProposalIndex(f"Proposal index {proposal_index} is out of range.")

            sender.voted = True
            sender.vote = proposal_index
            self._store.put_voter(caller, sender)
            add_to_proposal(self._store, proposal_index, sender.weight)
            self._ledger.record(
                "vote", {"voter": caller, "proposal": proposal_index, "weight": sender.weight}
            )
        logger.info("%s voted for proposal %d with weight %d", caller, proposal_index, sender.weight)

    # ─── Queries ──────────────────────────────────────────────────

    def chairperson(self) -> Optional[str]:
        return self._store.get_chairperson()

    def get_voter(self, account: str) -> Optional[Voter]:
        return self._store.get_voter(account)

    def proposals(self) -> list[Proposal]:
        return list(self._store.iter_proposals())

    def tally(self) -> list[tuple[int, str, int]]:
        """``(index, name, vote_count)`` for every proposal."""
        return [(i, p.name, p.vote_count) for i, p in enumerate(self._store.iter_proposals())]

    def winning_proposal(self) -> Optional[int]:
        return winning_proposal(self._store.iter_proposals())

    def winner(self) -> Optional[tuple[int, str]]:
        """``(index, name)`` of the winning proposal from one read of the tally."""
        proposals = self.proposals()
        index = winning_proposal(proposals)
        if index is None:
            return None
        return index, proposals[index].name

    def winner_name(self) -> Optional[str]:
        """Name of the winning proposal, or None if nothing has votes."""
        result = self.winner()
        return result[1] if result else None

    def status(self) -> dict[str, Any]:
        voters = list(self._store.iter_voters())
        proposals = self.proposals()
        return {
            "initialized": self._store.is_initialized(),
            "chairperson": self._store.get_chairperson(),
            "voters": len(voters),
            "voted": sum(1 for _, v in voters if v.voted),
            "proposals": len(proposals),
            "total_votes": sum(p.vote_count for p in proposals),
            "winner": self.winner_name(),
        }


__all__ = ["BallotEngine", "Proposal", "Voter"]
