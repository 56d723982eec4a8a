"""Weight accumulation on proposals and delegates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ballot.engine.models import Voter
from ballot.exceptions import InvalidProposalIndex

if TYPE_CHECKING:
    from ballot.storage import EntityStore


def add_to_proposal(store: "EntityStore", index: int, weight: int) -> int:
    """Add ``weight`` to proposal ``index`` and return its new count."""
    proposal = store.get_proposal(index)
    if proposal is None:
        raise InvalidProposalIndex(f"Proposal index {index} is out of range.")
    proposal.vote_count += weight
    store.replace_proposal(index, proposal)
    return proposal.vote_count


def apply_delegated_weight(
    store: "EntityStore", delegate: str, delegate_voter: Voter, weight: int
) -> None:
    """Credit a delegator's weight to its terminal delegate.

    A delegate that already voted passes the weight straight to the
    proposal it chose; otherwise the weight is added to the delegate's
    own, to be spent when it votes or delegates.
    """
    if delegate_voter.voted:
        add_to_proposal(store, delegate_voter.vote, weight)
        return
    delegate_voter.weight += weight
    store.put_voter(delegate, delegate_voter)
