"""Winner selection."""

from __future__ import annotations

from typing import Iterable, Optional

from ballot.engine.models import Proposal


def winning_proposal(proposals: Iterable[Proposal]) -> Optional[int]:
    """Index of the proposal with the most votes.

    Only a strictly greater count replaces the current leader, so the
    lowest index wins ties. The running maximum starts at zero: when no
    proposal has any votes there is no winner.
    """
    winning_index: Optional[int] = None
    winning_count = 0
    for i, proposal in enumerate(proposals):
        if proposal.vote_count > winning_count:
            winning_count = proposal.vote_count
            winning_index = i
    return winning_index
