"""Delegation chain resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ballot.engine.models import Voter
from ballot.exceptions import DelegateHasNoRight, DelegationCycle

if TYPE_CHECKING:
    from ballot.storage import EntityStore

logger = logging.getLogger("ballot")


def resolve_delegate(store: "EntityStore", sender: str, target: str) -> tuple[str, Voter]:
    """Walk the delegation chain from ``target`` to its terminal account.

    The walk follows ``delegate`` links while the current account has
    voted by delegating, and stops at the first account that has not
    voted or that voted directly.

    Args:
        store: Entity store to read voter records from.
        sender: Account that is delegating. Reaching it means a loop.
        target: First account of the chain.

    Returns:
        ``(account, voter)`` of the terminal delegate.

    Raises:
        DelegationCycle: The chain revisits ``sender``, or is longer than
            the number of voters (only possible with inconsistent data).
        DelegateHasNoRight: The terminal account has no record or
            zero weight.
    """
    max_hops = store.voter_count()
    current = target

    for hop in range(max_hops + 1):
        if current == sender:
            raise DelegationCycle()

        voter = store.get_voter(current)
        if voter is None or not voter.delegated:
            if voter is None or not voter.has_right:
                raise DelegateHasNoRight()
            logger.debug("Delegation from %s resolved to %s after %d hop(s)", sender, current, hop)
            return current, voter

        logger.debug("Delegation hop %d: %s -> %s", hop, current, voter.delegate)
        current = voter.delegate

    raise DelegationCycle(f"Delegation chain from {target} exceeds {max_hops} hops.")
