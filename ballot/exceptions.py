"""
BALLOT v1.0 - Custom Exceptions.

Typed error hierarchy for the voting state machine. Every rejected call
surfaces as exactly one of these kinds so callers can branch on
``exc.code`` instead of parsing messages.
"""


class BallotError(Exception):
    """Base exception for all BALLOT errors."""

    code = "ballot_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or (self.__doc__ or "").strip().splitlines()[0])


class AlreadyInitialized(BallotError):
    """Ballot state already exists."""

    code = "already_initialized"


class NotInitialized(BallotError):
    """Ballot has not been initialized."""

    code = "not_initialized"


class Unauthorized(BallotError):
    """Only the chairperson can give right to vote."""

    code = "unauthorized"


class AlreadyVoted(BallotError):
    """The voter already voted."""

    code = "already_voted"


class NoVotingRight(BallotError):
    """You have no right to vote."""

    code = "no_voting_right"


class SelfDelegation(BallotError):
    """Self-delegation is disallowed."""

    code = "self_delegation"


class DelegationCycle(BallotError):
    """Found loop in delegation."""

    code = "delegation_cycle"


class DelegateHasNoRight(BallotError):
    """Voters cannot delegate to accounts that cannot vote."""

    code = "delegate_has_no_right"


class InvalidProposalIndex(BallotError):
    """Proposal index is out of range."""

    code = "invalid_proposal_index"


class StorageError(BallotError):
    """Raised when a store transaction fails and has been rolled back.

    Sanitizes internal SQLite error details so they are never exposed
    to external callers or API consumers.
    """

    code = "storage_error"
