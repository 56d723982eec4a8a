"""
BALLOT - Weighted delegated voting on a ledger-backed store.

Accounts receive voting rights from a chairperson, then either vote for
a proposal directly or delegate their weight along a chain of accounts.
"""

__version__ = "1.0.0"

from ballot.engine import BallotEngine

__all__ = ["BallotEngine", "__version__"]
