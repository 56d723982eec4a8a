"""
BALLOT v1.0 - Entity Store Abstraction.

Pluggable storage layer: switch between an in-memory store and a local
SQLite file via environment variable. The engine never knows which
backend is active; it just calls the protocol methods.

Usage:
    BALLOT_STORAGE=sqlite   → SQLite file (default)
    BALLOT_STORAGE=memory   → process-local dicts, lost on exit
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Protocol, runtime_checkable

from ballot import config
from ballot.engine.models import Proposal, Transaction, Voter

logger = logging.getLogger("ballot.storage")


class StorageMode(str, Enum):
    SQLITE = "sqlite"
    MEMORY = "memory"


@runtime_checkable
class EntityStore(Protocol):
    """Protocol for all entity stores.

    Lookups return independent copies; a mutated record is only
    observed by the store after an explicit put/replace call.
    """

    def is_initialized(self) -> bool:
        """Return True once a chairperson has been recorded."""
        ...

    def get_chairperson(self) -> Optional[str]: ...

    def set_chairperson(self, account: str) -> None: ...

    def get_voter(self, account: str) -> Optional[Voter]: ...

    def put_voter(self, account: str, voter: Voter) -> None: ...

    def voter_count(self) -> int: ...

    def iter_voters(self) -> Iterator[tuple[str, Voter]]: ...

    def get_proposal(self, index: int) -> Optional[Proposal]: ...

    def replace_proposal(self, index: int, proposal: Proposal) -> None: ...

    def append_proposal(self, proposal: Proposal) -> int: ...

    def proposal_count(self) -> int: ...

    def iter_proposals(self) -> Iterator[Proposal]:
        """Yield every proposal in index order."""
        ...

    def last_transaction(self) -> Optional[Transaction]: ...

    def append_transaction(
        self, action: str, detail: str, prev_hash: str, hash: str, timestamp: str
    ) -> int: ...

    def iter_transactions(self) -> Iterator[Transaction]: ...

    def transaction(self) -> AbstractContextManager:
        """Commit every write made inside the block, or none of them."""
        ...

    def close(self) -> None: ...


def get_storage_mode(raw: Optional[str] = None) -> StorageMode:
    """Detect storage mode from configuration."""
    raw = (raw or config.STORAGE_MODE).lower()
    try:
        return StorageMode(raw)
    except ValueError:
        logger.warning("Unknown BALLOT_STORAGE='%s', falling back to sqlite", raw)
        return StorageMode.SQLITE


def get_store(
    mode: Optional[str] = None, db_path: Optional[str | Path] = None
) -> EntityStore:
    """Build the entity store selected by ``mode`` (or BALLOT_STORAGE)."""
    resolved = get_storage_mode(mode)
    if resolved == StorageMode.MEMORY:
        from ballot.storage.memory import MemoryStore

        return MemoryStore()

    from ballot.storage.sqlite import SQLiteStore

    return SQLiteStore(db_path or config.DB_PATH)


__all__ = ["EntityStore", "StorageMode", "get_storage_mode", "get_store"]
