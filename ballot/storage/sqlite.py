"""SQLite entity store.

Provides a synchronous sqlite3 connection; each ballot call runs inside
a single ``BEGIN IMMEDIATE`` transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ballot.engine.models import (
    Proposal,
    Transaction,
    Voter,
    row_to_proposal,
    row_to_transaction,
    row_to_voter,
)
from ballot.exceptions import StorageError
from ballot.schema import ALL_SCHEMA

logger = logging.getLogger("ballot.storage")

_CHAIRPERSON_KEY = "chairperson"


class SQLiteStore:
    """sqlite3 backed implementation of the EntityStore protocol."""

    def __init__(self, db_path: str | Path, timeout: float = 30):
        self._db_path = Path(db_path).expanduser()
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._in_tx = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ─── Connection ───────────────────────────────────────────────

    def _get_conn(self) -> sqlite3.Connection:
        """Open the connection and apply the schema on first use.

        Raises:
            StorageError: If the database file cannot be opened.
        """
        if self._conn is None:
            try:
                self._conn = self._connect()
            except (sqlite3.Error, OSError) as e:
                logger.error("Could not open SQLite store at %s: %s", self._db_path, e)
                raise StorageError() from e
            logger.debug("SQLite store opened at %s", self._db_path)
        return self._conn

    def _connect(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        # isolation_level=None: transactions are managed explicitly.
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            for stmt in ALL_SCHEMA:
                conn.executescript(stmt)
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def transaction(self):
        if self._in_tx:
            raise RuntimeError("SQLiteStore transactions are not re-entrant")
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            # Nothing to roll back: the write lock was never acquired.
            logger.error("Could not begin store transaction: %s", e)
            raise StorageError() from e
        self._in_tx = True
        try:
            yield self
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            conn.execute("ROLLBACK")
            logger.error("Store transaction failed and was rolled back: %s", e)
            raise StorageError() from e
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        finally:
            self._in_tx = False

    # ─── Singleton ────────────────────────────────────────────────

    def is_initialized(self) -> bool:
        return self.get_chairperson() is not None

    def get_chairperson(self) -> Optional[str]:
        row = self._get_conn().execute(
            "SELECT value FROM ballot_meta WHERE key = ?", (_CHAIRPERSON_KEY,)
        ).fetchone()
        return row[0] if row else None

    def set_chairperson(self, account: str) -> None:
        self._get_conn().execute(
            "INSERT OR REPLACE INTO ballot_meta (key, value) VALUES (?, ?)",
            (_CHAIRPERSON_KEY, account),
        )

    # ─── Voters ───────────────────────────────────────────────────

    def get_voter(self, account: str) -> Optional[Voter]:
        row = self._get_conn().execute(
            "SELECT weight, voted, delegate, vote FROM voters WHERE account = ?",
            (account,),
        ).fetchone()
        return row_to_voter(row) if row else None

    def put_voter(self, account: str, voter: Voter) -> None:
        self._get_conn().execute(
            "INSERT OR REPLACE INTO voters (account, weight, voted, delegate, vote) "
            "VALUES (?, ?, ?, ?, ?)",
            (account, voter.weight, int(voter.voted), voter.delegate, voter.vote),
        )

    def voter_count(self) -> int:
        return self._get_conn().execute("SELECT COUNT(*) FROM voters").fetchone()[0]

    def iter_voters(self) -> Iterator[tuple[str, Voter]]:
        rows = self._get_conn().execute(
            "SELECT account, weight, voted, delegate, vote FROM voters ORDER BY account"
        ).fetchall()
        for row in rows:
            yield row[0], row_to_voter(row[1:])

    # ─── Proposals ────────────────────────────────────────────────

    def get_proposal(self, index: int) -> Optional[Proposal]:
        row = self._get_conn().execute(
            "SELECT name, vote_count FROM proposals WHERE idx = ?", (index,)
        ).fetchone()
        return row_to_proposal(row) if row else None

    def replace_proposal(self, index: int, proposal: Proposal) -> None:
        cursor = self._get_conn().execute(
            "UPDATE proposals SET name = ?, vote_count = ? WHERE idx = ?",
            (proposal.name, proposal.vote_count, index),
        )
        if cursor.rowcount == 0:
            raise IndexError(f"proposal index {index} out of range")

    def append_proposal(self, proposal: Proposal) -> int:
        index = self.proposal_count()
        self._get_conn().execute(
            "INSERT INTO proposals (idx, name, vote_count) VALUES (?, ?, ?)",
            (index, proposal.name, proposal.vote_count),
        )
        return index

    def proposal_count(self) -> int:
        return self._get_conn().execute("SELECT COUNT(*) FROM proposals").fetchone()[0]

    def iter_proposals(self) -> Iterator[Proposal]:
        rows = self._get_conn().execute(
            "SELECT name, vote_count FROM proposals ORDER BY idx ASC"
        ).fetchall()
        for row in rows:
            yield row_to_proposal(row)

    # ─── Audit Ledger ─────────────────────────────────────────────

    def last_transaction(self) -> Optional[Transaction]:
        row = self._get_conn().execute(
            "SELECT id, action, detail, prev_hash, hash, timestamp "
            "FROM transactions ORDER BY id DESC LIMIT 1"
        ).fetchone()
        return row_to_transaction(row) if row else None

    def append_transaction(
        self, action: str, detail: str, prev_hash: str, hash: str, timestamp: str
    ) -> int:
        cursor = self._get_conn().execute(
            "INSERT INTO transactions (action, detail, prev_hash, hash, timestamp) "
            "VALUES (?, ?, ?, ?, ?)",
            (action, detail, prev_hash, hash, timestamp),
        )
        return cursor.lastrowid

    def iter_transactions(self) -> Iterator[Transaction]:
        rows = self._get_conn().execute(
            "SELECT id, action, detail, prev_hash, hash, timestamp "
            "FROM transactions ORDER BY id ASC"
        ).fetchall()
        for row in rows:
            yield row_to_transaction(row)
