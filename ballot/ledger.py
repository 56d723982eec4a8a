"""
BALLOT v1.0 - Audit Ledger.

Every committed ballot call is sealed as one hash-chained transaction,
written through the same store transaction as the state change it
describes. A rolled-back call therefore leaves no entry behind.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ballot.canonical import GENESIS_HASH, canonical_json, compute_tx_hash

if TYPE_CHECKING:
    from ballot.storage import EntityStore

logger = logging.getLogger("ballot.ledger")


class AuditLedger:
    """Append-only, hash-chained log of committed ballot calls."""

    def __init__(self, store: "EntityStore"):
        self._store = store

    def record(self, action: str, detail: dict[str, Any]) -> int:
        """Append a sealed entry and return its id."""
        detail_json = canonical_json(detail)
        timestamp = datetime.now(timezone.utc).isoformat()
        last = self._store.last_transaction()
        prev_hash = last.hash if last else GENESIS_HASH
        tx_hash = compute_tx_hash(prev_hash, action, detail_json, timestamp)
        tx_id = self._store.append_transaction(
            action, detail_json, prev_hash, tx_hash, timestamp
        )
        logger.debug("Ledger entry #%d sealed: %s %s", tx_id, action, tx_hash[:8])
        return tx_id

    def verify_integrity(self) -> dict[str, Any]:
        """Audit the whole chain.

        Returns a report with ``valid``, ``violations`` and
        ``transactions_checked``. Violations are ``CHAIN_BREAK`` (an entry
        whose prev_hash does not match its predecessor) and
        ``DATA_TAMPERING`` (an entry whose stored hash does not match its
        content).
        """
        violations = []
        checked = 0
        expected_prev = GENESIS_HASH

        for tx in self._store.iter_transactions():
            checked += 1
            if tx.prev_hash != expected_prev:
                violations.append({
                    "tx_id": tx.id,
                    "type": "CHAIN_BREAK",
                    "expected_prev": expected_prev,
                    "actual_prev": tx.prev_hash,
                })

            actual_hash = compute_tx_hash(tx.prev_hash, tx.action, tx.detail, tx.timestamp)
            if actual_hash != tx.hash:
                violations.append({
                    "tx_id": tx.id,
                    "type": "DATA_TAMPERING",
                    "expected_hash": tx.hash,
                    "actual_hash": actual_hash,
                })

            expected_prev = tx.hash

        if violations:
            logger.error("Ledger integrity violated: %d violation(s)", len(violations))

        return {
            "valid": not violations,
            "violations": violations,
            "transactions_checked": checked,
        }
