"""BALLOT v1.0 - Canonical Hash Construction.

Provides deterministic JSON serialization and null-byte separated
hash computation for the audit ledger.

Hash scheme:
    f"{prev}\\x00{action}\\x00{canonical_detail}\\x00{ts}"
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

GENESIS_HASH = "GENESIS"


def canonical_json(obj: Any) -> str:
    """Deterministic JSON: sorted keys, no whitespace, ASCII-safe.

    Guarantees identical output for semantically identical input
    regardless of Python dict insertion order.

    Args:
        obj: Any JSON-serializable object.

    Returns:
        Canonical JSON string.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"),
        ensure_ascii=True, default=str,
    )


def compute_tx_hash(
    prev_hash: str,
    action: str,
    detail_json: str,
    timestamp: str,
) -> str:
    """Compute a ledger entry hash using the null-byte separated form.

    Args:
        prev_hash: Hash of the previous transaction, or "GENESIS".
        action: Call name (init, give_right, delegate, vote).
        detail_json: Canonical JSON string of the call detail.
        timestamp: ISO 8601 UTC timestamp.

    Returns:
        SHA-256 hex digest of the canonical input.
    """
    h_input = f"{prev_hash}\x00{action}\x00{detail_json}\x00{timestamp}"
    return hashlib.sha256(h_input.encode("utf-8")).hexdigest()
