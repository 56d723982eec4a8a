"""
BALLOT v1.0 - SQLite Schema Definitions.

Tables backing the SQLite entity store.
"""

SCHEMA_VERSION = "1.0.0"

# ─── Singleton State (chairperson) ───────────────────────────────────
CREATE_META = """
CREATE TABLE IF NOT EXISTS ballot_meta (
    key     TEXT PRIMARY KEY,
    value   TEXT NOT NULL
);
"""

# ─── Voters ──────────────────────────────────────────────────────────
CREATE_VOTERS = """
CREATE TABLE IF NOT EXISTS voters (
    account     TEXT PRIMARY KEY,
    weight      INTEGER NOT NULL DEFAULT 0 CHECK (weight >= 0),
    voted       INTEGER NOT NULL DEFAULT 0,
    delegate    TEXT,
    vote        INTEGER
);
"""

# ─── Proposals (index-addressed, insertion order) ────────────────────
CREATE_PROPOSALS = """
CREATE TABLE IF NOT EXISTS proposals (
    idx         INTEGER PRIMARY KEY,
    name        TEXT NOT NULL,
    vote_count  INTEGER NOT NULL DEFAULT 0 CHECK (vote_count >= 0)
);
"""

# ─── Audit Ledger (append-only, hash-chained) ────────────────────────
CREATE_TRANSACTIONS = """
CREATE TABLE IF NOT EXISTS transactions (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    action      TEXT NOT NULL,
    detail      TEXT NOT NULL,
    prev_hash   TEXT NOT NULL,
    hash        TEXT NOT NULL,
    timestamp   TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tx_action ON transactions(action);
"""

ALL_SCHEMA = [
    CREATE_META,
    CREATE_VOTERS,
    CREATE_PROPOSALS,
    CREATE_TRANSACTIONS,
]
