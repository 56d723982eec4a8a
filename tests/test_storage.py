"""
BALLOT v1.0 - Entity Store Tests.

Copy semantics, transactions and persistence of both stores.
"""

import sqlite3

import pytest

from ballot.engine import BallotEngine
from ballot.engine.models import Proposal, Voter
from ballot.exceptions import StorageError
from ballot.storage import EntityStore, StorageMode, get_storage_mode, get_store
from ballot.storage.memory import MemoryStore
from ballot.storage.sqlite import SQLiteStore


class TestStoreContract:
    def test_implements_protocol(self, store):
        assert isinstance(store, EntityStore)

    def test_lookups_return_copies(self, store):
        store.put_voter("alice", Voter(weight=1))
        voter = store.get_voter("alice")
        voter.weight = 5
        assert store.get_voter("alice").weight == 1

        store.append_proposal(Proposal(name="A"))
        proposal = store.get_proposal(0)
        proposal.vote_count = 9
        assert store.get_proposal(0).vote_count == 0

    def test_proposals_are_index_ordered(self, store):
        for name in ["A", "B", "C"]:
            store.append_proposal(Proposal(name=name))
        store.replace_proposal(1, Proposal(name="B", vote_count=4))
        assert [(p.name, p.vote_count) for p in store.iter_proposals()] == [
            ("A", 0),
            ("B", 4),
            ("C", 0),
        ]
        assert store.proposal_count() == 3
        assert store.get_proposal(3) is None

    def test_replace_out_of_range(self, store):
        with pytest.raises(IndexError):
            store.replace_proposal(0, Proposal(name="A"))

    def test_transaction_rolls_back_on_error(self, store):
        store.put_voter("alice", Voter(weight=1))
        with pytest.raises(ValueError):
            with store.transaction():
                store.put_voter("alice", Voter(weight=2))
                store.put_voter("bob", Voter(weight=1))
                store.set_chairperson("alice")
                store.append_proposal(Proposal(name="A"))
                raise ValueError("abort")
        assert store.get_voter("alice") == Voter(weight=1)
        assert store.get_voter("bob") is None
        assert not store.is_initialized()
        assert store.proposal_count() == 0

    def test_transaction_commits(self, store):
        with store.transaction():
            store.set_chairperson("chair")
            store.put_voter("chair", Voter(weight=1))
        assert store.get_chairperson() == "chair"
        assert store.voter_count() == 1

    def test_transactions_are_not_reentrant(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction():
                with store.transaction():
                    pass


class TestSQLiteStore:
    def test_state_survives_reopen(self, tmp_path):
        path = tmp_path / "ballot.db"
        store = SQLiteStore(path)
        with store.transaction():
            store.set_chairperson("chair")
            store.put_voter("chair", Voter(weight=1, voted=True, vote=0))
            store.append_proposal(Proposal(name="A", vote_count=1))
        store.close()

        reopened = SQLiteStore(path)
        try:
            assert reopened.get_chairperson() == "chair"
            assert reopened.get_voter("chair") == Voter(weight=1, voted=True, vote=0)
            assert list(reopened.iter_proposals()) == [Proposal(name="A", vote_count=1)]
        finally:
            reopened.close()

    def test_driver_errors_are_sanitized(self, tmp_path):
        store = SQLiteStore(tmp_path / "ballot.db")
        bad = Voter(weight=1)
        bad.weight = -1  # violates the CHECK constraint
        try:
            with pytest.raises(StorageError) as exc_info:
                with store.transaction():
                    store.put_voter("alice", Voter(weight=1))
                    store.put_voter("bob", bad)
            assert "CHECK" not in str(exc_info.value)
            assert store.get_voter("alice") is None
        finally:
            store.close()

    def test_locked_database_raises_storage_error(self, tmp_path):
        path = tmp_path / "ballot.db"
        store = SQLiteStore(path, timeout=0.1)
        engine = BallotEngine(store)
        assert store.voter_count() == 0

        holder = sqlite3.connect(str(path), isolation_level=None)
        holder.execute("BEGIN IMMEDIATE")
        try:
            with pytest.raises(StorageError) as exc_info:
                engine.construct("chair", ["A"])
            assert "locked" not in str(exc_info.value)
        finally:
            holder.execute("ROLLBACK")
            holder.close()

        try:
            engine.construct("chair", ["A"])
            assert store.get_chairperson() == "chair"
            assert len(list(store.iter_transactions())) == 1
        finally:
            store.close()

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        store = SQLiteStore(tmp_path)  # a directory, not a database file
        try:
            with pytest.raises(StorageError) as exc_info:
                BallotEngine(store).construct("chair", ["A"])
            assert "unable to open" not in str(exc_info.value)
            with pytest.raises(StorageError):
                store.get_chairperson()
        finally:
            store.close()


class TestStorageFactory:
    def test_unknown_mode_falls_back_to_sqlite(self):
        assert get_storage_mode("cassandra") == StorageMode.SQLITE

    def test_memory_mode(self):
        assert isinstance(get_store("memory"), MemoryStore)

    def test_sqlite_mode(self, tmp_path):
        store = get_store("sqlite", tmp_path / "x.db")
        try:
            assert isinstance(store, SQLiteStore)
            assert store.db_path == tmp_path / "x.db"
        finally:
            store.close()

    def test_mode_from_environment(self, monkeypatch):
        from ballot import config

        monkeypatch.setenv("BALLOT_STORAGE", "memory")
        config.reload()
        assert get_storage_mode() == StorageMode.MEMORY


class TestVoterModel:
    def test_voted_requires_exactly_one_choice(self):
        with pytest.raises(ValueError):
            Voter(weight=1, voted=True)
        with pytest.raises(ValueError):
            Voter(weight=1, voted=True, delegate="a", vote=0)

    def test_unvoted_cannot_carry_choice(self):
        with pytest.raises(ValueError):
            Voter(weight=1, delegate="a")

    def test_negative_weight(self):
        with pytest.raises(ValueError):
            Voter(weight=-1)
