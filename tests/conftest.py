import pytest

from ballot import config
from ballot.engine import BallotEngine
from ballot.storage.memory import MemoryStore
from ballot.storage.sqlite import SQLiteStore


@pytest.fixture(autouse=True)
def reset_ballot_config():
    """Reset config from environment between every test."""
    config.reload()
    yield
    config.reload()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each engine test runs against both entity stores."""
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SQLiteStore(tmp_path / "ballot.db")
    yield s
    s.close()


@pytest.fixture
def engine(store):
    return BallotEngine(store)


@pytest.fixture
def ballot(engine):
    """Engine initialized by 'chair' with proposals A, B, C."""
    engine.construct("chair", ["A", "B", "C"])
    return engine
