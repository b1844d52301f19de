"""
Shared fixtures for domain knowledge tests
"""

import pytest

from domain_knowledge import (
    DomainKnowledge,
    MemoryObservationStore,
    SQLiteObservationStore,
)


@pytest.fixture
def sqlite_store(tmp_path):
    """SQLite store in a throwaway directory"""
    return SQLiteObservationStore(db_path=str(tmp_path / "knowledge.db"))


@pytest.fixture
def memory_store():
    return MemoryObservationStore()


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    """Run a test against both store backends"""
    if request.param == "sqlite":
        return SQLiteObservationStore(db_path=str(tmp_path / "knowledge.db"))
    return MemoryObservationStore()


@pytest.fixture
def knowledge(store):
    return DomainKnowledge(store=store)
