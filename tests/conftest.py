"""Shared test fixtures for InterviewPrep."""

from __future__ import annotations

import json

import pytest

from interviewprep.checklist.models import JobContext
from interviewprep.storage.database import Database
from interviewprep.storage.store import MemoryStore, SQLiteStore, StoreError


@pytest.fixture
def tmp_db(tmp_path):
    """Temp database with schema initialized."""
    db_path = tmp_path / "test.db"
    with Database(db_path) as db:
        yield db


@pytest.fixture
def sqlite_store(tmp_db):
    """Store backed by the temp database."""
    return SQLiteStore(tmp_db)


@pytest.fixture
def store():
    """In-memory store."""
    return MemoryStore()


class FailingStore(MemoryStore):
    """Store whose writes (and optionally reads) always fail."""

    def __init__(self, fail_reads: bool = False):
        super().__init__()
        self.fail_reads = fail_reads

    def get(self, key):
        if self.fail_reads:
            raise StoreError("disk on fire")
        return super().get(key)

    def set(self, key, value):
        raise StoreError("disk full")

    def remove(self, key):
        raise StoreError("read-only")


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def sample_job():
    """A job whose description mentions React, Node, AWS, and leading a team."""
    return JobContext(
        id="job-42",
        title="Software Engineer",
        company="Acme",
        description="React, Node, and AWS experience; lead a small team",
        location="Berlin",
    )


@pytest.fixture
def tmp_profiles_json(tmp_path, monkeypatch):
    """Set up a temp profiles.json for config tests."""
    registry = {
        "default": "testprofile",
        "profiles": {
            "testprofile": {
                "name": "Test Profile",
                "data_dir": f"{tmp_path}/data/profiles/testprofile",
            }
        },
    }
    profiles_json = tmp_path / "profiles.json"
    profiles_json.write_text(json.dumps(registry))

    import interviewprep.config as config_mod
    monkeypatch.setattr(config_mod, "PROFILES_JSON_PATH", profiles_json)
    monkeypatch.setattr(config_mod, "PROJECT_ROOT", tmp_path)
    return profiles_json, tmp_path


@pytest.fixture
def unreadable_store():
    return FailingStore(fail_reads=True)
