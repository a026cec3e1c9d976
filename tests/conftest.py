"""Shared test fixtures for frictionpm tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A controllable clock pinned to local noon
- A ready-to-use store and sample projects/tasks

Usage:
    def test_something(store, clock):
        clock.advance(days=1)
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

from frictionpm.ops.kv_store import KeyValueStore
from frictionpm.ops.storage import PersistenceGateway
from frictionpm.tasks.friction import FrictionLevel
from frictionpm.tasks.manager import FrictionStore
from frictionpm.tasks.models import Project, ProjectStatus, Task


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "frictionpm"

DAY_MS = 24 * 60 * 60 * 1000

# Local noon keeps "same calendar day" arithmetic away from midnight
NOON = int(datetime(2024, 6, 12, 12, 0, 0).timestamp() * 1000)


# ─────────────────────────────────────────────────────────────────────────────
# Clock
# ─────────────────────────────────────────────────────────────────────────────


class FakeClock:
    """Callable epoch-ms clock that only moves when told to."""

    def __init__(self, now: int = NOON):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 0, days: float = 0) -> int:
        self.now += ms + int(days * DAY_MS)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def kv(temp_db: Path) -> KeyValueStore:
    return KeyValueStore(temp_db)


@pytest.fixture
def gateway(kv: KeyValueStore) -> PersistenceGateway:
    return PersistenceGateway(kv)


@pytest.fixture
def store(gateway: PersistenceGateway, clock: FakeClock) -> FrictionStore:
    """Empty, loaded store on a temp database with the fake clock."""
    s = FrictionStore(gateway, clock=clock)
    s.load()
    return s


@pytest.fixture
def project_id(store: FrictionStore) -> str:
    return store.create_project("Garden shed", status="hot")["data"]["project_id"]


# ─────────────────────────────────────────────────────────────────────────────
# Record Factories
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_task():
    """Build Task records with sensible defaults and increasing createdAt."""
    counter = {"n": 0}

    def _make(task_id: str, blocked_by=None, **overrides) -> Task:
        counter["n"] += 1
        fields = {
            "id": task_id,
            "project_id": "p1",
            "text": f"task {task_id}",
            "friction": FrictionLevel.LOW,
            "created_at": NOON + counter["n"],
            "blocked_by": blocked_by,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def make_project():
    def _make(project_id: str, status=ProjectStatus.HOT, **overrides) -> Project:
        fields = {
            "id": project_id,
            "name": f"project {project_id}",
            "status": status,
            "created_at": NOON,
            "last_activity_at": NOON,
        }
        fields.update(overrides)
        return Project(**fields)

    return _make


@pytest.fixture
def legacy_tasks() -> list:
    """Task records as older builds persisted them."""
    return [
        {"id": "t1", "projectId": "p1", "text": "bool today", "friction": "low",
         "isToday": True, "completed": False, "createdAt": 1},
        {"id": "t2", "projectId": "p1", "text": "string today", "friction": "high",
         "isToday": "2024-06-01", "completed": False, "createdAt": 2},
        {"id": "t3", "projectId": "p1", "text": "not today", "friction": "none",
         "isToday": False, "completed": True, "createdAt": 3},
        {"id": "t4", "projectId": "p1", "text": "no flag", "friction": "moderate",
         "completed": False, "createdAt": 4, "blockedBy": "t1"},
    ]
