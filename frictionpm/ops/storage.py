"""
Persistence gateway for the two collections.

Wraps the key-value store with the schema rules: records are migrated on
the way in, corrupt data degrades to an empty collection instead of
breaking startup, and each collection is written as one value.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from frictionpm.logging_config import get_logger
from frictionpm.ops.kv_store import KeyValueStore
from frictionpm.ops.migrate import migrate_projects, migrate_tasks
from frictionpm.tasks import PROJECTS_KEY, TASKS_KEY
from frictionpm.tasks.errors import ParseError
from frictionpm.tasks.models import Project, Task


logger = get_logger(__name__)


class PersistenceGateway:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    @classmethod
    def at(cls, db_path: Path) -> "PersistenceGateway":
        return cls(KeyValueStore(db_path))

    def _load_records(self, key: str) -> list[Any]:
        try:
            value = self.kv.load(key)
        except ParseError as e:
            logger.error(f"{e}; starting with an empty collection")
            return []
        if value is None:
            return []
        if not isinstance(value, list):
            logger.error(f"Stored '{key}' is {type(value).__name__}, expected a list; starting empty")
            return []
        return value

    def load_projects(self, now: int) -> list[Project]:
        return migrate_projects(self._load_records(PROJECTS_KEY), now)

    def load_tasks(self, now: int) -> list[Task]:
        return migrate_tasks(self._load_records(TASKS_KEY), now)

    def save_projects(self, projects: Sequence[Project]) -> None:
        self.kv.save(PROJECTS_KEY, [p.to_dict() for p in projects])

    def save_tasks(self, tasks: Sequence[Task]) -> None:
        self.kv.save(TASKS_KEY, [t.to_dict() for t in tasks])


__all__ = ["PersistenceGateway"]
