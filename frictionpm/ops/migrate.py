"""
Legacy record migration for persisted and imported collections.

Older builds stored records in shapes the engine no longer accepts:
- projects without ``lastActivityAt``
- tasks whose ``isToday`` was a bare ``true`` or a date string

Migration is a pure function applied once at the boundary. Afterwards the
in-memory model only sees a timestamp-or-unset ``isToday`` and a populated
``lastActivityAt``.

Usage:
    from frictionpm.ops.migrate import migrate_projects, migrate_tasks

    projects = migrate_projects(raw_projects, now=now_ms())
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from frictionpm.logging_config import get_logger
from frictionpm.tasks.errors import ValidationError
from frictionpm.tasks.models import Project, Task


logger = get_logger(__name__)


def migrate_is_today(value: Any, now: int) -> int | bool:
    """Normalize any historical ``isToday`` shape to a timestamp or False."""
    if value is True or isinstance(value, str):
        return now
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return False


def migrate_project_record(record: dict[str, Any], now: int) -> tuple[dict[str, Any], bool]:
    """Returns (migrated copy, whether anything changed)."""
    migrated = dict(record)
    if migrated.get("lastActivityAt") is None:
        migrated["lastActivityAt"] = now
        return migrated, True
    return migrated, False


def migrate_task_record(record: dict[str, Any], now: int) -> tuple[dict[str, Any], bool]:
    """Returns (migrated copy, whether anything changed)."""
    migrated = dict(record)
    original = record.get("isToday", False)
    migrated["isToday"] = migrate_is_today(original, now)
    changed = original is True or isinstance(original, str)
    return migrated, changed


def _migrate_records(
    records: Iterable[Any],
    now: int,
    kind: str,
    migrate_record: Callable[[dict[str, Any], int], tuple[dict[str, Any], bool]],
    build: Callable[[dict[str, Any]], Any],
    strict: bool,
) -> list[Any]:
    """
    Migrate and build records of one kind.

    Lenient mode skips malformed records with a warning. Strict mode raises
    ValidationError on the first one, so the caller can refuse the whole batch.
    """
    built: list[Any] = []
    migrated_count = 0
    for index, record in enumerate(records):
        if not isinstance(record, dict) or not record.get("id"):
            if strict:
                raise ValidationError(f"Malformed {kind} record at position {index}: {record!r}")
            logger.warning(f"Skipping malformed {kind} record: {record!r}")
            continue
        data, changed = migrate_record(record, now)
        try:
            built.append(build(data))
        except (KeyError, TypeError, ValueError) as e:
            if strict:
                raise ValidationError(f"Invalid {kind} {record.get('id')}: {e}") from e
            logger.warning(f"Skipping {kind} {record.get('id')}: {e}")
            continue
        migrated_count += int(changed)

    if migrated_count:
        logger.info(f"Migrated {migrated_count} legacy {kind} record(s)")
    return built


def migrate_projects(records: Iterable[Any], now: int, strict: bool = False) -> list[Project]:
    return _migrate_records(records, now, "project", migrate_project_record, Project.from_dict, strict)


def migrate_tasks(records: Iterable[Any], now: int, strict: bool = False) -> list[Task]:
    return _migrate_records(records, now, "task", migrate_task_record, Task.from_dict, strict)


__all__ = [
    "migrate_is_today",
    "migrate_project_record",
    "migrate_task_record",
    "migrate_projects",
    "migrate_tasks",
]
