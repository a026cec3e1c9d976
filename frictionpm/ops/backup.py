"""
Backup export/import for the whole snapshot.

A backup is a full replace-all document, never a delta:

    {"projects": [...], "tasks": [...], "exportedAt": 1718000000000}

Files are written as pretty-printed JSON named
``friction-pm-backup-YYYY-MM-DD.json``.

Usage:
    python -m frictionpm.cli export
    python -m frictionpm.cli import backups/friction-pm-backup-2024-06-10.json
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from frictionpm.logging_config import get_logger
from frictionpm.ops import BACKUP_DIR
from frictionpm.tasks.errors import ValidationError
from frictionpm.tasks.models import Project, Task, now_ms


logger = get_logger(__name__)

DEFAULT_PREFIX = "friction-pm-backup"


class BackupDocument(BaseModel):
    """Structural schema only; record contents go through migration on import."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    projects: list[Any]
    tasks: list[Any]
    exported_at: Optional[Union[int, float]] = Field(default=None, alias="exportedAt")

    def to_dict(self) -> dict[str, Any]:
        return {
            "projects": self.projects,
            "tasks": self.tasks,
            "exportedAt": self.exported_at,
        }


def build_backup(projects: Sequence[Project], tasks: Sequence[Task], now: int) -> BackupDocument:
    return BackupDocument(
        projects=[p.to_dict() for p in projects],
        tasks=[t.to_dict() for t in tasks],
        exported_at=now,
    )


def encode_backup(doc: BackupDocument) -> str:
    return json.dumps(doc.to_dict(), indent=2)


def parse_backup(data: Any) -> BackupDocument:
    """Validate an already-decoded document. Raises ValidationError."""
    if not isinstance(data, dict):
        raise ValidationError("Invalid backup file format: expected a JSON object")
    if not isinstance(data.get("projects"), list) or not isinstance(data.get("tasks"), list):
        raise ValidationError("Invalid backup file format: 'projects' and 'tasks' must be arrays")
    try:
        return BackupDocument.model_validate(data)
    except SchemaError as e:
        raise ValidationError(f"Invalid backup file format: {e.errors()[0]['msg']}") from e


def decode_backup(text: str) -> BackupDocument:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Failed to parse JSON: {e}") from e
    return parse_backup(data)


def backup_filename(now: int, prefix: str = DEFAULT_PREFIX) -> str:
    day = datetime.fromtimestamp(now / 1000).strftime("%Y-%m-%d")
    return f"{prefix}-{day}.json"


def write_backup(
    doc: BackupDocument,
    dest_dir: Path | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> Path:
    dest_dir = dest_dir or BACKUP_DIR
    dest_dir.mkdir(parents=True, exist_ok=True)

    now = int(doc.exported_at) if doc.exported_at is not None else now_ms()
    dest = dest_dir / backup_filename(now, prefix)
    dest.write_text(encode_backup(doc), encoding="utf-8")
    logger.info(f"Exported {len(doc.projects)} projects and {len(doc.tasks)} tasks -> {dest.name}")
    return dest


def read_backup(path: Path) -> BackupDocument:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"Cannot read backup file {path}: {e}") from e
    return decode_backup(text)


__all__ = [
    "BackupDocument",
    "DEFAULT_PREFIX",
    "build_backup",
    "encode_backup",
    "parse_backup",
    "decode_backup",
    "backup_filename",
    "write_backup",
    "read_backup",
]
