"""
Tool: Friction Engine Models
Purpose: Canonical in-memory records for projects and tasks

Usage:
    from frictionpm.tasks.models import Project, Task, ProjectStatus

The serialized form (persistence and backups) uses camelCase keys:
projectId, isToday, createdAt, blockedBy, lastActivityAt. In memory an unset
"today" flag is None; on the wire it is written as ``false``.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from .friction import FrictionLevel, parse_level


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def local_date(timestamp_ms: int) -> date:
    """Calendar date of an epoch-ms timestamp in local time."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def generate_id() -> str:
    return str(uuid.uuid4())


class ProjectStatus(str, Enum):
    """Mutually exclusive project temperature."""

    HOT = "hot"
    COLD = "cold"
    IDEA = "idea"


def parse_status(value: Any) -> ProjectStatus:
    if isinstance(value, ProjectStatus):
        return value
    try:
        return ProjectStatus(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            f"Invalid project status: {value!r}. Must be one of: {[s.value for s in ProjectStatus]}"
        ) from None


@dataclass
class Project:
    id: str
    name: str
    status: ProjectStatus = ProjectStatus.HOT
    created_at: int = field(default_factory=now_ms)
    last_activity_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "createdAt": self.created_at,
        }
        if self.last_activity_at is not None:
            data["lastActivityAt"] = self.last_activity_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """Build from the serialized form. Expects already-migrated data."""
        last_activity = data.get("lastActivityAt")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            status=parse_status(data.get("status", ProjectStatus.HOT)),
            created_at=int(data.get("createdAt") or 0),
            last_activity_at=int(last_activity) if last_activity is not None else None,
        )


@dataclass
class Task:
    """
    A single task under exactly one project.

    Attributes:
        id: Opaque unique id
        project_id: Owning project (deleting it deletes the task)
        text: What to do
        friction: Friction level
        is_today: Epoch ms when picked for today, or None
        completed: Done flag; completed tasks drop out of views and blocking
        created_at: Epoch ms
        blocked_by: Id of the task this one waits on (may dangle or cycle)
    """

    id: str
    project_id: str
    text: str
    friction: FrictionLevel = FrictionLevel.LOW
    is_today: Optional[int] = None
    completed: bool = False
    created_at: int = field(default_factory=now_ms)
    blocked_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "projectId": self.project_id,
            "text": self.text,
            "friction": self.friction.value,
            "isToday": self.is_today if self.is_today is not None else False,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.blocked_by:
            data["blockedBy"] = self.blocked_by
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build from the serialized form. Expects already-migrated data."""
        is_today = data.get("isToday")
        return cls(
            id=str(data["id"]),
            project_id=str(data.get("projectId", "")),
            text=str(data.get("text", "")),
            friction=parse_level(data.get("friction", FrictionLevel.NONE)),
            # bool is an int subclass; only real timestamps count
            is_today=int(is_today) if isinstance(is_today, (int, float)) and not isinstance(is_today, bool) else None,
            completed=bool(data.get("completed", False)),
            created_at=int(data.get("createdAt") or 0),
            blocked_by=data.get("blockedBy") or None,
        )


__all__ = [
    "now_ms",
    "local_date",
    "generate_id",
    "ProjectStatus",
    "parse_status",
    "Project",
    "Task",
]
