"""
Tool: Friction Store
Purpose: Own the project and task collections and every operation on them

This is the single stateful object of the engine:
- Construct it, load once, call operations, let the decay runner sweep it
- Every mutation is applied to the in-memory snapshot in full, then the
  affected collection(s) are written through the persistence gateway
- Subscribers are notified after each persisted change

Operations never raise for user-facing problems. They return
``{"success": True, "data": ..., "message": ...}`` or
``{"success": False, "error": ...}`` and leave the snapshot untouched:
- empty or whitespace-only text is rejected
- ids that no longer exist are a quiet no-op (they can race with deletes)
- destructive operations accept a ``confirm`` callback; declining cancels

Usage:
    from frictionpm.tasks.manager import FrictionStore

    store = FrictionStore.open()
    result = store.create_project("Taxes", status="hot")
    project_id = result["data"]["project_id"]
    store.create_task(project_id, "find group certificate", "moderate")
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from frictionpm.automation import HOT_COOLDOWN_MS
from frictionpm.automation.decay import sweep as decay_sweep
from frictionpm.logging_config import get_logger
from frictionpm.ops.backup import (
    DEFAULT_PREFIX,
    BackupDocument,
    build_backup,
    parse_backup,
    write_backup,
)
from frictionpm.ops.migrate import migrate_projects, migrate_tasks
from frictionpm.ops.storage import PersistenceGateway

from . import friction, views
from .config_models import FrictionConfig, load_config
from .errors import NotFoundError, ValidationError
from .friction import FrictionLevel
from .models import Project, ProjectStatus, Task, generate_id, now_ms, parse_status
from .resolver import is_effectively_blocked, possible_blockers, resolve


logger = get_logger(__name__)

Confirm = Callable[[str], bool]
Subscriber = Callable[[str, Dict[str, Any]], None]

# Marks "argument not passed" where None already means "clear"
UNSET: Any = object()


def _not_found(kind: str, record_id: str) -> Dict[str, Any]:
    return {"success": False, "error": str(NotFoundError(kind, record_id))}


def _cancelled() -> Dict[str, Any]:
    return {"success": False, "error": "Cancelled by user"}


class FrictionStore:
    def __init__(
        self,
        gateway: PersistenceGateway,
        clock: Callable[[], int] = now_ms,
        cooldown_ms: int = HOT_COOLDOWN_MS,
    ):
        self.gateway = gateway
        self.clock = clock
        self.cooldown_ms = cooldown_ms
        self.projects: List[Project] = []
        self.tasks: List[Task] = []
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []

    @classmethod
    def open(
        cls,
        config: Optional[FrictionConfig] = None,
        db_path: Optional[Path] = None,
        clock: Callable[[], int] = now_ms,
    ) -> "FrictionStore":
        """Build a store from config and load the persisted snapshot."""
        config = config or load_config()
        store = cls(
            PersistenceGateway.at(db_path or config.db_path),
            clock=clock,
            cooldown_ms=config.decay.hot_cooldown_ms,
        )
        store.load()
        return store

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle / persistence
    # ─────────────────────────────────────────────────────────────────────

    def load(self) -> None:
        now = self.clock()
        with self._lock:
            self.projects = self.gateway.load_projects(now)
            self.tasks = self.gateway.load_tasks(now)
        logger.info(f"Loaded {len(self.projects)} projects and {len(self.tasks)} tasks")

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: str, payload: Dict[str, Any]) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event, payload)
            except Exception:
                logger.exception(f"Subscriber failed on {event}")

    def _commit(self, event: str, payload: Dict[str, Any], projects: bool = True, tasks: bool = True) -> None:
        if projects:
            self.gateway.save_projects(self.projects)
        if tasks:
            self.gateway.save_tasks(self.tasks)
        self._notify(event, payload)

    def _find_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def _find_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def _touch(self, project_id: str, now: int) -> None:
        project = self._find_project(project_id)
        if project:
            project.last_activity_at = now

    def _project_tasks(self, project_id: str) -> List[Task]:
        return views.tasks_for_project(project_id, self.tasks)

    # ─────────────────────────────────────────────────────────────────────
    # Projects
    # ─────────────────────────────────────────────────────────────────────

    def create_project(self, name: str, status: Union[str, ProjectStatus] = ProjectStatus.HOT) -> Dict[str, Any]:
        if not name or not name.strip():
            return {"success": False, "error": "Project name cannot be empty"}
        try:
            parsed_status = parse_status(status)
        except ValueError as e:
            return {"success": False, "error": str(e)}

        now = self.clock()
        project = Project(
            id=generate_id(),
            name=name.strip(),
            status=parsed_status,
            created_at=now,
            last_activity_at=now,
        )
        with self._lock:
            self.projects.insert(0, project)
            self._commit("project_created", {"project_id": project.id}, tasks=False)

        return {
            "success": True,
            "data": {"project_id": project.id, "project": project.to_dict()},
            "message": f"Project created with ID {project.id}",
        }

    def delete_project(self, project_id: str, confirm: Optional[Confirm] = None) -> Dict[str, Any]:
        """Delete a project and every task under it."""
        with self._lock:
            project = self._find_project(project_id)
            if not project:
                return _not_found("project", project_id)
            if confirm and not confirm(f"Delete project '{project.name}' and all tasks?"):
                return _cancelled()

            kept = [t for t in self.tasks if t.project_id != project_id]
            removed = len(self.tasks) - len(kept)
            self.projects = [p for p in self.projects if p.id != project_id]
            self.tasks = kept
            self._commit("project_deleted", {"project_id": project_id, "deleted_tasks": removed})

        return {
            "success": True,
            "data": {"project_id": project_id, "deleted_tasks": removed},
            "message": f"Project {project_id} deleted with {removed} task(s)",
        }

    def set_project_status(self, project_id: str, status: Union[str, ProjectStatus]) -> Dict[str, Any]:
        try:
            parsed_status = parse_status(status)
        except ValueError as e:
            return {"success": False, "error": str(e)}

        with self._lock:
            project = self._find_project(project_id)
            if not project:
                return _not_found("project", project_id)
            project.status = parsed_status
            project.last_activity_at = self.clock()
            self._commit("project_updated", {"project_id": project_id}, tasks=False)

        return {"success": True, "data": project.to_dict(), "message": f"Project {project_id} is now {parsed_status.value}"}

    def list_projects(self, status: Optional[str] = None) -> Dict[str, Any]:
        projects = self.projects
        if status:
            try:
                wanted = parse_status(status)
            except ValueError as e:
                return {"success": False, "error": str(e)}
            projects = [p for p in projects if p.status == wanted]
        return {"success": True, "data": {"projects": [p.to_dict() for p in projects], "total": len(projects)}}

    # ─────────────────────────────────────────────────────────────────────
    # Tasks
    # ─────────────────────────────────────────────────────────────────────

    def create_task(
        self,
        project_id: str,
        text: str,
        friction_level: Union[str, FrictionLevel] = FrictionLevel.LOW,
    ) -> Dict[str, Any]:
        if not text or not text.strip():
            return {"success": False, "error": "Task text cannot be empty"}
        try:
            level = friction.parse_level(friction_level)
        except ValueError as e:
            return {"success": False, "error": str(e)}

        with self._lock:
            if not self._find_project(project_id):
                return _not_found("project", project_id)

            now = self.clock()
            task = Task(
                id=generate_id(),
                project_id=project_id,
                text=text.strip(),
                friction=level,
                created_at=now,
            )
            self.tasks.append(task)
            self._touch(project_id, now)
            self._commit("task_created", {"task_id": task.id, "project_id": project_id})

        return {
            "success": True,
            "data": {"task_id": task.id, "task": task.to_dict()},
            "message": f"Task created with ID {task.id}",
        }

    def get_task(self, task_id: str) -> Dict[str, Any]:
        task = self._find_task(task_id)
        if not task:
            return _not_found("task", task_id)
        siblings = self._project_tasks(task.project_id)
        data = task.to_dict()
        data["effectivelyBlocked"] = is_effectively_blocked(task, siblings)
        data["frictionCost"] = friction.cost(task.friction)
        return {"success": True, "data": data}

    def toggle_completed(self, task_id: str) -> Dict[str, Any]:
        with self._lock:
            task = self._find_task(task_id)
            if not task:
                return _not_found("task", task_id)
            task.completed = not task.completed
            self._touch(task.project_id, self.clock())
            self._commit("task_updated", {"task_id": task_id})

        state = "completed" if task.completed else "reopened"
        return {"success": True, "data": task.to_dict(), "message": f"Task {task_id} {state}"}

    def delete_task(self, task_id: str, confirm: Optional[Confirm] = None) -> Dict[str, Any]:
        """
        Remove a task. Tasks that were blocked by it keep their blockedBy
        value; the dangling link is simply inert from now on.
        """
        with self._lock:
            task = self._find_task(task_id)
            if not task:
                return _not_found("task", task_id)
            if confirm and not confirm("Delete task?"):
                return _cancelled()
            self.tasks = [t for t in self.tasks if t.id != task_id]
            self._touch(task.project_id, self.clock())
            self._commit("task_deleted", {"task_id": task_id, "project_id": task.project_id})

        return {"success": True, "data": {"task_id": task_id}, "message": f"Task {task_id} deleted"}

    def toggle_today(self, task_id: str) -> Dict[str, Any]:
        """Pick a task for today (stamped with the current time) or unpick it."""
        with self._lock:
            task = self._find_task(task_id)
            if not task:
                return _not_found("task", task_id)

            now = self.clock()
            if task.is_today is None:
                if is_effectively_blocked(task, self._project_tasks(task.project_id)):
                    return {"success": False, "error": f"Task {task_id} is blocked and cannot be picked for today"}
                task.is_today = now
            else:
                task.is_today = None
            self._touch(task.project_id, now)
            self._commit("task_updated", {"task_id": task_id})

        return {"success": True, "data": task.to_dict()}

    def cycle_friction(self, task_id: str) -> Dict[str, Any]:
        with self._lock:
            task = self._find_task(task_id)
            if not task:
                return _not_found("task", task_id)
            task.friction = friction.next_level(task.friction)
            self._touch(task.project_id, self.clock())
            self._commit("task_updated", {"task_id": task_id})

        return {"success": True, "data": task.to_dict(), "message": f"Friction is now {task.friction.value}"}

    def update_task(
        self,
        task_id: str,
        text: str,
        friction_level: Union[str, FrictionLevel],
        blocked_by: Optional[str] = UNSET,
    ) -> Dict[str, Any]:
        """
        Overwrite text and friction; optionally change the blocker.

        Args:
            task_id: Task to edit
            text: New text (required, non-empty)
            friction_level: New friction level
            blocked_by: Leave out to keep the current blocker, pass None or ""
                to clear it, or a task id to set it. A task left with a
                blocker is always taken off today.
        """
        if not text or not text.strip():
            return {"success": False, "error": "Task text cannot be empty"}
        try:
            level = friction.parse_level(friction_level)
        except ValueError as e:
            return {"success": False, "error": str(e)}

        with self._lock:
            task = self._find_task(task_id)
            if not task:
                return _not_found("task", task_id)

            if blocked_by is not UNSET:
                task.blocked_by = blocked_by or None
            task.text = text.strip()
            task.friction = level
            if task.blocked_by:
                task.is_today = None
            self._touch(task.project_id, self.clock())
            self._commit("task_updated", {"task_id": task_id})

        return {"success": True, "data": task.to_dict(), "message": f"Task {task_id} updated"}

    def possible_blockers(self, task_id: str) -> Dict[str, Any]:
        task = self._find_task(task_id)
        if not task:
            return _not_found("task", task_id)
        candidates = possible_blockers(task, self._project_tasks(task.project_id))
        return {"success": True, "data": {"blockers": [t.to_dict() for t in candidates]}}

    # ─────────────────────────────────────────────────────────────────────
    # Views
    # ─────────────────────────────────────────────────────────────────────

    def project_tree(self, project_id: str) -> Dict[str, Any]:
        project = self._find_project(project_id)
        if not project:
            return _not_found("project", project_id)
        forest = resolve(self._project_tasks(project_id))
        rows = [
            {"task": row["task"].to_dict(), "depth": row["depth"], "orphan": row["orphan"]}
            for row in forest.flatten()
        ]
        return {"success": True, "data": {"project": project.to_dict(), "tree": forest.to_dict(), "rows": rows}}

    def board(self) -> Dict[str, Any]:
        return {"success": True, "data": views.board(self.projects, self.tasks)}

    def today(self) -> Dict[str, Any]:
        focus = views.today_focus(self.tasks)
        return {"success": True, "data": {"tasks": [t.to_dict() for t in focus], "total": len(focus)}}

    # ─────────────────────────────────────────────────────────────────────
    # Decay
    # ─────────────────────────────────────────────────────────────────────

    def sweep(self, now: Optional[int] = None) -> Dict[str, Any]:
        """Run one decay pass; writes only when something changed."""
        with self._lock:
            when = now if now is not None else self.clock()
            result = decay_sweep(when, self.projects, self.tasks, self.cooldown_ms)
            if result.changed:
                self.projects = result.projects
                self.tasks = result.tasks
                self._commit("decayed", result.summary())
                logger.info(
                    f"Decay sweep: {len(result.cooled)} project(s) cooled, "
                    f"{len(result.expired)} today pick(s) expired"
                )

        return {"success": True, "data": result.summary()}

    # ─────────────────────────────────────────────────────────────────────
    # Backup
    # ─────────────────────────────────────────────────────────────────────

    def export_snapshot(self) -> BackupDocument:
        with self._lock:
            return build_backup(self.projects, self.tasks, self.clock())

    def export_backup(self, dest_dir: Optional[Path] = None, prefix: str = DEFAULT_PREFIX) -> Dict[str, Any]:
        doc = self.export_snapshot()
        path = write_backup(doc, dest_dir=dest_dir, prefix=prefix)
        return {
            "success": True,
            "data": {"path": str(path), "projects": len(doc.projects), "tasks": len(doc.tasks)},
            "message": f"Backup written to {path}",
        }

    def import_backup(
        self,
        document: Union[BackupDocument, Dict[str, Any], Any],
        confirm: Optional[Confirm] = None,
    ) -> Dict[str, Any]:
        """Replace both collections with the contents of a backup document."""
        now = self.clock()
        try:
            doc = document if isinstance(document, BackupDocument) else parse_backup(document)
            # every record must survive migration or nothing is replaced
            projects = migrate_projects(doc.projects, now, strict=True)
            tasks = migrate_tasks(doc.tasks, now, strict=True)
        except ValidationError as e:
            logger.warning(f"Import rejected: {e}")
            return {"success": False, "error": str(e)}

        message = (
            f"Importing will replace current data with {len(projects)} projects "
            f"and {len(tasks)} tasks. Continue?"
        )
        if confirm and not confirm(message):
            return _cancelled()

        with self._lock:
            self.projects = projects
            self.tasks = tasks
            self._commit("imported", {"projects": len(projects), "tasks": len(tasks)})

        return {
            "success": True,
            "data": {"projects": len(projects), "tasks": len(tasks)},
            "message": "Import successful!",
        }


__all__ = ["FrictionStore", "UNSET"]
