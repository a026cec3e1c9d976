"""
Read-only summaries over a snapshot: the status board, today's focus list
and friction totals. Pure functions of (projects, tasks).
"""

from typing import Any, Dict, Iterable, List, Sequence

from . import friction
from .friction import FrictionLevel
from .models import Project, ProjectStatus, Task
from .resolver import lowest_friction_task, open_tasks, resolve


def tasks_for_project(project_id: str, tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.project_id == project_id]


def friction_score(tasks: Iterable[Task]) -> int:
    """Sum of friction costs over open tasks."""
    return sum(friction.cost(t.friction) for t in open_tasks(tasks))


def friction_floor(tasks: Iterable[Task]) -> FrictionLevel:
    """Friction of the cheapest unblocked open task; none when there is nothing to do."""
    best = lowest_friction_task(tasks)
    return best.friction if best else FrictionLevel.NONE


def today_focus(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.is_today is not None and not t.completed]


def project_summary(project: Project, tasks: Sequence[Task]) -> Dict[str, Any]:
    own = tasks_for_project(project.id, tasks)
    forest = resolve(own)
    floor = friction_floor(own)
    return {
        "project": project.to_dict(),
        "friction_score": friction_score(own),
        "friction_floor": floor.value,
        "friction_floor_label": friction.label(floor),
        "open_count": len(open_tasks(own)),
        "completed": [t.to_dict() for t in own if t.completed],
        "tree": forest.to_dict(),
    }


def board(projects: Sequence[Project], tasks: Sequence[Task]) -> Dict[str, Any]:
    """Projects grouped by status, newest first within each group."""
    columns: Dict[str, List[Dict[str, Any]]] = {}
    for status in ProjectStatus:
        members = sorted(
            (p for p in projects if p.status == status),
            key=lambda p: p.created_at,
            reverse=True,
        )
        columns[status.value] = [project_summary(p, tasks) for p in members]

    return {
        "columns": columns,
        "today": [t.to_dict() for t in today_focus(tasks)],
        "total_friction": friction_score(tasks),
    }


__all__ = [
    "tasks_for_project",
    "friction_score",
    "friction_floor",
    "today_focus",
    "project_summary",
    "board",
]
