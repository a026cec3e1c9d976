"""
Tool: Decay Sweep
Purpose: Let neglected state cool down on its own

Rules, applied per record:
- A hot project with no activity for more than the cooldown (7 days by
  default) turns cold. Cold and idea projects are never touched.
- A task picked for today on an earlier local calendar day, and still open,
  loses its today flag and its friction goes up one level (capped at high).

Both rules consume their own trigger (status is no longer hot, isToday is
unset), so running the sweep again at the same or a later time changes
nothing. That is what lets the runner call it on a timer without looping.

The sweep never touches lastActivityAt; decay is not activity.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Sequence

from frictionpm.automation import HOT_COOLDOWN_MS
from frictionpm.tasks import friction
from frictionpm.tasks.models import Project, ProjectStatus, Task, local_date


@dataclass
class SweepResult:
    changed: bool
    projects: List[Project]
    tasks: List[Task]
    cooled: List[str] = field(default_factory=list)
    expired: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "changed": self.changed,
            "cooled_projects": list(self.cooled),
            "expired_today": list(self.expired),
        }


def should_cool(project: Project, now: int, cooldown_ms: int = HOT_COOLDOWN_MS) -> bool:
    return (
        project.status == ProjectStatus.HOT
        and project.last_activity_at is not None
        and now - project.last_activity_at > cooldown_ms
    )


def today_expired(task: Task, now: int) -> bool:
    return (
        task.is_today is not None
        and not task.completed
        and local_date(task.is_today) != local_date(now)
    )


def sweep(
    now: int,
    projects: Sequence[Project],
    tasks: Sequence[Task],
    cooldown_ms: int = HOT_COOLDOWN_MS,
) -> SweepResult:
    """
    One decay pass over a snapshot. Pure: inputs are not modified.

    Args:
        now: Epoch ms to evaluate against
        projects: Current projects
        tasks: Current tasks
        cooldown_ms: Inactivity after which a hot project cools

    Returns:
        SweepResult with new lists; unchanged records are passed through as-is
    """
    cooled: List[str] = []
    expired: List[str] = []

    new_projects: List[Project] = []
    for project in projects:
        if should_cool(project, now, cooldown_ms):
            new_projects.append(replace(project, status=ProjectStatus.COLD))
            cooled.append(project.id)
        else:
            new_projects.append(project)

    new_tasks: List[Task] = []
    for task in tasks:
        if today_expired(task, now):
            new_tasks.append(replace(task, is_today=None, friction=friction.escalate(task.friction)))
            expired.append(task.id)
        else:
            new_tasks.append(task)

    return SweepResult(
        changed=bool(cooled or expired),
        projects=new_projects,
        tasks=new_tasks,
        cooled=cooled,
        expired=expired,
    )


__all__ = ["SweepResult", "should_cool", "today_expired", "sweep"]
