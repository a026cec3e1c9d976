"""
Tool: Dependency Resolver
Purpose: Turn a flat list of open tasks into an actionable forest

A task is effectively blocked only while its blocker is an open task in the
same set. Completed or missing blockers leave the stored link in place but
inert. Tasks that can't be reached from an unblocked root (cycles, chains
hanging off a cycle, self-references) come back as orphans so nothing is
ever hidden.

Nothing here mutates; the forest is recomputed from the snapshot on every
read.

Usage:
    from frictionpm.tasks.resolver import resolve

    forest = resolve(project_tasks)
    for row in forest.flatten():
        print("  " * row["depth"] + row["task"].text)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from . import friction
from .models import Task


@dataclass
class TaskNode:
    task: Task
    depth: int
    children: List["TaskNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task": self.task.to_dict(),
            "depth": self.depth,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class TaskForest:
    roots: List[TaskNode] = field(default_factory=list)
    orphans: List[Task] = field(default_factory=list)
    suggestion: Optional[Task] = None

    def flatten(self) -> List[Dict[str, Any]]:
        """Depth-first rows for display; orphans follow at depth 0."""
        rows: List[Dict[str, Any]] = []
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            rows.append({"task": node.task, "depth": node.depth, "orphan": False})
            stack.extend(reversed(node.children))
        for orphan in self.orphans:
            rows.append({"task": orphan, "depth": 0, "orphan": True})
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roots": [root.to_dict() for root in self.roots],
            "orphans": [orphan.to_dict() for orphan in self.orphans],
            "suggestion": self.suggestion.to_dict() if self.suggestion else None,
        }


def open_tasks(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if not t.completed]


def is_effectively_blocked(task: Task, tasks: Iterable[Task]) -> bool:
    """
    True when task.blocked_by names an open task in ``tasks``.

    ``tasks`` should be the task's own project; a blocker outside it is
    treated as not found.
    """
    if not task.blocked_by:
        return False
    for candidate in tasks:
        if candidate.id == task.blocked_by:
            return not candidate.completed
    return False


def unblocked_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Open tasks with no live blocker."""
    pending = open_tasks(tasks)
    open_ids = {t.id for t in pending}
    return [t for t in pending if not (t.blocked_by and t.blocked_by in open_ids)]


def lowest_friction_task(tasks: Iterable[Task]) -> Optional[Task]:
    """Cheapest unblocked open task, oldest first on ties."""
    candidates = unblocked_tasks(tasks)
    if not candidates:
        return None
    return min(candidates, key=lambda t: (friction.cost(t.friction), t.created_at))


def possible_blockers(task: Task, tasks: Iterable[Task]) -> List[Task]:
    """Open tasks of the same project that ``task`` could wait on."""
    return [t for t in open_tasks(tasks) if t.id != task.id and t.project_id == task.project_id]


def resolve(tasks: Iterable[Task]) -> TaskForest:
    """
    Build the forest for one project's tasks.

    Completed tasks are dropped first. Roots (unblocked open tasks) are
    ordered oldest-first; each root pulls in the open tasks blocked by it,
    depth-first. Anything never reached is an orphan.
    """
    pending = open_tasks(tasks)
    open_ids = {t.id for t in pending}

    children_of: Dict[str, List[Task]] = {}
    for t in pending:
        if t.blocked_by:
            children_of.setdefault(t.blocked_by, []).append(t)
    for siblings in children_of.values():
        siblings.sort(key=lambda t: t.created_at)

    roots = [t for t in pending if not (t.blocked_by and t.blocked_by in open_ids)]
    roots.sort(key=lambda t: t.created_at)

    visited: Set[str] = set()
    forest = TaskForest()

    for root in roots:
        if root.id in visited:
            continue
        root_node = TaskNode(task=root, depth=0)
        visited.add(root.id)
        stack = [root_node]
        while stack:
            node = stack.pop()
            for child in children_of.get(node.task.id, []):
                if child.id in visited:
                    continue
                visited.add(child.id)
                child_node = TaskNode(task=child, depth=node.depth + 1)
                node.children.append(child_node)
                stack.append(child_node)
        forest.roots.append(root_node)

    forest.orphans = [t for t in pending if t.id not in visited]
    forest.suggestion = lowest_friction_task(pending)
    return forest


__all__ = [
    "TaskNode",
    "TaskForest",
    "open_tasks",
    "is_effectively_blocked",
    "unblocked_tasks",
    "lowest_friction_task",
    "possible_blockers",
    "resolve",
]
