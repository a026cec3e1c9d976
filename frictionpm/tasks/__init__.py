"""Friction Engine - project/task state with friction, blockers and decay

Philosophy:
    A task list lies about effort. "Call the bank" and "rename a file" look
    the same on paper. Every task here carries a friction cost, may be blocked
    by another task, and quietly gets harder if you pick it for today and then
    let the day pass.

Components:
    models.py: Project and Task records (canonical in-memory schema)
    friction.py: Friction levels, costs and level cycling
    resolver.py: Turns a flat task list into an actionable tree (cycle-safe)
    views.py: Board, today's focus and friction summaries
    manager.py: FrictionStore - every project/task operation, persisted
    config_models.py: args/frictionpm.yaml schema
    errors.py: ValidationError / NotFoundError / ParseError

Usage:
    from frictionpm.tasks.manager import FrictionStore

    store = FrictionStore.open()
    project = store.create_project("Garden shed", status="hot")
    task = store.create_task(project["data"]["project_id"], "buy screws", "low")
    print(store.project_tree(project["data"]["project_id"])["data"])
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent.parent
ARGS_DIR = PROJECT_ROOT / "args"
DATA_DIR = PROJECT_ROOT / "data"
DB_PATH = DATA_DIR / "frictionpm.db"
CONFIG_PATH = ARGS_DIR / "frictionpm.yaml"

# Valid values, in their canonical order
FRICTION_LEVELS = ("none", "low", "moderate", "high")
PROJECT_STATUSES = ("hot", "cold", "idea")

# Persistence keys
PROJECTS_KEY = "projects"
TASKS_KEY = "tasks"

# Decay defaults
HOT_COOLDOWN_DAYS = 7
SWEEP_INTERVAL_SECONDS = 60

__all__ = [
    "PROJECT_ROOT",
    "ARGS_DIR",
    "DATA_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "FRICTION_LEVELS",
    "PROJECT_STATUSES",
    "PROJECTS_KEY",
    "TASKS_KEY",
    "HOT_COOLDOWN_DAYS",
    "SWEEP_INTERVAL_SECONDS",
]
