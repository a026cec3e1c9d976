#!/usr/bin/env python3
"""
Friction PM Command Line Interface

Main entry point for the `frictionpm` command.

Usage:
    frictionpm project add "Garden shed" --status hot
    frictionpm project list --status hot
    frictionpm task add <project_id> "buy screws" --friction low
    frictionpm task edit <task_id> "buy brass screws" --friction moderate --blocked-by <other_id>
    frictionpm task today <task_id>
    frictionpm tree <project_id>
    frictionpm board
    frictionpm sweep
    frictionpm export
    frictionpm import backups/friction-pm-backup-2024-06-10.json --yes
    frictionpm run                 # decay sweeper in the foreground
"""

import argparse
import asyncio
import contextlib
import json
import signal
import sys
from pathlib import Path

from frictionpm.automation.runner import DecayRunner
from frictionpm.logging_config import bind_context, setup_logging
from frictionpm.ops.backup import read_backup
from frictionpm.tasks import FRICTION_LEVELS, PROJECT_STATUSES
from frictionpm.tasks.config_models import load_config
from frictionpm.tasks.errors import ValidationError
from frictionpm.tasks.manager import UNSET, FrictionStore


def _confirmer(assume_yes: bool):
    if assume_yes:
        return None

    def confirm(message: str) -> bool:
        try:
            answer = input(f"{message} [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in {"y", "yes"}

    return confirm


def cmd_project(store: FrictionStore, args, config) -> dict:
    if args.project_action == "add":
        return store.create_project(args.name, status=args.status or config.defaults.project_status)
    if args.project_action == "list":
        return store.list_projects(status=args.status)
    if args.project_action == "status":
        return store.set_project_status(args.project_id, args.status)
    if args.project_action == "delete":
        return store.delete_project(args.project_id, confirm=_confirmer(args.yes))
    return {"success": False, "error": f"Unknown project action: {args.project_action}"}


def cmd_task(store: FrictionStore, args, config) -> dict:
    action = args.task_action
    if action == "add":
        return store.create_task(args.project_id, args.text, args.friction or config.defaults.task_friction)
    if action == "get":
        return store.get_task(args.task_id)
    if action == "toggle":
        return store.toggle_completed(args.task_id)
    if action == "today":
        return store.toggle_today(args.task_id)
    if action == "friction":
        return store.cycle_friction(args.task_id)
    if action == "blockers":
        return store.possible_blockers(args.task_id)
    if action == "delete":
        return store.delete_task(args.task_id, confirm=_confirmer(args.yes))
    if action == "edit":
        current = store.get_task(args.task_id)
        if not current["success"]:
            return current
        blocked_by = UNSET
        if args.unblock:
            blocked_by = None
        elif args.blocked_by is not None:
            blocked_by = args.blocked_by
        return store.update_task(
            args.task_id,
            args.text if args.text is not None else current["data"]["text"],
            args.friction or current["data"]["friction"],
            blocked_by,
        )
    return {"success": False, "error": f"Unknown task action: {action}"}


def cmd_import(store: FrictionStore, args) -> dict:
    try:
        doc = read_backup(Path(args.path))
    except ValidationError as e:
        return {"success": False, "error": str(e)}
    return store.import_backup(doc, confirm=_confirmer(args.yes))


DECAY_DISABLED = {"success": False, "error": "Decay is disabled in config (decay.enabled: false)"}


def cmd_sweep(store: FrictionStore, config) -> dict:
    if not config.decay.enabled:
        return dict(DECAY_DISABLED)
    return store.sweep()


def cmd_run(store: FrictionStore, args, config) -> dict:
    if not config.decay.enabled:
        return dict(DECAY_DISABLED)
    interval = args.interval or config.decay.sweep_interval_seconds
    runner = DecayRunner(store, interval_seconds=interval)

    async def _main() -> bool:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            # add_signal_handler is unavailable on some platforms
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, runner.stop)
        return await runner.start()

    clean = asyncio.run(_main())
    return {"success": clean, "data": runner.status}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frictionpm", description="Friction-aware project/task tracker")
    parser.add_argument("--db", help="SQLite database path (overrides config)")
    parser.add_argument("--config", help="Path to a frictionpm.yaml config file")
    sub = parser.add_subparsers(dest="command")

    # project
    project = sub.add_parser("project", help="Manage projects")
    project_sub = project.add_subparsers(dest="project_action")
    p_add = project_sub.add_parser("add", help="Create a project")
    p_add.add_argument("name")
    p_add.add_argument("--status", choices=PROJECT_STATUSES)
    p_list = project_sub.add_parser("list", help="List projects")
    p_list.add_argument("--status", choices=PROJECT_STATUSES)
    p_status = project_sub.add_parser("status", help="Change project status")
    p_status.add_argument("project_id")
    p_status.add_argument("status", choices=PROJECT_STATUSES)
    p_delete = project_sub.add_parser("delete", help="Delete a project and its tasks")
    p_delete.add_argument("project_id")
    p_delete.add_argument("--yes", action="store_true", help="Skip confirmation")

    # task
    task = sub.add_parser("task", help="Manage tasks")
    task_sub = task.add_subparsers(dest="task_action")
    t_add = task_sub.add_parser("add", help="Create a task")
    t_add.add_argument("project_id")
    t_add.add_argument("text")
    t_add.add_argument("--friction", choices=FRICTION_LEVELS)
    for name, help_text in (
        ("get", "Show a task"),
        ("toggle", "Toggle completed"),
        ("today", "Toggle today's pick"),
        ("friction", "Cycle friction level"),
        ("blockers", "List possible blockers"),
    ):
        task_sub.add_parser(name, help=help_text).add_argument("task_id")
    t_delete = task_sub.add_parser("delete", help="Delete a task")
    t_delete.add_argument("task_id")
    t_delete.add_argument("--yes", action="store_true", help="Skip confirmation")
    t_edit = task_sub.add_parser("edit", help="Edit text, friction or blocker")
    t_edit.add_argument("task_id")
    t_edit.add_argument("text", nargs="?")
    t_edit.add_argument("--friction", choices=FRICTION_LEVELS)
    t_edit.add_argument("--blocked-by", help="Id of the task this one waits on")
    t_edit.add_argument("--unblock", action="store_true", help="Clear the blocker")

    # views
    tree = sub.add_parser("tree", help="Show a project's task tree")
    tree.add_argument("project_id")
    sub.add_parser("board", help="Show all projects grouped by status")
    sub.add_parser("today", help="Show today's focus")

    # decay / backup
    sub.add_parser("sweep", help="Run one decay pass")
    run = sub.add_parser("run", help="Run the decay sweeper until interrupted")
    run.add_argument("--interval", type=float, help="Seconds between passes")
    export = sub.add_parser("export", help="Write a backup file")
    export.add_argument("--dest", help="Directory for the backup file")
    imp = sub.add_parser("import", help="Replace all data with a backup file")
    imp.add_argument("path")
    imp.add_argument("--yes", action="store_true", help="Skip confirmation")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging()
    bind_context(command=args.command)
    config = load_config(Path(args.config) if args.config else None)
    store = FrictionStore.open(config, db_path=Path(args.db) if args.db else None)

    if args.command == "project":
        result = cmd_project(store, args, config)
    elif args.command == "task":
        result = cmd_task(store, args, config)
    elif args.command == "tree":
        result = store.project_tree(args.project_id)
    elif args.command == "board":
        result = store.board()
    elif args.command == "today":
        result = store.today()
    elif args.command == "sweep":
        result = cmd_sweep(store, config)
    elif args.command == "run":
        result = cmd_run(store, args, config)
    elif args.command == "export":
        dest = Path(args.dest) if args.dest else config.backup_dir
        result = store.export_backup(dest, prefix=config.backup.filename_prefix)
    elif args.command == "import":
        result = cmd_import(store, args)
    else:
        parser.print_help()
        return 0

    print(json.dumps(result, indent=2, default=str))
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
