"""
Automation - state that changes without anyone touching it

Components:
    decay.py: Pure, idempotent decay sweep (hot -> cold, stale today picks)
    runner.py: Periodic runner driving the sweep against a store

Usage:
    # Run the sweeper in the foreground
    python -m frictionpm.cli run

    # One pass, from code
    from frictionpm.automation.decay import sweep
    result = sweep(now, projects, tasks)
"""

from frictionpm.tasks import HOT_COOLDOWN_DAYS, SWEEP_INTERVAL_SECONDS

DAY_MS = 24 * 60 * 60 * 1000
HOT_COOLDOWN_MS = HOT_COOLDOWN_DAYS * DAY_MS

__all__ = [
    "DAY_MS",
    "HOT_COOLDOWN_MS",
    "SWEEP_INTERVAL_SECONDS",
]
