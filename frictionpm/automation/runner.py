"""
Tool: Decay Runner
Purpose: Drive the decay sweep against a live store

Features:
- Initial pass on start, then one pass per interval
- Passes that change nothing do not write
- stop() wakes the loop immediately instead of waiting out the interval

Usage:
    python -m frictionpm.cli run
    python -m frictionpm.cli run --interval 5

Dependencies:
    - asyncio (stdlib)
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING, Any

from frictionpm.automation import SWEEP_INTERVAL_SECONDS
from frictionpm.logging_config import get_logger

if TYPE_CHECKING:
    from frictionpm.tasks.manager import FrictionStore


logger = get_logger(__name__)


class DecayRunner:
    def __init__(self, store: "FrictionStore", interval_seconds: float = SWEEP_INTERVAL_SECONDS):
        self.store = store
        self.interval_seconds = interval_seconds
        self.running = False
        self.status: dict[str, Any] = {"passes": 0, "changes": 0, "errors": 0, "last_run": None}
        self._stop_event: asyncio.Event | None = None

    def run_once(self) -> dict[str, Any]:
        result = self.store.sweep()
        self.status["passes"] += 1
        if result["data"]["changed"]:
            self.status["changes"] += 1
        self.status["last_run"] = datetime.now().isoformat()
        return result

    async def start(self) -> bool:
        """Run until stop() is called. Returns True on a clean shutdown."""
        if self.running:
            return False

        self.running = True
        self._stop_event = asyncio.Event()
        logger.info(f"Decay runner started (every {self.interval_seconds}s)")

        while self.running:
            try:
                self.run_once()
            except Exception as e:
                self.status["errors"] += 1
                logger.error(f"Decay sweep failed: {e}")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

        logger.info("Decay runner stopped")
        return True

    def stop(self) -> None:
        self.running = False
        if self._stop_event is not None:
            self._stop_event.set()


__all__ = ["DecayRunner"]
