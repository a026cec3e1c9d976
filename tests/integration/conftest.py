"""
Integration test fixtures for frictionpm.

Provides fixtures specific to integration testing:
- A CLI runner bound to a throwaway database
- Root logger isolation (the CLI installs its own stderr handler)
"""

import json
import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from frictionpm import cli


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def run_cli(temp_db: Path, capsys, restore_logging) -> Callable[..., tuple[int, dict]]:
    """Run the CLI against ``temp_db`` and return (exit code, parsed JSON)."""

    def _run(*argv: str) -> tuple[int, dict]:
        code = cli.main(["--db", str(temp_db), *argv])
        out = capsys.readouterr().out
        return code, json.loads(out)

    return _run
