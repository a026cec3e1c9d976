"""Friction PM Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - tasks/: Friction model, resolver, views, models, config, store
  - automation/: Decay sweep and runner
  - ops/: Key-value store, persistence gateway, migration, backups
- integration/: End-to-end flows through the store, persistence and CLI

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/tasks/
"""
