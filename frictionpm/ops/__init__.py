"""
Friction PM Operations Module

Persistence gateway (SQLite key-value store), legacy record migration and
backup export/import.
"""

from frictionpm.tasks import PROJECT_ROOT


BACKUP_DIR = PROJECT_ROOT / "backups"
KV_TABLE = "kv_store"

__all__ = [
    "BACKUP_DIR",
    "KV_TABLE",
    "PROJECT_ROOT",
]
