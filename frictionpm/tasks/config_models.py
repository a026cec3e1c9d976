from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from frictionpm.logging_config import get_logger

from . import CONFIG_PATH, FRICTION_LEVELS, HOT_COOLDOWN_DAYS, PROJECT_ROOT, PROJECT_STATUSES, SWEEP_INTERVAL_SECONDS

logger = get_logger(__name__)


# =============================================================================
# FrictionConfig (args/frictionpm.yaml)
# =============================================================================

class DecayConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=True)
    sweep_interval_seconds: float = Field(default=SWEEP_INTERVAL_SECONDS, gt=0)
    hot_cooldown_days: float = Field(default=HOT_COOLDOWN_DAYS, gt=0)

    @property
    def hot_cooldown_ms(self) -> int:
        return int(self.hot_cooldown_days * 24 * 60 * 60 * 1000)


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    db_path: str = Field(default="data/frictionpm.db")


class BackupConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    directory: str = Field(default="backups")
    filename_prefix: str = Field(default="friction-pm-backup")


class DefaultsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    project_status: str = Field(default="hot")
    task_friction: str = Field(default="low")

    @field_validator("project_status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        if value not in PROJECT_STATUSES:
            raise ValueError(f"project_status must be one of {PROJECT_STATUSES}")
        return value

    @field_validator("task_friction")
    @classmethod
    def _known_friction(cls, value: str) -> str:
        if value not in FRICTION_LEVELS:
            raise ValueError(f"task_friction must be one of {FRICTION_LEVELS}")
        return value


class FrictionConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    decay: DecayConfig = Field(default_factory=DecayConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    def resolve_path(self, value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else PROJECT_ROOT / path

    @property
    def db_path(self) -> Path:
        override = os.environ.get("FRICTIONPM_DB_PATH")
        return self.resolve_path(override or self.storage.db_path)

    @property
    def backup_dir(self) -> Path:
        return self.resolve_path(self.backup.directory)


def load_config(path: Optional[Path] = None) -> FrictionConfig:
    """Read and validate the YAML config, falling back to defaults."""
    yaml_path = path or CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return FrictionConfig.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path.name}: {e}, using defaults")
        return FrictionConfig()


__all__ = [
    "DecayConfig",
    "StorageConfig",
    "BackupConfig",
    "DefaultsConfig",
    "FrictionConfig",
    "load_config",
]
