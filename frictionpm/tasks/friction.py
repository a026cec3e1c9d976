"""
Tool: Friction Model
Purpose: Fixed lookup of friction levels, their costs and ordering

Levels are ordered none < low < moderate < high with costs 0, 1, 3, 5.
Cycling wraps around (used by the "tap to change" action), escalation
saturates at high (used when a today pick goes stale).

Usage:
    from frictionpm.tasks.friction import FrictionLevel, cost, next_level, escalate

    cost(FrictionLevel.MODERATE)     # 3
    next_level(FrictionLevel.HIGH)   # FrictionLevel.NONE
    escalate(FrictionLevel.HIGH)     # FrictionLevel.HIGH
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class FrictionLevel(str, Enum):
    """How much resistance a task puts up before you start it."""

    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class FrictionInfo:
    label: str
    score: int


FRICTION_CONFIG: Dict[FrictionLevel, FrictionInfo] = {
    FrictionLevel.NONE: FrictionInfo(label="None", score=0),
    FrictionLevel.LOW: FrictionInfo(label="Low", score=1),
    FrictionLevel.MODERATE: FrictionInfo(label="Mod", score=3),
    FrictionLevel.HIGH: FrictionInfo(label="High", score=5),
}

ORDER: Tuple[FrictionLevel, ...] = (
    FrictionLevel.NONE,
    FrictionLevel.LOW,
    FrictionLevel.MODERATE,
    FrictionLevel.HIGH,
)


def parse_level(value: Union[str, FrictionLevel]) -> FrictionLevel:
    """Coerce a stored or user-entered value. Raises ValueError if unknown."""
    if isinstance(value, FrictionLevel):
        return value
    try:
        return FrictionLevel(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            f"Invalid friction level: {value!r}. Must be one of: {[lvl.value for lvl in ORDER]}"
        ) from None


def cost(level: Union[str, FrictionLevel]) -> int:
    return FRICTION_CONFIG[parse_level(level)].score


def label(level: Union[str, FrictionLevel]) -> str:
    return FRICTION_CONFIG[parse_level(level)].label


def rank(level: Union[str, FrictionLevel]) -> int:
    """Position in the none..high ordering."""
    return ORDER.index(parse_level(level))


def next_level(level: Union[str, FrictionLevel]) -> FrictionLevel:
    """Cyclic successor: none -> low -> moderate -> high -> none."""
    return ORDER[(rank(level) + 1) % len(ORDER)]


def escalate(level: Union[str, FrictionLevel]) -> FrictionLevel:
    """One step up, capped at high."""
    return ORDER[min(rank(level) + 1, len(ORDER) - 1)]


__all__ = [
    "FrictionLevel",
    "FrictionInfo",
    "FRICTION_CONFIG",
    "ORDER",
    "parse_level",
    "cost",
    "label",
    "rank",
    "next_level",
    "escalate",
]
