"""
Shared data structures for the BIOMON crew monitor.

These structures are used by the tables, the roll engine and the session
state. Everything here is plain data: no module owns game state, the
session aggregate is always passed in explicitly.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from collections import deque
import math
import random
import time
import uuid


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_MAX_HEALTH = 5
MAX_HEALTH_CAP = 10
MAX_STRESS = 10
MAX_RESOLVE = 10

MIN_MODIFIER = -10
MAX_MODIFIER = 10

ROLL_FEED_CAP = 200
MISSION_LOG_CAP = 100

MAX_NAME_LENGTH = 40

# Upper bound for stored epoch-ms timestamps (year 9999)
MAX_TIMESTAMP = 253_402_300_799_000


# =============================================================================
# ENUMS
# =============================================================================


class RollType(str, Enum):
    """The two response tables a crew member can roll against."""
    STRESS = "stress"
    PANIC = "panic"

    @classmethod
    def coerce(cls, value: Any) -> "RollType":
        """Anything that is not explicitly a panic roll is a stress roll."""
        if isinstance(value, RollType):
            return value
        return cls.PANIC if str(value or "").strip().lower() == "panic" else cls.STRESS


class DurationType(str, Enum):
    """How long a persistent condition lasts before the GM clears it."""
    MANUAL = "manual"
    SCENE = "scene"
    ROUND = "round"
    SHIFT = "shift"


class LogEntryType(str, Enum):
    """Categories for mission log entries."""
    INFO = "info"
    STRESS = "stress"
    PANIC = "panic"
    HEALTH = "health"
    SYSTEM = "system"


# =============================================================================
# INPUT COERCION
# =============================================================================


def clamp(value: Any, lo: float, hi: float) -> float:
    """
    Clamp a value between lo and hi.

    Strings are converted to numbers; anything non-numeric (or NaN)
    collapses to the lower bound.
    """
    try:
        n = float(value)
    except (TypeError, ValueError):
        return lo
    if math.isnan(n):
        return lo
    return max(lo, min(hi, n))


def clamp_int(value: Any, lo: int, hi: int) -> int:
    """Clamp a value between lo and hi, truncating toward zero."""
    return int(math.trunc(clamp(value, lo, hi)))


def new_id() -> str:
    """Generate an opaque unique identifier."""
    return uuid.uuid4().hex


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


def coerce_timestamp(value: Any) -> int:
    """Epoch-ms timestamp from stored data; junk reads as 0."""
    return clamp_int(value, 0, MAX_TIMESTAMP)


# =============================================================================
# DICE
# =============================================================================


class DiceRoller:
    """
    Randomization interface for the roll engine.

    All dice rolls go through an instance of this class so that a session
    can be seeded for reproducibility and recent rolls can be inspected.
    Each engine owns its own roller; there is no process-wide random state.
    The roll log keeps only the most recent rolls, like the roll feed.
    """

    def __init__(self, seed: Optional[int] = None, log_cap: int = ROLL_FEED_CAP):
        self._rng = random.Random(seed)
        self._roll_log: deque[DiceResult] = deque(maxlen=log_cap)

    def roll_d6(self, num_dice: int = 1, reason: str = "") -> "DiceResult":
        """
        Roll one or more d6.

        Args:
            num_dice: How many d6 to roll
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total
        """
        rolls = [self._rng.randint(1, 6) for _ in range(num_dice)]
        result = DiceResult(
            notation=f"{num_dice}d6",
            rolls=rolls,
            total=sum(rolls),
            reason=reason,
        )
        self._roll_log.append(result)
        return result

    def get_roll_log(self) -> list:
        """Get the recent rolls, oldest first."""
        return list(self._roll_log)

    def clear_roll_log(self) -> None:
        """Clear the roll log."""
        self._roll_log.clear()


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.notation}: {self.rolls} = {self.total}"


# =============================================================================
# ACTIVE EFFECTS
# =============================================================================


@dataclass
class ActiveEffect:
    """
    A standing condition on a crew member.

    Effects are never deleted. Clearing stamps cleared_at once and the
    effect stays in the list as history; a later identical result creates
    a new effect instead of reviving this one.
    """
    effect_id: str
    type: str                              # TableEntry id, or condition_<name>
    label: str
    severity: int
    created_at: int
    duration_type: DurationType = DurationType.MANUAL
    duration_value: Optional[Any] = None
    cleared_at: Optional[int] = None

    @property
    def is_live(self) -> bool:
        return self.cleared_at is None

    def clear(self, timestamp: int) -> bool:
        """Soft-clear the effect. Returns False if it was already cleared."""
        if self.cleared_at is not None:
            return False
        self.cleared_at = timestamp
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.effect_id,
            "type": self.type,
            "label": self.label,
            "severity": self.severity,
            "created_at": self.created_at,
            "duration_type": self.duration_type.value,
            "duration_value": self.duration_value,
            "cleared_at": self.cleared_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActiveEffect":
        try:
            duration_type = DurationType(data.get("duration_type", "manual"))
        except ValueError:
            duration_type = DurationType.MANUAL
        cleared_at = data.get("cleared_at")
        if cleared_at is not None:
            cleared_at = coerce_timestamp(cleared_at)
        return cls(
            effect_id=str(data.get("id") or new_id()),
            type=str(data.get("type") or ""),
            label=str(data.get("label") or ""),
            severity=clamp_int(data.get("severity", 1), 1, 5),
            created_at=coerce_timestamp(data.get("created_at")),
            duration_type=duration_type,
            duration_value=data.get("duration_value"),
            cleared_at=cleared_at,
        )
