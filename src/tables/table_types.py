"""
Table type definitions for the BIOMON response tables.

A response table maps a roll total onto an outcome. Entries are keyed by
inclusive integer ranges; a well-formed table covers every total the
engine can produce without gaps or overlaps.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from src.data_models import DurationType, RollType, clamp_int


# Every table must resolve at least this span of totals.
COVERAGE_MIN = -999
COVERAGE_MAX = 999


class TableValidationError(ValueError):
    """Raised when a response table violates its structural invariants."""

    def __init__(self, table_name: str, errors: list[str]):
        self.table_name = table_name
        self.errors = list(errors)
        super().__init__(f"{table_name}: " + "; ".join(self.errors))


@dataclass(frozen=True)
class ApplyOption:
    """An alternate outcome the GM may pick when applying a result."""
    entry_id: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"entry_id": self.entry_id, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ApplyOption":
        return cls(
            entry_id=str(data.get("entry_id") or ""),
            label=str(data.get("label") or ""),
        )


@dataclass(frozen=True)
class TableEntry:
    """
    A single outcome in a response table.

    Persistent entries create a standing condition when applied; the
    others are one-off results. stress_delta is the stress change the
    outcome asks for, applied separately from the condition itself.
    """
    # Roll range (inclusive)
    roll_min: int
    roll_max: int

    entry_id: str
    label: str
    description: str
    severity: int = 1                                  # 1..5

    persistent: bool = False
    duration_type: Optional[DurationType] = None       # Only for persistent entries
    duration_value: Optional[Any] = None

    stress_delta: Optional[int] = None
    apply_options: tuple[ApplyOption, ...] = field(default_factory=tuple)

    def matches_roll(self, roll: int) -> bool:
        """Check if a roll value falls within this entry's range."""
        return self.roll_min <= roll <= self.roll_max

    @property
    def signed_stress_delta(self) -> int:
        """Stress delta as an int, 0 when the entry has none."""
        return clamp_int(self.stress_delta or 0, -10, 10)


@dataclass
class ResponseTable:
    """
    An ordered, range-keyed response table.

    Entries are sorted by roll_min. Totals outside the covered span are
    clamped onto the first or last entry, so lookup never fails.
    """
    table_id: str
    name: str
    roll_type: RollType
    entries: list[TableEntry] = field(default_factory=list)
    description: str = ""

    def get_min_roll(self) -> int:
        """Lowest total covered by this table."""
        return self.entries[0].roll_min

    def get_max_roll(self) -> int:
        """Highest total covered by this table."""
        return self.entries[-1].roll_max

    def lookup(self, total: int) -> TableEntry:
        """Return the entry whose range contains total."""
        total = clamp_int(total, self.get_min_roll(), self.get_max_roll())
        for entry in self.entries:
            if entry.matches_roll(total):
                return entry

        # Fallback to last entry (unreachable for a validated table)
        return self.entries[-1]

    def get_entry(self, entry_id: Any) -> Optional[TableEntry]:
        """Exact lookup by entry id. Returns None when not found."""
        wanted = str(entry_id or "")
        if not wanted:
            return None
        for entry in self.entries:
            if entry.entry_id == wanted:
                return entry
        return None

    def entry_ids(self) -> list[str]:
        return [entry.entry_id for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)
