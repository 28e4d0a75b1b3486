"""
Roll transaction records.

A RollTransaction is a crew member's "last roll": the resolved outcome
plus two independent mutation branches that can each be applied and
reversed:

- the apply branch (condition created, or the stress-duplicate +1)
- the stress-delta branch (the outcome's own stress change)

A RollEvent is the immutable feed record published when a roll is made.
"""

from dataclasses import dataclass
from typing import Any, Optional

from src.data_models import RollType, clamp_int, coerce_timestamp
from src.tables.table_types import ApplyOption, TableEntry


@dataclass
class RollTransaction:
    """The per-player record of the most recent roll and its apply state."""

    type: RollType
    event_id: str
    timestamp: int

    # Dice arithmetic
    die: int
    stress: int
    resolve: int
    modifiers: int
    total: int

    # Resolved entry (after the duplicate policy)
    table_entry_id: str
    table_entry_label: str
    table_entry_description: str
    table_entry_stress_delta: int = 0
    table_entry_persistent: bool = False

    # Panic escalation
    duplicate_adjusted: bool = False
    duplicate_from_id: Optional[str] = None
    duplicate_from_label: Optional[str] = None
    duplicate_note: Optional[str] = None

    apply_options: Optional[list[ApplyOption]] = None

    # Apply branch
    applied: bool = False
    applied_table_entry_id: Optional[str] = None
    applied_table_entry_label: Optional[str] = None
    applied_table_entry_description: Optional[str] = None
    applied_table_entry_stress_delta: Optional[int] = None
    applied_effect_id: Optional[str] = None
    applied_stress_duplicate: bool = False
    applied_stress_duplicate_value: Optional[int] = None  # Stress actually added

    # Stress-delta branch
    stress_delta_applied: bool = False
    stress_delta_applied_value: Optional[int] = None      # Stress actually changed

    @property
    def has_mutations(self) -> bool:
        """Whether either branch has changed player state."""
        return self.applied or self.stress_delta_applied

    @property
    def pending_stress_delta(self) -> int:
        """The stress delta of the entry in play (the applied one, once applied)."""
        if self.applied and self.applied_table_entry_stress_delta is not None:
            return self.applied_table_entry_stress_delta
        return self.table_entry_stress_delta

    def offers_option(self, entry_id: str) -> bool:
        """Whether entry_id is one of this roll's validated apply options."""
        return any(option.entry_id == entry_id for option in self.apply_options or [])

    def mark_applied(
        self,
        entry: TableEntry,
        effect_id: Optional[str] = None,
        stress_duplicate_value: Optional[int] = None,
    ) -> None:
        """Record the apply branch against the entry actually used."""
        self.applied = True
        self.applied_table_entry_id = entry.entry_id
        self.applied_table_entry_label = entry.label
        self.applied_table_entry_description = entry.description
        self.applied_table_entry_stress_delta = entry.signed_stress_delta
        self.applied_effect_id = effect_id
        self.applied_stress_duplicate = stress_duplicate_value is not None
        self.applied_stress_duplicate_value = stress_duplicate_value

    def reset_apply_branch(self) -> None:
        self.applied = False
        self.applied_effect_id = None
        self.applied_table_entry_id = None
        self.applied_table_entry_label = None
        self.applied_table_entry_description = None
        self.applied_table_entry_stress_delta = None
        self.applied_stress_duplicate = False
        self.applied_stress_duplicate_value = None

    def mark_stress_delta_applied(self, value: int) -> None:
        self.stress_delta_applied = True
        self.stress_delta_applied_value = value

    def reset_stress_delta_branch(self) -> None:
        self.stress_delta_applied = False
        self.stress_delta_applied_value = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "event_id": self.event_id,
            "timestamp": self.timestamp,
            "die": self.die,
            "stress": self.stress,
            "resolve": self.resolve,
            "modifiers": self.modifiers,
            "total": self.total,
            "table_entry_id": self.table_entry_id,
            "table_entry_label": self.table_entry_label,
            "table_entry_description": self.table_entry_description,
            "table_entry_stress_delta": self.table_entry_stress_delta,
            "table_entry_persistent": self.table_entry_persistent,
            "duplicate_adjusted": self.duplicate_adjusted,
            "duplicate_from_id": self.duplicate_from_id,
            "duplicate_from_label": self.duplicate_from_label,
            "duplicate_note": self.duplicate_note,
            "apply_options": (
                [option.to_dict() for option in self.apply_options]
                if self.apply_options is not None else None
            ),
            "applied": self.applied,
            "applied_table_entry_id": self.applied_table_entry_id,
            "applied_table_entry_label": self.applied_table_entry_label,
            "applied_table_entry_description": self.applied_table_entry_description,
            "applied_table_entry_stress_delta": self.applied_table_entry_stress_delta,
            "applied_effect_id": self.applied_effect_id,
            "applied_stress_duplicate": self.applied_stress_duplicate,
            "applied_stress_duplicate_value": self.applied_stress_duplicate_value,
            "stress_delta_applied": self.stress_delta_applied,
            "stress_delta_applied_value": self.stress_delta_applied_value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollTransaction":
        """Create from dictionary, backfilling fields older saves lack."""
        options = data.get("apply_options")
        stress_duplicate = bool(data.get("applied_stress_duplicate", False))
        duplicate_value = data.get("applied_stress_duplicate_value")
        if stress_duplicate and duplicate_value is None:
            duplicate_value = 1
        return cls(
            type=RollType.coerce(data.get("type")),
            event_id=str(data.get("event_id") or ""),
            timestamp=coerce_timestamp(data.get("timestamp")),
            die=clamp_int(data.get("die", 1), 1, 6),
            stress=clamp_int(data.get("stress", 0), -999, 999),
            resolve=clamp_int(data.get("resolve", 0), -999, 999),
            modifiers=clamp_int(data.get("modifiers", 0), -999, 999),
            total=clamp_int(data.get("total", 0), -999, 999),
            table_entry_id=str(data.get("table_entry_id") or ""),
            table_entry_label=str(data.get("table_entry_label") or ""),
            table_entry_description=str(data.get("table_entry_description") or ""),
            table_entry_stress_delta=clamp_int(data.get("table_entry_stress_delta", 0), -10, 10),
            table_entry_persistent=bool(data.get("table_entry_persistent", False)),
            duplicate_adjusted=bool(data.get("duplicate_adjusted", False)),
            duplicate_from_id=data.get("duplicate_from_id"),
            duplicate_from_label=data.get("duplicate_from_label"),
            duplicate_note=data.get("duplicate_note"),
            apply_options=(
                [ApplyOption.from_dict(o) for o in options if isinstance(o, dict)]
                if isinstance(options, list) else None
            ),
            applied=bool(data.get("applied", False)),
            applied_table_entry_id=data.get("applied_table_entry_id"),
            applied_table_entry_label=data.get("applied_table_entry_label"),
            applied_table_entry_description=data.get("applied_table_entry_description"),
            applied_table_entry_stress_delta=data.get("applied_table_entry_stress_delta"),
            applied_effect_id=data.get("applied_effect_id"),
            applied_stress_duplicate=stress_duplicate,
            applied_stress_duplicate_value=duplicate_value,
            stress_delta_applied=bool(data.get("stress_delta_applied", False)),
            stress_delta_applied_value=data.get("stress_delta_applied_value"),
        )


@dataclass(frozen=True)
class RollEvent:
    """A published roll, kept in the session's capped roll feed."""

    event_id: str
    player_id: str
    roll_type: RollType
    die: int
    stress: int
    resolve: int
    modifiers: int
    total: int
    table_entry_id: str
    label: str
    description: str
    stress_delta: int
    timestamp: int
    duplicate_adjusted: bool = False
    duplicate_from_id: Optional[str] = None
    duplicate_from_label: Optional[str] = None

    @classmethod
    def from_transaction(cls, player_id: str, transaction: RollTransaction) -> "RollEvent":
        return cls(
            event_id=transaction.event_id,
            player_id=player_id,
            roll_type=transaction.type,
            die=transaction.die,
            stress=transaction.stress,
            resolve=transaction.resolve,
            modifiers=transaction.modifiers,
            total=transaction.total,
            table_entry_id=transaction.table_entry_id,
            label=transaction.table_entry_label,
            description=transaction.table_entry_description,
            stress_delta=transaction.table_entry_stress_delta,
            timestamp=transaction.timestamp,
            duplicate_adjusted=transaction.duplicate_adjusted,
            duplicate_from_id=transaction.duplicate_from_id,
            duplicate_from_label=transaction.duplicate_from_label,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": self.event_id,
            "player_id": self.player_id,
            "roll_type": self.roll_type.value,
            "die": self.die,
            "stress": self.stress,
            "resolve": self.resolve,
            "modifiers": self.modifiers,
            "total": self.total,
            "table_entry_id": self.table_entry_id,
            "label": self.label,
            "description": self.description,
            "stress_delta": self.stress_delta,
            "duplicate_adjusted": self.duplicate_adjusted,
            "duplicate_from_id": self.duplicate_from_id,
            "duplicate_from_label": self.duplicate_from_label,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RollEvent":
        return cls(
            event_id=str(data.get("event_id") or ""),
            player_id=str(data.get("player_id") or ""),
            roll_type=RollType.coerce(data.get("roll_type")),
            die=clamp_int(data.get("die", 1), 1, 6),
            stress=clamp_int(data.get("stress", 0), -999, 999),
            resolve=clamp_int(data.get("resolve", 0), -999, 999),
            modifiers=clamp_int(data.get("modifiers", 0), -999, 999),
            total=clamp_int(data.get("total", 0), -999, 999),
            table_entry_id=str(data.get("table_entry_id") or ""),
            label=str(data.get("label") or ""),
            description=str(data.get("description") or ""),
            stress_delta=clamp_int(data.get("stress_delta", 0), -10, 10),
            timestamp=coerce_timestamp(data.get("timestamp")),
            duplicate_adjusted=bool(data.get("duplicate_adjusted", False)),
            duplicate_from_id=data.get("duplicate_from_id"),
            duplicate_from_label=data.get("duplicate_from_label"),
        )
