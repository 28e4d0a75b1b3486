"""
Table management and resolution for the BIOMON roll engine.

Provides lookup of the response tables by roll type, resolution of roll
totals and entry ids, the forward scan used for duplicate escalation,
and the structural validation that must pass before first use.
"""

from typing import Any, Optional
import logging

from src.data_models import RollType, clamp_int
from src.tables.response_tables import PANIC_TABLE, STRESS_TABLE
from src.tables.table_types import (
    COVERAGE_MAX,
    COVERAGE_MIN,
    ApplyOption,
    ResponseTable,
    TableEntry,
    TableValidationError,
)

logger = logging.getLogger(__name__)

# Upper bound on the forward scan for the next different entry.
ESCALATION_SCAN_LIMIT = 25


class TableManager:
    """
    Read-only access to the response tables.

    Holds one table per roll type. Unknown roll types resolve against the
    Stress table. The tables are shared by every player; nothing here is
    mutated after construction.
    """

    def __init__(self, tables: Optional[list[ResponseTable]] = None):
        self._tables: dict[RollType, ResponseTable] = {}
        for table in tables if tables is not None else [STRESS_TABLE, PANIC_TABLE]:
            self.register_table(table)

    def register_table(self, table: ResponseTable) -> None:
        """Register (or replace) the table for its roll type."""
        self._tables[table.roll_type] = table

    def get_table(self, roll_type: Any) -> ResponseTable:
        """Get the table for a roll type, falling back to Stress."""
        return self._tables[RollType.coerce(roll_type)]

    def all_tables(self) -> list[ResponseTable]:
        return list(self._tables.values())

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve_by_total(self, roll_type: Any, total: Any) -> TableEntry:
        """Resolve a roll total to the single matching entry."""
        return self.get_table(roll_type).lookup(clamp_int(total, COVERAGE_MIN, COVERAGE_MAX))

    def resolve_by_id(self, roll_type: Any, entry_id: Any) -> Optional[TableEntry]:
        """Look up an entry by id. None is an expected outcome, not an error."""
        return self.get_table(roll_type).get_entry(entry_id)

    def next_higher_different(
        self,
        roll_type: Any,
        total: Any,
        current_entry_id: str,
    ) -> Optional[TableEntry]:
        """
        Scan upward from total + 1 for the first entry with a different id.

        For these tables, stepping the total by one walks to the next row.
        Returns None if nothing different turns up within the scan limit
        (e.g. the total already sits on the open-ended top row).
        """
        start_id = str(current_entry_id or "")
        t = clamp_int(total, COVERAGE_MIN, COVERAGE_MAX)
        for _ in range(ESCALATION_SCAN_LIMIT):
            t += 1
            candidate = self.resolve_by_total(roll_type, t)
            if candidate.entry_id and candidate.entry_id != start_id:
                return candidate
        return None

    def validated_apply_options(
        self,
        roll_type: Any,
        entry: TableEntry,
    ) -> Optional[list[ApplyOption]]:
        """
        Re-resolve an entry's apply options against the live table.

        Options whose target no longer exists are dropped. Returns None when
        the entry offers no options at all.
        """
        if not entry.apply_options:
            return None

        options = []
        for option in entry.apply_options:
            target = self.resolve_by_id(roll_type, option.entry_id)
            if target is None:
                logger.debug(f"Dropping stale apply option {option.entry_id!r} on {entry.entry_id}")
                continue
            options.append(ApplyOption(entry_id=target.entry_id, label=option.label or target.label))
        return options

    # =========================================================================
    # VALIDATION
    # =========================================================================

    @staticmethod
    def check_table(table: ResponseTable) -> list[str]:
        """
        Check a table's structural invariants.

        Returns a list of problems; an empty list means the table is sound.
        Checks entry shape, id uniqueness, range ordering and contiguity,
        coverage of the full total span, and apply option targets.
        """
        errors: list[str] = []
        if not table.entries:
            return ["table has no entries"]

        seen_ids: set[str] = set()
        for index, entry in enumerate(table.entries):
            where = f"entry {index} ({entry.entry_id or '?'})"
            if not isinstance(entry.roll_min, int) or not isinstance(entry.roll_max, int):
                errors.append(f"{where}: range bounds must be integers")
                continue
            if entry.roll_min > entry.roll_max:
                errors.append(f"{where}: min {entry.roll_min} > max {entry.roll_max}")
            if not entry.entry_id:
                errors.append(f"{where}: missing id")
            elif entry.entry_id in seen_ids:
                errors.append(f"{where}: duplicate id")
            seen_ids.add(entry.entry_id)
            if not entry.label:
                errors.append(f"{where}: missing label")
            if not 1 <= entry.severity <= 5:
                errors.append(f"{where}: severity {entry.severity} outside 1..5")
            if entry.persistent and entry.duration_type is None:
                errors.append(f"{where}: persistent entry without duration type")
            if not entry.persistent and entry.duration_type is not None:
                errors.append(f"{where}: duration type on non-persistent entry")

            if index > 0:
                previous = table.entries[index - 1]
                if isinstance(previous.roll_max, int) and entry.roll_min != previous.roll_max + 1:
                    kind = "gap" if entry.roll_min > previous.roll_max + 1 else "overlap"
                    errors.append(
                        f"{where}: {kind} after {previous.entry_id} "
                        f"({previous.roll_max} -> {entry.roll_min})"
                    )

        first, last = table.entries[0], table.entries[-1]
        if isinstance(first.roll_min, int) and first.roll_min > COVERAGE_MIN:
            errors.append(f"coverage starts at {first.roll_min}, must reach {COVERAGE_MIN}")
        if isinstance(last.roll_max, int) and last.roll_max < COVERAGE_MAX:
            errors.append(f"coverage ends at {last.roll_max}, must reach {COVERAGE_MAX}")

        for entry in table.entries:
            for option in entry.apply_options:
                if option.entry_id not in seen_ids:
                    errors.append(f"{entry.entry_id}: apply option targets unknown id {option.entry_id!r}")

        return errors

    def validate(self) -> None:
        """
        Validate every registered table.

        Raises:
            TableValidationError: on the first table with any problem
        """
        for table in self._tables.values():
            errors = self.check_table(table)
            if errors:
                logger.error(f"{table.name} failed validation: {errors}")
                raise TableValidationError(table.name, errors)
            logger.debug(f"{table.name}: OK ({len(table)} entries)")
