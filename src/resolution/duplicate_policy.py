"""
Duplicate result policy.

A "duplicate" is a persistent outcome whose condition is already live on
the same crew member. The two tables treat duplicates differently:

- Panic: decided at roll time. The duplicate is never shown; the roll is
  escalated to the next higher row with a different id.
- Stress: decided at apply time. No second condition is created; the
  crew member takes +1 stress instead.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import logging

from src.data_models import RollType
from src.game_state.effect_ledger import is_live
from src.tables.table_manager import TableManager
from src.tables.table_types import TableEntry

if TYPE_CHECKING:
    from src.game_state.session_state import CrewMember

logger = logging.getLogger(__name__)


@dataclass
class RollResolution:
    """The entry a roll resolved to, and how it got there."""

    entry: TableEntry
    duplicate_adjusted: bool = False
    duplicate_from_id: Optional[str] = None
    duplicate_from_label: Optional[str] = None
    duplicate_note: Optional[str] = None


class DuplicatePolicy:
    """Applies the per-table duplicate rules against a crew member's live effects."""

    def __init__(self, tables: TableManager):
        self._tables = tables

    def resolve_roll(
        self,
        player: Optional["CrewMember"],
        roll_type: RollType,
        total: int,
    ) -> RollResolution:
        """
        Resolve a roll total, escalating panic duplicates.

        The escalated entry is adopted as-is: it is not itself checked for
        being a live duplicate.
        """
        raw = self._tables.resolve_by_total(roll_type, total)
        if roll_type != RollType.PANIC or not raw.persistent or not is_live(player, raw.entry_id):
            return RollResolution(entry=raw)

        bumped = self._tables.next_higher_different(roll_type, total, raw.entry_id)
        if bumped is None:
            logger.debug(f"No higher response above duplicate {raw.entry_id} (total {total})")
            return RollResolution(entry=raw)

        from_label = raw.label or raw.entry_id
        logger.info(f"[ROLL:DUPLICATE] {raw.entry_id} already active, escalating to {bumped.entry_id}")
        return RollResolution(
            entry=bumped,
            duplicate_adjusted=True,
            duplicate_from_id=raw.entry_id,
            duplicate_from_label=from_label,
            duplicate_note=(
                f"Duplicate result ({from_label}) already active; "
                f"showing next higher response."
            ),
        )

    def is_stress_duplicate(
        self,
        player: Optional["CrewMember"],
        roll_type: RollType,
        entry: TableEntry,
    ) -> bool:
        """Whether applying this stress entry must divert to the +1 stress path."""
        return roll_type == RollType.STRESS and entry.persistent and is_live(player, entry.entry_id)
