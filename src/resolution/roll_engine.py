"""
Roll Engine for the BIOMON crew monitor.

Runs the Stress/Panic roll ritual against an injected SessionState:

    trigger -> apply / apply_stress_delta (either order, either alone) -> undo
    effect_clear (cascades into the roll if it clears the linked effect)
    clear (drops the roll)

Every operation is synchronous and total. Unknown players, stale event
ids and unknown effects are silent no-ops: callers cannot tell a late
click from a bad one, and both must be harmless. All checks happen
before any write, so a no-op never leaves partial changes behind.

The engine does no I/O. It returns a RollActionResult and the caller
decides what to persist or broadcast.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, TYPE_CHECKING
import logging

from src.data_models import (
    MAX_MODIFIER,
    MAX_RESOLVE,
    MAX_STRESS,
    MIN_MODIFIER,
    DiceRoller,
    LogEntryType,
    RollType,
    clamp_int,
    new_id,
    now_ms,
)
from src.game_state.effect_ledger import clear_effect, create_effect, find_effect
from src.resolution.duplicate_policy import DuplicatePolicy
from src.resolution.roll_transaction import RollEvent, RollTransaction
from src.tables.table_manager import TableManager

if TYPE_CHECKING:
    from src.game_state.session_state import CrewMember, SessionState

logger = logging.getLogger(__name__)

# Severity used when an entry leaves it unset
DEFAULT_SEVERITY = {RollType.PANIC: 4, RollType.STRESS: 2}


@dataclass
class RollActionResult:
    """Outcome of one engine operation."""

    changed: bool
    player: Optional["CrewMember"] = None
    roll_event: Optional[RollEvent] = None
    description: str = ""

    def __str__(self) -> str:
        if self.changed:
            return f"Changed: {self.description}"
        return f"No-op: {self.description}"


class RollEngine:
    """
    Stress and Panic roll resolution with reversible application.

    Each crew member has at most one live RollTransaction. Apply, stress
    delta and undo calls name the transaction by event id; calls that
    name anything else are ignored.
    """

    def __init__(
        self,
        state: "SessionState",
        tables: Optional[TableManager] = None,
        dice: Optional[DiceRoller] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._state = state
        self._tables = tables or TableManager()
        self._dice = dice or DiceRoller()
        self._clock = clock
        self._policy = DuplicatePolicy(self._tables)

    @property
    def state(self) -> "SessionState":
        return self._state

    @property
    def tables(self) -> TableManager:
        return self._tables

    # =========================================================================
    # TRIGGER
    # =========================================================================

    def trigger(self, player_id: Any, roll_type: Any = RollType.STRESS, modifiers: Any = 0) -> RollActionResult:
        """
        Roll d6 + stress - resolve + modifiers on the chosen table.

        Replaces the crew member's previous roll unconditionally and
        appends a RollEvent to the session's roll feed.
        """
        player = self._state.get_player(player_id)
        if player is None:
            logger.debug(f"[ROLL:TRIGGER] Unknown player {player_id!r}")
            return RollActionResult(changed=False, description="unknown player")

        roll_type = RollType.coerce(roll_type)
        modifiers = clamp_int(0 if modifiers is None else modifiers, MIN_MODIFIER, MAX_MODIFIER)
        stress = clamp_int(player.stress, 0, MAX_STRESS)
        resolve = clamp_int(player.resolve, 0, MAX_RESOLVE)
        die = self._dice.roll_d6(reason=f"{roll_type.value} roll for {player.name}").total
        total = die + stress - resolve + modifiers

        resolution = self._policy.resolve_roll(player, roll_type, total)
        entry = resolution.entry

        transaction = RollTransaction(
            type=roll_type,
            event_id=new_id(),
            timestamp=self._clock(),
            die=die,
            stress=stress,
            resolve=resolve,
            modifiers=modifiers,
            total=total,
            table_entry_id=entry.entry_id,
            table_entry_label=entry.label,
            table_entry_description=entry.description,
            table_entry_stress_delta=entry.signed_stress_delta,
            table_entry_persistent=entry.persistent,
            duplicate_adjusted=resolution.duplicate_adjusted,
            duplicate_from_id=resolution.duplicate_from_id,
            duplicate_from_label=resolution.duplicate_from_label,
            duplicate_note=resolution.duplicate_note,
            apply_options=self._tables.validated_apply_options(roll_type, entry),
        )
        event = RollEvent.from_transaction(player.player_id, transaction)

        player.last_roll_event = transaction
        self._state.push_roll_event(event)
        self._state.add_log_entry(
            LogEntryType(roll_type.value),
            f"{player.name} {roll_type.value.upper()} ROLL: {entry.label.upper()}",
            details=f"d6 {die} + stress {stress} - resolve {resolve} + mod {modifiers} = {total}",
        )

        logger.info(
            f"[ROLL:TRIGGER] {player.name} {roll_type.value} total={total} -> {entry.entry_id}"
            + (f" (from {resolution.duplicate_from_id})" if resolution.duplicate_adjusted else "")
        )
        return RollActionResult(
            changed=True,
            player=player,
            roll_event=event,
            description=f"{roll_type.value} roll {total}: {entry.label}",
        )

    # =========================================================================
    # APPLY
    # =========================================================================

    def apply(self, player_id: Any, event_id: Any, chosen_entry_id: Any = None) -> RollActionResult:
        """
        Apply the roll's outcome to the crew member.

        chosen_entry_id picks one of the roll's apply options; anything not
        on that list is ignored in favour of the resolved entry. Persistent
        outcomes create a condition, unless the stress duplicate rule
        diverts them to +1 stress.
        """
        player, transaction = self._find_transaction(player_id, event_id)
        if transaction is None:
            return RollActionResult(changed=False, description="no matching roll")
        if transaction.applied:
            logger.debug(f"[ROLL:APPLY] {player.name} roll {transaction.event_id} already applied")
            return RollActionResult(changed=False, player=player, description="already applied")

        roll_type = transaction.type
        entry = (
            self._tables.resolve_by_id(roll_type, transaction.table_entry_id)
            or self._tables.resolve_by_total(roll_type, transaction.total)
        )
        if chosen_entry_id is not None:
            chosen = str(chosen_entry_id)
            if transaction.offers_option(chosen):
                entry = self._tables.resolve_by_id(roll_type, chosen) or entry
            else:
                logger.debug(f"[ROLL:APPLY] Ignoring unoffered option {chosen!r}")

        if self._policy.is_stress_duplicate(player, roll_type, entry):
            added = self._adjust_stress(player, 1)
            transaction.mark_applied(entry, stress_duplicate_value=added)
            logger.info(f"[ROLL:APPLY] {player.name} duplicate {entry.entry_id}: stress +{added}")
            description = f"duplicate {entry.label}: stress +{added}"
        elif entry.persistent:
            effect = create_effect(
                player,
                effect_type=entry.entry_id,
                label=entry.label,
                severity=entry.severity or DEFAULT_SEVERITY[roll_type],
                created_at=self._clock(),
                duration_type=entry.duration_type,
                duration_value=entry.duration_value,
            )
            transaction.mark_applied(entry, effect_id=effect.effect_id)
            logger.info(f"[ROLL:APPLY] {player.name} gains {entry.entry_id} ({effect.effect_id})")
            description = f"condition {entry.label} applied"
        else:
            transaction.mark_applied(entry)
            logger.info(f"[ROLL:APPLY] {player.name} {entry.entry_id} (no condition)")
            description = f"{entry.label} applied"

        return RollActionResult(changed=True, player=player, description=description)

    def apply_stress_delta(self, player_id: Any, event_id: Any) -> RollActionResult:
        """
        Apply the outcome's own stress change, independently of apply.

        Uses the applied entry's delta once apply has run, otherwise the
        resolved entry's. The change actually made (after clamping) is
        recorded so that undo reverses it exactly.
        """
        player, transaction = self._find_transaction(player_id, event_id)
        if transaction is None:
            return RollActionResult(changed=False, description="no matching roll")
        if transaction.stress_delta_applied:
            return RollActionResult(changed=False, player=player, description="stress delta already applied")

        delta = clamp_int(transaction.pending_stress_delta, -MAX_STRESS, MAX_STRESS)
        if delta == 0:
            return RollActionResult(changed=False, player=player, description="no stress delta")

        changed_by = self._adjust_stress(player, delta)
        transaction.mark_stress_delta_applied(changed_by)
        logger.info(f"[ROLL:STRESS] {player.name} stress {delta:+d} (effective {changed_by:+d})")
        return RollActionResult(changed=True, player=player, description=f"stress {changed_by:+d}")

    # =========================================================================
    # UNDO / CLEAR
    # =========================================================================

    def undo(self, player_id: Any, event_id: Any) -> RollActionResult:
        """
        Reverse whatever apply and apply_stress_delta did for this roll.

        The created condition is soft-cleared (kept as history); stress
        changes are subtracted exactly. The roll itself stays on display,
        back in its unapplied state.
        """
        player, transaction = self._find_transaction(player_id, event_id)
        if transaction is None:
            return RollActionResult(changed=False, description="no matching roll")
        if not transaction.has_mutations:
            return RollActionResult(changed=False, player=player, description="nothing to undo")

        now = self._clock()
        if transaction.applied_effect_id:
            clear_effect(find_effect(player, transaction.applied_effect_id), now)
        if transaction.applied_stress_duplicate:
            self._adjust_stress(player, -(transaction.applied_stress_duplicate_value or 0))
        if transaction.stress_delta_applied:
            self._adjust_stress(player, -(transaction.stress_delta_applied_value or 0))

        transaction.reset_apply_branch()
        transaction.reset_stress_delta_branch()
        logger.info(f"[ROLL:UNDO] {player.name} roll {transaction.event_id}")
        return RollActionResult(changed=True, player=player, description="roll undone")

    def effect_clear(self, player_id: Any, effect_id: Any) -> RollActionResult:
        """
        Clear a condition directly.

        If the condition is the one the current roll created, the roll's
        apply branch is reset just as undo would; its stress delta branch
        is left alone.
        """
        player = self._state.get_player(player_id)
        effect = find_effect(player, effect_id)
        if effect is None:
            logger.debug(f"[EFFECT:CLEAR] Unknown effect {effect_id!r} on player {player_id!r}")
            return RollActionResult(changed=False, player=player, description="unknown effect")

        newly_cleared = clear_effect(effect, self._clock())

        cascaded = False
        transaction = player.last_roll_event
        if transaction is not None and transaction.applied_effect_id == effect.effect_id:
            transaction.reset_apply_branch()
            cascaded = True

        if newly_cleared:
            self._state.add_log_entry(LogEntryType.INFO, f"{player.name} CONDITION CLEARED: {effect.label}")
        logger.info(
            f"[EFFECT:CLEAR] {player.name} effect={effect.type} ({effect.effect_id})"
            + (" un-applied last roll" if cascaded else "")
        )
        return RollActionResult(
            changed=newly_cleared or cascaded,
            player=player,
            description=f"{effect.label} cleared",
        )

    def clear(self, player_id: Any) -> RollActionResult:
        """Discard the crew member's roll, applied or not. Conditions stay."""
        player = self._state.get_player(player_id)
        if player is None:
            return RollActionResult(changed=False, description="unknown player")
        if player.last_roll_event is None:
            return RollActionResult(changed=False, player=player, description="no roll to clear")

        player.last_roll_event = None
        logger.info(f"[ROLL:CLEAR] {player.name}")
        return RollActionResult(changed=True, player=player, description="roll cleared")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _find_transaction(
        self,
        player_id: Any,
        event_id: Any,
    ) -> tuple[Optional["CrewMember"], Optional[RollTransaction]]:
        """The player and their live roll, if event_id names it."""
        player = self._state.get_player(player_id)
        if player is None:
            logger.debug(f"Unknown player {player_id!r}")
            return None, None
        transaction = player.last_roll_event
        if transaction is None or transaction.event_id != str(event_id or ""):
            logger.debug(f"Stale or unknown roll {event_id!r} for {player.name}")
            return player, None
        return player, transaction

    @staticmethod
    def _adjust_stress(player: "CrewMember", delta: int) -> int:
        """Shift stress within [0, MAX_STRESS] and return the change actually made."""
        before = clamp_int(player.stress, 0, MAX_STRESS)
        player.stress = clamp_int(before + delta, 0, MAX_STRESS)
        return player.stress - before
