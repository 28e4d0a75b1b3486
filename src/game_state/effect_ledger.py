"""
Effect ledger: the per-crew-member list of standing conditions.

Effects are soft-deleted. The list only ever grows; liveness is decided
by cleared_at. Every helper treats a missing or malformed effect list as
empty rather than failing.
"""

from typing import Any, Optional, TYPE_CHECKING

from src.data_models import ActiveEffect, DurationType, clamp_int, new_id

if TYPE_CHECKING:
    from src.game_state.session_state import CrewMember


def effects_of(player: Optional["CrewMember"]) -> list[ActiveEffect]:
    """The player's effect list, or an empty list if it is missing."""
    effects = getattr(player, "active_effects", None)
    return effects if isinstance(effects, list) else []


def is_live(player: Optional["CrewMember"], effect_type: Any) -> bool:
    """True iff the player has an uncleared effect of this type."""
    wanted = str(effect_type or "")
    if not wanted:
        return False
    return any(e.is_live and e.type == wanted for e in effects_of(player))


def live_effects(player: Optional["CrewMember"]) -> list[ActiveEffect]:
    return [e for e in effects_of(player) if e.is_live]


def find_effect(player: Optional["CrewMember"], effect_id: Any) -> Optional[ActiveEffect]:
    """Find an effect by id, cleared or not."""
    wanted = str(effect_id or "")
    if not wanted:
        return None
    for effect in effects_of(player):
        if effect.effect_id == wanted:
            return effect
    return None


def find_live_effect(player: Optional["CrewMember"], effect_type: Any) -> Optional[ActiveEffect]:
    wanted = str(effect_type or "")
    for effect in effects_of(player):
        if effect.is_live and effect.type == wanted:
            return effect
    return None


def create_effect(
    player: "CrewMember",
    effect_type: str,
    label: str,
    severity: int,
    created_at: int,
    duration_type: Optional[DurationType] = None,
    duration_value: Optional[Any] = None,
) -> ActiveEffect:
    """Append a new live effect to the player's list and return it."""
    if not isinstance(player.active_effects, list):
        player.active_effects = []
    effect = ActiveEffect(
        effect_id=new_id(),
        type=effect_type,
        label=label,
        severity=clamp_int(severity, 1, 5),
        created_at=created_at,
        duration_type=duration_type or DurationType.MANUAL,
        duration_value=duration_value,
    )
    player.active_effects.append(effect)
    return effect


def clear_effect(effect: Optional[ActiveEffect], cleared_at: int) -> bool:
    """Soft-clear an effect. Clearing twice is harmless and returns False."""
    if effect is None:
        return False
    return effect.clear(cleared_at)
