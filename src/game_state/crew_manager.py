"""
Crew roster management.

Adds, edits and removes crew members on an injected SessionState, and
toggles the manual conditions the GM can set outside of a roll. Like
the roll engine, unknown ids are ignored rather than raised.
"""

from typing import Any, Callable, Optional
import logging

from src.data_models import (
    DEFAULT_MAX_HEALTH,
    MAX_HEALTH_CAP,
    MAX_RESOLVE,
    MAX_STRESS,
    DurationType,
    LogEntryType,
    clamp_int,
    new_id,
    now_ms,
)
from src.game_state.effect_ledger import clear_effect, create_effect, find_live_effect
from src.game_state.session_state import CrewMember, SessionState, clean_name

logger = logging.getLogger(__name__)

# Conditions the GM can toggle by hand: name -> (label, state shown when set)
CONDITIONS = {
    "fatigue": ("FATIGUE", "FATIGUED"),
}


class CrewManager:
    """Roster and manual condition operations over a SessionState."""

    def __init__(self, state: SessionState, clock: Callable[[], int] = now_ms):
        self._state = state
        self._clock = clock

    def add_player(
        self,
        name: Any = "",
        max_health: Any = DEFAULT_MAX_HEALTH,
        health: Any = None,
        stress: Any = 0,
        resolve: Any = 0,
    ) -> CrewMember:
        """Add a crew member. Health defaults to full."""
        max_hp = clamp_int(max_health, 1, MAX_HEALTH_CAP)
        player = CrewMember(
            player_id=new_id(),
            name=clean_name(name),
            health=clamp_int(max_hp if health is None else health, 0, max_hp),
            max_health=max_hp,
            stress=clamp_int(stress, 0, MAX_STRESS),
            resolve=clamp_int(resolve, 0, MAX_RESOLVE),
        )
        self._state.players.append(player)
        self._state.add_log_entry(LogEntryType.SYSTEM, f"CREW MEMBER ADDED: {player.name}")
        logger.info(f"[CREW:ADD] {player.name} ({player.player_id})")
        return player

    def update_player(self, player_id: Any, **fields: Any) -> Optional[CrewMember]:
        """
        Update some of a crew member's fields.

        Accepts name, max_health, health, stress and resolve; other keys are
        ignored. Health never exceeds max health, so lowering max health
        lowers health with it.

        Returns:
            The updated crew member, or None if the id is unknown
        """
        player = self._state.get_player(player_id)
        if player is None:
            logger.debug(f"[CREW:UPDATE] Unknown player {player_id!r}")
            return None

        previous_health = player.health
        if "name" in fields:
            player.name = clean_name(fields["name"], fallback=player.name)
        if "max_health" in fields:
            player.max_health = clamp_int(fields["max_health"], 1, MAX_HEALTH_CAP)
        if "health" in fields:
            player.health = clamp_int(fields["health"], 0, player.max_health)
        else:
            player.health = clamp_int(player.health, 0, player.max_health)
        if "stress" in fields:
            player.stress = clamp_int(fields["stress"], 0, MAX_STRESS)
        if "resolve" in fields:
            player.resolve = clamp_int(fields["resolve"], 0, MAX_RESOLVE)

        if player.health == 0 and previous_health > 0:
            self._state.add_log_entry(
                LogEntryType.HEALTH, f"{player.name} CRITICAL: HEALTH DROPPED TO 0"
            )
            logger.warning(f"[CREW:UPDATE] {player.name} health dropped to 0")
        logger.info(f"[CREW:UPDATE] {player.name} {sorted(fields)}")
        return player

    def remove_player(self, player_id: Any) -> bool:
        """Remove a crew member. Returns False if the id is unknown."""
        player = self._state.get_player(player_id)
        if player is None:
            logger.debug(f"[CREW:REMOVE] Unknown player {player_id!r}")
            return False

        self._state.players.remove(player)
        self._state.add_log_entry(LogEntryType.SYSTEM, f"CREW MEMBER REMOVED: {player.name}")
        logger.info(f"[CREW:REMOVE] {player.name}")
        return True

    def clear_party(self) -> None:
        """Drop every crew member along with the roll feed and mission log."""
        self._state.players = []
        self._state.roll_events = []
        self._state.mission_log.clear()
        self._state.add_log_entry(LogEntryType.SYSTEM, "PARTY CLEARED")
        logger.info("[CREW:CLEAR] Party cleared")

    def toggle_condition(self, player_id: Any, condition: Any) -> bool:
        """
        Switch a manual condition on or off for a crew member.

        Turning a condition off soft-clears the live effect; turning it on
        creates a new one. Returns False for unknown players or conditions.
        """
        name = str(condition or "").strip().lower()
        known = CONDITIONS.get(name)
        player = self._state.get_player(player_id)
        if known is None or player is None:
            logger.debug(f"[CREW:CONDITION] Ignoring {condition!r} for {player_id!r}")
            return False

        label, adjective = known
        effect_type = f"condition_{name}"
        live = find_live_effect(player, effect_type)
        if live is not None:
            clear_effect(live, self._clock())
            self._state.add_log_entry(LogEntryType.INFO, f"{player.name} RECOVERED FROM: {label}")
            logger.info(f"[CREW:CONDITION] {player.name} -{effect_type}")
        else:
            create_effect(
                player,
                effect_type=effect_type,
                label=label,
                severity=1,
                created_at=self._clock(),
                duration_type=DurationType.MANUAL,
            )
            self._state.add_log_entry(LogEntryType.INFO, f"{player.name} IS NOW {adjective}")
            logger.info(f"[CREW:CONDITION] {player.name} +{effect_type}")
        return True
