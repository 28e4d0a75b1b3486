"""
Session state for the BIOMON crew monitor.

SessionState is the single aggregate every operation works on: the crew,
the roll feed, the mission log and session metadata. It is created by
the caller and passed in explicitly; there is no module-level instance.

Export/import goes through plain dictionaries. Choosing a wire or file
format, and deciding when to write, is left to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional
import logging

from src.data_models import (
    DEFAULT_MAX_HEALTH,
    MAX_HEALTH_CAP,
    MAX_NAME_LENGTH,
    MAX_RESOLVE,
    MAX_STRESS,
    MISSION_LOG_CAP,
    ROLL_FEED_CAP,
    ActiveEffect,
    LogEntryType,
    clamp_int,
    new_id,
    now_ms,
)
from src.observability.mission_log import LogEntry, MissionLog
from src.resolution.roll_transaction import RollEvent, RollTransaction

logger = logging.getLogger(__name__)


def clean_name(value: Any, fallback: str = "UNNAMED") -> str:
    """Trim a crew name to the display limit, using fallback when blank."""
    name = str(value if value is not None else "").strip()[:MAX_NAME_LENGTH]
    return name or fallback


@dataclass
class CrewMember:
    """A crew member's vitals, standing conditions and last roll."""

    player_id: str
    name: str
    health: int = DEFAULT_MAX_HEALTH
    max_health: int = DEFAULT_MAX_HEALTH
    stress: int = 0
    resolve: int = 0
    active_effects: list[ActiveEffect] = field(default_factory=list)
    last_roll_event: Optional[RollTransaction] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "health": self.health,
            "max_health": self.max_health,
            "stress": self.stress,
            "resolve": self.resolve,
            "active_effects": [effect.to_dict() for effect in self.active_effects],
            "last_roll_event": self.last_roll_event.to_dict() if self.last_roll_event else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CrewMember":
        """Build a crew member, backfilling defaults for older data."""
        data = ensure_player_fields(dict(data))
        last_roll = data["last_roll_event"]
        return cls(
            player_id=str(data.get("id") or new_id()),
            name=clean_name(data.get("name")),
            health=data["health"],
            max_health=data["max_health"],
            stress=data["stress"],
            resolve=data["resolve"],
            active_effects=[
                ActiveEffect.from_dict(e) for e in data["active_effects"] if isinstance(e, dict)
            ],
            last_roll_event=RollTransaction.from_dict(last_roll) if isinstance(last_roll, dict) else None,
        )


def ensure_player_fields(data: dict[str, Any]) -> dict[str, Any]:
    """
    Backfill and clamp the fields of a serialized crew member in place.

    Older saves may lack effects or the last roll, or carry values out of
    range; every field ends up present and within bounds.
    """
    max_health = clamp_int(data.get("max_health", DEFAULT_MAX_HEALTH), 1, MAX_HEALTH_CAP)
    data["max_health"] = max_health
    data["health"] = clamp_int(data.get("health", max_health), 0, max_health)
    data["stress"] = clamp_int(data.get("stress", 0), 0, MAX_STRESS)
    data["resolve"] = clamp_int(data.get("resolve", 0), 0, MAX_RESOLVE)
    if not isinstance(data.get("active_effects"), list):
        data["active_effects"] = []
    if "last_roll_event" not in data:
        data["last_roll_event"] = None
    return data


@dataclass
class SessionMetadata:
    """Campaign bookkeeping carried alongside the session."""

    campaign_name: Optional[str] = None
    created_at: Optional[str] = None
    last_saved: Optional[str] = None
    session_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "campaign_name": self.campaign_name,
            "created_at": self.created_at,
            "last_saved": self.last_saved,
            "session_count": self.session_count,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionMetadata":
        if not isinstance(data, dict):
            return cls(created_at=datetime.now().isoformat())
        return cls(
            campaign_name=data.get("campaign_name"),
            created_at=data.get("created_at"),
            last_saved=data.get("last_saved"),
            session_count=clamp_int(data.get("session_count", 0), 0, 1_000_000),
        )


class SessionState:
    """
    The aggregate that every roll and crew operation mutates.

    Holds the crew roster, the capped roll feed (oldest dropped first) and
    the capped mission log (newest first).
    """

    def __init__(
        self,
        roll_feed_cap: int = ROLL_FEED_CAP,
        mission_log_cap: int = MISSION_LOG_CAP,
        clock: Callable[[], int] = now_ms,
    ):
        self.players: list[CrewMember] = []
        self.roll_events: list[RollEvent] = []
        self.mission_log = MissionLog(cap=mission_log_cap, clock=clock)
        self.metadata = SessionMetadata(created_at=datetime.now().isoformat())
        self._roll_feed_cap = roll_feed_cap

    @property
    def roll_feed_cap(self) -> int:
        return self._roll_feed_cap

    def get_player(self, player_id: Any) -> Optional[CrewMember]:
        """Find a crew member by id. None for unknown ids."""
        wanted = str(player_id or "")
        if not wanted:
            return None
        for player in self.players:
            if player.player_id == wanted:
                return player
        return None

    def push_roll_event(self, event: RollEvent) -> None:
        """Append to the roll feed, evicting the oldest entries past the cap."""
        self.roll_events.append(event)
        overflow = len(self.roll_events) - self._roll_feed_cap
        if overflow > 0:
            del self.roll_events[:overflow]

    def add_log_entry(
        self,
        entry_type: LogEntryType,
        message: str,
        details: Optional[str] = None,
    ) -> LogEntry:
        return self.mission_log.add(entry_type, message, details)

    def reset(self) -> None:
        """Start a fresh session: no crew, no feed, no log."""
        self.players = []
        self.roll_events = []
        self.mission_log.clear()
        self.metadata = SessionMetadata(created_at=datetime.now().isoformat())
        logger.info("[SESSION] Cleared")

    # =========================================================================
    # EXPORT / IMPORT
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the whole session as plain, serializable data."""
        return {
            "players": [player.to_dict() for player in self.players],
            "roll_events": [event.to_dict() for event in self.roll_events],
            "mission_log": self.mission_log.to_list(),
            "metadata": self.metadata.to_dict(),
        }

    def load_dict(self, data: Any) -> bool:
        """
        Replace this session with exported data.

        Malformed sections load as empty. Returns False (leaving the session
        untouched) when data is not a mapping at all.
        """
        if not isinstance(data, dict):
            logger.warning("[SESSION] Import rejected: data is not a mapping")
            return False

        raw_players = data.get("players")
        raw_events = data.get("roll_events")
        players = [
            CrewMember.from_dict(p) for p in (raw_players if isinstance(raw_players, list) else [])
            if isinstance(p, dict)
        ]
        roll_events = [
            RollEvent.from_dict(e) for e in (raw_events if isinstance(raw_events, list) else [])
            if isinstance(e, dict)
        ]
        metadata = SessionMetadata.from_dict(data.get("metadata"))

        self.players = players
        self.roll_events = roll_events[-self._roll_feed_cap:] if self._roll_feed_cap else []
        self.mission_log.load(data.get("mission_log"))
        self.metadata = metadata

        logger.info(f"[SESSION] Imported {len(self.players)} crew member(s)")
        return True

    @classmethod
    def from_dict(cls, data: Any, **kwargs: Any) -> "SessionState":
        state = cls(**kwargs)
        state.load_dict(data)
        return state
