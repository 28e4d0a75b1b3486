"""Game state management module."""

from src.game_state.effect_ledger import (
    clear_effect,
    create_effect,
    find_effect,
    find_live_effect,
    is_live,
    live_effects,
)
from src.game_state.session_state import (
    CrewMember,
    SessionMetadata,
    SessionState,
    clean_name,
    ensure_player_fields,
)
from src.game_state.crew_manager import CONDITIONS, CrewManager

__all__ = [
    "clear_effect",
    "create_effect",
    "find_effect",
    "find_live_effect",
    "is_live",
    "live_effects",
    "CrewMember",
    "SessionMetadata",
    "SessionState",
    "clean_name",
    "ensure_player_fields",
    "CONDITIONS",
    "CrewManager",
]
