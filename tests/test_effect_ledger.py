"""
Tests for the effect ledger helpers.
"""

from src.data_models import DurationType
from src.game_state.effect_ledger import (
    clear_effect,
    create_effect,
    find_effect,
    find_live_effect,
    is_live,
    live_effects,
)


class TestEffectLedger:
    """Tests for creating, finding and clearing effects."""

    def test_create_and_find(self, player):
        """Test a created effect is live and findable."""
        effect = create_effect(player, "stress_shakes", "Shakes", 2, created_at=1)
        assert effect in player.active_effects
        assert find_effect(player, effect.effect_id) is effect
        assert find_live_effect(player, "stress_shakes") is effect
        assert is_live(player, "stress_shakes")
        assert effect.duration_type == DurationType.MANUAL

    def test_severity_clamped(self, player):
        """Test severity is kept within 1..5."""
        assert create_effect(player, "a", "A", 0, created_at=1).severity == 1
        assert create_effect(player, "b", "B", 12, created_at=1).severity == 5

    def test_cleared_effect_stays_as_history(self, player):
        """Test clearing keeps the effect but drops its liveness."""
        effect = create_effect(player, "panic_freeze", "Freeze", 4, created_at=1)
        assert clear_effect(effect, 2) is True
        assert clear_effect(effect, 3) is False
        assert player.active_effects == [effect]
        assert not is_live(player, "panic_freeze")
        assert live_effects(player) == []
        assert find_effect(player, effect.effect_id) is effect

    def test_new_effect_after_clear(self, player):
        """Test a new condition of a cleared type is a separate effect."""
        old = create_effect(player, "panic_freeze", "Freeze", 4, created_at=1)
        clear_effect(old, 2)
        new = create_effect(player, "panic_freeze", "Freeze", 4, created_at=3)
        assert new.effect_id != old.effect_id
        assert live_effects(player) == [new]

    def test_missing_lists_are_empty(self, player):
        """Test malformed effect lists read as empty."""
        player.active_effects = None
        assert not is_live(player, "panic_freeze")
        assert live_effects(player) == []
        assert find_effect(player, "x") is None
        create_effect(player, "panic_freeze", "Freeze", 4, created_at=1)
        assert is_live(player, "panic_freeze")

    def test_empty_type_never_live(self, player):
        """Test an empty effect type is never live."""
        create_effect(player, "", "Blank", 1, created_at=1)
        assert not is_live(player, "")
        assert not is_live(player, None)

    def test_no_player(self):
        """Test helpers accept a missing player."""
        assert not is_live(None, "panic_freeze")
        assert find_effect(None, "x") is None
        assert clear_effect(None, 1) is False
