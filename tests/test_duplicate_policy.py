"""
Tests for the duplicate result policy.
"""

from src.data_models import RollType
from src.game_state.effect_ledger import create_effect
from src.resolution.duplicate_policy import DuplicatePolicy


class TestDuplicatePolicy:
    """Tests for DuplicatePolicy."""

    def test_no_live_condition_passes_through(self, tables, player):
        """Test rolls resolve normally without live conditions."""
        resolution = DuplicatePolicy(tables).resolve_roll(player, RollType.PANIC, 6)
        assert resolution.entry.entry_id == "panic_hesitant"
        assert resolution.duplicate_adjusted is False

    def test_panic_duplicate_escalates(self, tables, player):
        """Test a live panic condition escalates to the next row."""
        create_effect(player, "panic_hesitant", "Hesitant", 3, created_at=1)
        resolution = DuplicatePolicy(tables).resolve_roll(player, RollType.PANIC, 6)
        assert resolution.entry.entry_id == "panic_freeze"
        assert resolution.duplicate_adjusted is True
        assert resolution.duplicate_from_id == "panic_hesitant"
        assert resolution.duplicate_from_label == "Hesitant"

    def test_non_persistent_rows_never_escalate(self, tables, player):
        """Test one-off rows are not duplicates even with a matching effect."""
        create_effect(player, "panic_noisy", "Noisy", 2, created_at=1)
        resolution = DuplicatePolicy(tables).resolve_roll(player, RollType.PANIC, 2)
        assert resolution.entry.entry_id == "panic_noisy"
        assert resolution.duplicate_adjusted is False

    def test_stress_rolls_never_escalate(self, tables, player):
        """Test stress duplicates resolve normally at roll time."""
        create_effect(player, "stress_jumpy", "Jumpy", 2, created_at=1)
        resolution = DuplicatePolicy(tables).resolve_roll(player, RollType.STRESS, 1)
        assert resolution.entry.entry_id == "stress_jumpy"
        assert resolution.duplicate_adjusted is False

    def test_stress_duplicate_detection(self, tables, player):
        """Test the apply-time stress duplicate check."""
        policy = DuplicatePolicy(tables)
        jumpy = tables.resolve_by_id("stress", "stress_jumpy")
        assert policy.is_stress_duplicate(player, RollType.STRESS, jumpy) is False
        create_effect(player, "stress_jumpy", "Jumpy", 2, created_at=1)
        assert policy.is_stress_duplicate(player, RollType.STRESS, jumpy) is True

    def test_panic_entries_are_not_stress_duplicates(self, tables, player):
        """Test the stress duplicate rule ignores panic rolls."""
        freeze = tables.resolve_by_id("panic", "panic_freeze")
        create_effect(player, "panic_freeze", "Freeze", 4, created_at=1)
        assert DuplicatePolicy(tables).is_stress_duplicate(player, RollType.PANIC, freeze) is False
