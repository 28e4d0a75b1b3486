"""
Tests for the response tables and table resolution.

Tests lookup by total and id, the forward scan, apply option validation,
and the structural checks every table must pass.
"""

import pytest

from src.data_models import DurationType, RollType
from src.tables import (
    COVERAGE_MAX,
    COVERAGE_MIN,
    ESCALATION_SCAN_LIMIT,
    PANIC_TABLE,
    STRESS_TABLE,
    ApplyOption,
    ResponseTable,
    TableEntry,
    TableManager,
    TableValidationError,
)


def entry(lo, hi, entry_id, **kwargs):
    kwargs.setdefault("label", entry_id.title())
    kwargs.setdefault("description", "")
    return TableEntry(roll_min=lo, roll_max=hi, entry_id=entry_id, **kwargs)


# =============================================================================
# STATIC TABLES
# =============================================================================


class TestStaticTables:
    """Tests for the shipped Stress and Panic tables."""

    def test_static_tables_validate(self, tables):
        """Test both shipped tables pass validation."""
        assert TableManager.check_table(STRESS_TABLE) == []
        assert TableManager.check_table(PANIC_TABLE) == []

    def test_table_sizes(self):
        """Test the tables carry every response row."""
        assert len(STRESS_TABLE) == 8
        assert len(PANIC_TABLE) == 13

    def test_full_coverage(self):
        """Test the tables span the whole resolvable range."""
        for table in (STRESS_TABLE, PANIC_TABLE):
            assert table.get_min_roll() <= COVERAGE_MIN
            assert table.get_max_roll() >= COVERAGE_MAX

    def test_persistent_entries_have_duration(self):
        """Test duration type is present exactly on persistent rows."""
        for table in (STRESS_TABLE, PANIC_TABLE):
            for row in table.entries:
                assert (row.duration_type is not None) == row.persistent

    def test_known_rows(self):
        """Test a few rows from each table."""
        flee = PANIC_TABLE.get_entry("panic_flee")
        assert flee.matches_roll(10)
        assert flee.severity == 5
        assert flee.signed_stress_delta == -1
        assert flee.duration_type == DurationType.MANUAL

        mess_up = STRESS_TABLE.get_entry("stress_mess_up")
        assert not mess_up.persistent
        assert mess_up.signed_stress_delta == 1


# =============================================================================
# RESOLUTION
# =============================================================================


class TestResolveByTotal:
    """Tests for TableManager.resolve_by_total."""

    @pytest.mark.parametrize("total,expected", [
        (-999, "stress_keeping_cool"),
        (0, "stress_keeping_cool"),
        (1, "stress_jumpy"),
        (6, "stress_deflated"),
        (7, "stress_mess_up"),
        (30, "stress_mess_up"),
    ])
    def test_stress_lookup(self, tables, total, expected):
        """Test stress totals land on the right rows."""
        assert tables.resolve_by_total("stress", total).entry_id == expected

    @pytest.mark.parametrize("total,expected", [
        (-5, "panic_keeping_cool"),
        (1, "panic_spooked"),
        (8, "panic_seek_cover"),
        (11, "panic_frenzy"),
        (12, "panic_catatonic"),
    ])
    def test_panic_lookup(self, tables, total, expected):
        """Test panic totals land on the right rows."""
        assert tables.resolve_by_total(RollType.PANIC, total).entry_id == expected

    def test_out_of_range_totals_clamp(self, tables):
        """Test totals beyond coverage still resolve."""
        assert tables.resolve_by_total("panic", 10**6).entry_id == "panic_catatonic"
        assert tables.resolve_by_total("panic", -10**6).entry_id == "panic_keeping_cool"

    def test_non_numeric_total(self, tables):
        """Test junk totals collapse to the bottom row."""
        assert tables.resolve_by_total("stress", "abc").entry_id == "stress_keeping_cool"

    def test_unknown_type_uses_stress(self, tables):
        """Test unknown roll types resolve against the stress table."""
        assert tables.get_table("unknown") is tables.get_table(RollType.STRESS)


class TestResolveById:
    """Tests for TableManager.resolve_by_id."""

    def test_known_id(self, tables):
        """Test exact lookup by id."""
        assert tables.resolve_by_id("panic", "panic_scream").label == "Scream"

    def test_unknown_and_empty_ids(self, tables):
        """Test unknown or empty ids return None."""
        assert tables.resolve_by_id("panic", "stress_jumpy") is None
        assert tables.resolve_by_id("panic", "") is None
        assert tables.resolve_by_id("panic", None) is None


class TestNextHigherDifferent:
    """Tests for the forward scan used by duplicate escalation."""

    def test_steps_to_next_row(self, tables):
        """Test the scan finds the next row up."""
        found = tables.next_higher_different("panic", 7, "panic_freeze")
        assert found.entry_id == "panic_seek_cover"

    def test_skips_rows_with_same_id(self, tables):
        """Test the scan walks past a wide row with the same id."""
        found = tables.next_higher_different("stress", -500, "stress_keeping_cool")
        assert found is None

        found = tables.next_higher_different("stress", -20, "stress_keeping_cool")
        assert found.entry_id == "stress_jumpy"

    def test_top_row_has_nothing_higher(self, tables):
        """Test the open-ended top row yields None."""
        assert tables.next_higher_different("panic", 12, "panic_catatonic") is None

    def test_scan_limit(self):
        """Test the scan gives up after the step limit."""
        assert ESCALATION_SCAN_LIMIT == 25


class TestApplyOptions:
    """Tests for apply option validation."""

    def test_valid_options_kept(self, tables):
        """Test resolvable options are returned in order."""
        seek = tables.resolve_by_id("panic", "panic_seek_cover")
        options = tables.validated_apply_options("panic", seek)
        assert [o.entry_id for o in options] == ["panic_seek_cover", "panic_scream"]

    def test_no_options_is_none(self, tables):
        """Test entries without options return None."""
        assert tables.validated_apply_options("panic", tables.resolve_by_id("panic", "panic_noisy")) is None

    def test_stale_options_dropped_and_labels_filled(self):
        """Test unresolvable options drop and blank labels fall back."""
        row = entry(
            COVERAGE_MIN, COVERAGE_MAX, "only",
            apply_options=(ApplyOption("only", ""), ApplyOption("gone", "Apply: Gone")),
        )
        manager = TableManager([ResponseTable("t", "Test", RollType.STRESS, [row])])
        options = manager.validated_apply_options("stress", row)
        assert options == [ApplyOption("only", "Only")]


# =============================================================================
# VALIDATION
# =============================================================================


class TestTableValidation:
    """Tests for the structural table checks."""

    def make_table(self, *rows):
        return ResponseTable("t", "Broken Table", RollType.STRESS, list(rows))

    def test_gap_detected(self):
        """Test a gap between rows is reported."""
        table = self.make_table(entry(COVERAGE_MIN, 0, "a"), entry(2, COVERAGE_MAX, "b"))
        errors = TableManager.check_table(table)
        assert any("gap" in e for e in errors)

    def test_overlap_detected(self):
        """Test overlapping rows are reported."""
        table = self.make_table(entry(COVERAGE_MIN, 3, "a"), entry(2, COVERAGE_MAX, "b"))
        assert any("overlap" in e for e in TableManager.check_table(table))

    def test_duplicate_ids_detected(self):
        """Test repeated ids are reported."""
        table = self.make_table(entry(COVERAGE_MIN, 0, "a"), entry(1, COVERAGE_MAX, "a"))
        assert any("duplicate id" in e for e in TableManager.check_table(table))

    def test_short_coverage_detected(self):
        """Test tables that do not reach the coverage bounds are reported."""
        table = self.make_table(entry(-10, 30, "a"))
        errors = TableManager.check_table(table)
        assert len(errors) == 2

    def test_persistent_without_duration_detected(self):
        """Test persistent rows must carry a duration type."""
        table = self.make_table(entry(COVERAGE_MIN, COVERAGE_MAX, "a", persistent=True))
        assert any("duration" in e for e in TableManager.check_table(table))

    def test_bad_option_target_detected(self):
        """Test apply options must point at ids in the table."""
        table = self.make_table(
            entry(COVERAGE_MIN, COVERAGE_MAX, "a", apply_options=(ApplyOption("zzz", "Z"),))
        )
        assert any("zzz" in e for e in TableManager.check_table(table))

    def test_empty_table(self):
        """Test an empty table is reported."""
        assert TableManager.check_table(self.make_table()) == ["table has no entries"]

    def test_validate_raises(self):
        """Test validate raises with every problem listed."""
        broken = self.make_table(entry(-10, 0, "a"), entry(0, 30, "a"))
        manager = TableManager([broken])
        with pytest.raises(TableValidationError) as exc_info:
            manager.validate()
        assert exc_info.value.table_name == "Broken Table"
        assert len(exc_info.value.errors) >= 3
        assert isinstance(exc_info.value, ValueError)
