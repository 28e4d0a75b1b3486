"""
Tests for the mission log.
"""

from src.data_models import LogEntryType
from src.observability.mission_log import LogEntry, MissionLog


class TestMissionLog:
    """Tests for MissionLog."""

    def test_newest_first(self, clock):
        """Test entries are kept newest first."""
        log = MissionLog(clock=clock)
        log.add(LogEntryType.INFO, "first")
        log.add(LogEntryType.PANIC, "second")
        assert [e.message for e in log.entries] == ["second", "first"]
        assert log.entries[0].timestamp > log.entries[1].timestamp

    def test_capped(self, clock):
        """Test the oldest entries fall off past the cap."""
        log = MissionLog(cap=3, clock=clock)
        for i in range(5):
            log.add(LogEntryType.INFO, f"m{i}")
        assert [e.message for e in log.entries] == ["m4", "m3", "m2"]

    def test_default_cap(self):
        """Test the default cap."""
        assert MissionLog().cap == 100

    def test_entry_type_from_string(self, clock):
        """Test entry types may be given by value."""
        entry = MissionLog(clock=clock).add("health", "hurt")
        assert entry.type == LogEntryType.HEALTH

    def test_load_and_export(self, clock):
        """Test serialized entries load back, bad items skipped."""
        log = MissionLog(clock=clock)
        log.add(LogEntryType.STRESS, "rolled", details="d6 3")
        data = log.to_list()
        assert data[0]["type"] == "stress"
        assert data[0]["details"] == "d6 3"

        other = MissionLog(clock=clock)
        other.load(data + ["junk"])
        assert [e.message for e in other.entries] == ["rolled"]

    def test_unknown_type_loads_as_info(self):
        """Test unknown entry types load as info."""
        entry = LogEntry.from_dict({"type": "gossip", "message": "hm"})
        assert entry.type == LogEntryType.INFO

    def test_format_log(self, clock):
        """Test the readable format."""
        log = MissionLog(clock=clock)
        log.add(LogEntryType.SYSTEM, "PARTY CLEARED")
        text = log.format_log()
        assert text.startswith("=== Mission Log ===")
        assert "SYSTEM PARTY CLEARED" in text
