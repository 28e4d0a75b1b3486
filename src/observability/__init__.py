"""
Observability for the BIOMON crew monitor.

Provides the mission log: the capped, human-readable record of crew
changes, rolls and conditions kept with each session.
"""

from src.observability.mission_log import LogEntry, MissionLog

__all__ = [
    "LogEntry",
    "MissionLog",
]
