"""
Response tables and table resolution for BIOMON.

This module provides:
- Table entry and table types
- The static Stress and Panic tables
- Resolution by total and by id, and table validation
"""

from src.tables.table_types import (
    COVERAGE_MAX,
    COVERAGE_MIN,
    ApplyOption,
    ResponseTable,
    TableEntry,
    TableValidationError,
)
from src.tables.response_tables import PANIC_TABLE, STRESS_TABLE
from src.tables.table_manager import ESCALATION_SCAN_LIMIT, TableManager

__all__ = [
    "COVERAGE_MAX",
    "COVERAGE_MIN",
    "ESCALATION_SCAN_LIMIT",
    "ApplyOption",
    "ResponseTable",
    "TableEntry",
    "TableValidationError",
    "PANIC_TABLE",
    "STRESS_TABLE",
    "TableManager",
]
