"""Roll resolution module.

Provides the roll transaction records, the duplicate result policy and
the roll engine that drives Stress and Panic rolls.
"""

from src.resolution.roll_transaction import RollEvent, RollTransaction
from src.resolution.duplicate_policy import DuplicatePolicy, RollResolution
from src.resolution.roll_engine import RollActionResult, RollEngine

__all__ = [
    "RollEvent",
    "RollTransaction",
    "DuplicatePolicy",
    "RollResolution",
    "RollActionResult",
    "RollEngine",
]
