"""
Pytest fixtures for the BIOMON roll engine test suite.

Provides a controllable die, a fresh session with one crew member, and
the engine and crew manager wired to that session.
"""

import pytest

from src.data_models import DiceResult, DiceRoller
from src.game_state.crew_manager import CrewManager
from src.game_state.session_state import SessionState
from src.resolution.roll_engine import RollEngine
from src.tables.table_manager import TableManager


# =============================================================================
# DICE FIXTURES
# =============================================================================


class FixedDice(DiceRoller):
    """DiceRoller whose d6 always shows the value it was last set to."""

    def __init__(self, value: int = 1):
        super().__init__(seed=0)
        self.value = value

    def set(self, value: int) -> None:
        self.value = value

    def roll_d6(self, num_dice: int = 1, reason: str = "") -> DiceResult:
        result = DiceResult(
            notation=f"{num_dice}d6",
            rolls=[self.value] * num_dice,
            total=self.value * num_dice,
            reason=reason,
        )
        self._roll_log.append(result)
        return result


class FakeClock:
    """Monotonic epoch-ms clock for deterministic timestamps."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def dice():
    """A d6 that shows 1 until told otherwise."""
    return FixedDice(1)


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    return DiceRoller(seed=42)


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def tables():
    """The validated Stress and Panic tables."""
    manager = TableManager()
    manager.validate()
    return manager


@pytest.fixture
def state(clock):
    """An empty session."""
    return SessionState(clock=clock)


@pytest.fixture
def crew(state, clock):
    return CrewManager(state, clock=clock)


@pytest.fixture
def engine(state, tables, dice, clock):
    """Roll engine over the session, rolling the fixed die."""
    return RollEngine(state, tables=tables, dice=dice, clock=clock)


@pytest.fixture
def player(crew):
    """A crew member at full health with no stress or resolve."""
    return crew.add_player("Ripley")
