"""
BIOMON Crew Monitor - Main Entry Point

Session aid for Alien RPG style play: tracks crew vitals and runs the
Stress and Panic roll ritual.

This module provides the command line entry point. It validates the
response tables (selfcheck) or runs a short demonstration roll.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from src.data_models import MISSION_LOG_CAP, ROLL_FEED_CAP, DiceRoller, RollType
from src.game_state.crew_manager import CrewManager
from src.game_state.session_state import SessionState
from src.resolution.roll_engine import RollEngine
from src.tables.table_manager import TableManager
from src.tables.table_types import TableValidationError


# Configure logging
def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class MonitorConfig:
    """Configuration for a monitor session."""

    command: str = "selfcheck"
    seed: Optional[int] = None
    verbose: bool = False

    # Roll demo options
    roll_type: str = RollType.STRESS.value
    stress: int = 0
    resolve: int = 0
    modifiers: int = 0

    # Session limits
    roll_feed_cap: int = ROLL_FEED_CAP
    mission_log_cap: int = MISSION_LOG_CAP


# =============================================================================
# COMMANDS
# =============================================================================

def run_selfcheck(tables: Optional[TableManager] = None) -> int:
    """
    Validate every response table and report the result.

    Returns:
        Process exit code (0 on success)
    """
    tables = tables or TableManager()
    failed = False
    for table in tables.all_tables():
        errors = TableManager.check_table(table)
        if errors:
            failed = True
            print(f"{table.name}: FAILED")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"{table.name}: OK ({len(table)} entries)")

    if failed:
        return 1
    print("Self-check complete.")
    return 0


def run_demo_roll(config: MonitorConfig) -> int:
    """Roll once for a throwaway crew member, apply the outcome, then undo it."""
    tables = TableManager()
    try:
        tables.validate()
    except TableValidationError as e:
        print(f"Table validation failed: {e}")
        return 1

    state = SessionState(
        roll_feed_cap=config.roll_feed_cap,
        mission_log_cap=config.mission_log_cap,
    )
    crew = CrewManager(state)
    dice = DiceRoller(seed=config.seed)
    engine = RollEngine(state, tables=tables, dice=dice)

    player = crew.add_player("DEMO", stress=config.stress, resolve=config.resolve)
    rolled = engine.trigger(player.player_id, config.roll_type, config.modifiers)
    event = rolled.roll_event
    transaction = player.last_roll_event

    print(
        f"{event.roll_type.value.upper()} ROLL: d6 {event.die} + stress {event.stress} "
        f"- resolve {event.resolve} + mod {event.modifiers} = {event.total}"
    )
    for result in dice.get_roll_log():
        print(f"  {result} ({result.reason})")
    print(f"Result: {event.label}")
    print(f"  {event.description}")
    if transaction.duplicate_note:
        print(f"  {transaction.duplicate_note}")

    print(engine.apply(player.player_id, event.event_id))
    print(engine.apply_stress_delta(player.player_id, event.event_id))
    print(f"Stress now {player.stress}, live conditions: {[e.label for e in player.active_effects if e.is_live]}")
    print(engine.undo(player.player_id, event.event_id))
    print(f"Stress after undo {player.stress}")
    print()
    print(state.mission_log.format_log())
    return 0


# =============================================================================
# COMMAND LINE
# =============================================================================

def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="BIOMON Crew Monitor - Stress and Panic roll engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.main selfcheck
  python -m src.main roll --type panic --stress 5 --seed 42
  python -m src.main -v roll --modifiers 2
        """
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible rolls"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("selfcheck", help="Validate the response tables")

    roll_parser = subparsers.add_parser("roll", help="Run one demonstration roll")
    roll_parser.add_argument(
        "--type",
        dest="roll_type",
        choices=[t.value for t in RollType],
        default=RollType.STRESS.value,
        help="Table to roll on (default: stress)"
    )
    roll_parser.add_argument("--stress", type=int, default=0, help="Crew member stress (0-10)")
    roll_parser.add_argument("--resolve", type=int, default=0, help="Crew member resolve (0-10)")
    roll_parser.add_argument("--modifiers", type=int, default=0, help="Roll modifiers (-10 to 10)")

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> MonitorConfig:
    """Create MonitorConfig from parsed arguments."""
    return MonitorConfig(
        command=args.command or "selfcheck",
        seed=args.seed,
        verbose=args.verbose,
        roll_type=getattr(args, "roll_type", RollType.STRESS.value),
        stress=getattr(args, "stress", 0),
        resolve=getattr(args, "resolve", 0),
        modifiers=getattr(args, "modifiers", 0),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    config = create_config_from_args(args)
    setup_logging(config.verbose)
    logger.debug(f"Running {config.command} with {config}")

    if config.command == "roll":
        return run_demo_roll(config)
    return run_selfcheck()


if __name__ == "__main__":
    sys.exit(main())
