"""
Stress and Panic response tables (Alien RPG crew stress rules).

Rolls are d6 + stress - resolve + modifiers. Low totals keep cool; high
totals push the crew member into escalating responses, most of which
persist until the GM clears them.
"""

from src.data_models import DurationType, RollType
from src.tables.table_types import ApplyOption, ResponseTable, TableEntry


STRESS_TABLE = ResponseTable(
    table_id="stress",
    name="Stress Table",
    roll_type=RollType.STRESS,
    description="Roll when a crew member pushes a roll or suffers a stress trigger",
    entries=[
        TableEntry(
            roll_min=-999,
            roll_max=0,
            entry_id="stress_keeping_cool",
            label="Keeping Cool",
            description="No effect.",
            severity=1,
        ),
        TableEntry(
            roll_min=1,
            roll_max=1,
            entry_id="stress_jumpy",
            label="Jumpy",
            description="When you push a skill roll, you gain +2 stress level instead of +1.",
            severity=2,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=2,
            roll_max=2,
            entry_id="stress_tunnel_vision",
            label="Tunnel Vision",
            description="All skill rolls based on Wits get -2 dice.",
            severity=2,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=3,
            roll_max=3,
            entry_id="stress_aggravated",
            label="Aggravated",
            description="All skill rolls based on Empathy get -2 dice.",
            severity=2,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=4,
            roll_max=4,
            entry_id="stress_shakes",
            label="Shakes",
            description="All skill rolls based on Agility get -2 dice.",
            severity=2,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=5,
            roll_max=5,
            entry_id="stress_frantic",
            label="Frantic",
            description="All skill rolls based on Strength get -2 dice.",
            severity=2,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=6,
            roll_max=6,
            entry_id="stress_deflated",
            label="Deflated",
            description=(
                "You cannot push any skill rolls. If you are Jumpy (#1 above), remove "
                "that response, and ignore any further Jumpy results while Deflated."
            ),
            severity=3,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=7,
            roll_max=999,
            entry_id="stress_mess_up",
            label="Mess Up",
            description=(
                "Your action fails regardless of successes rolled and you gain "
                "+1 stress level."
            ),
            severity=4,
            stress_delta=1,
        ),
    ],
)


PANIC_TABLE = ResponseTable(
    table_id="panic",
    name="Panic Table",
    roll_type=RollType.PANIC,
    description="Roll when a crew member rolls a facehugger on a stress die",
    entries=[
        TableEntry(
            roll_min=-999,
            roll_max=0,
            entry_id="panic_keeping_cool",
            label="Keeping Cool",
            description="No effect.",
            severity=1,
        ),
        TableEntry(
            roll_min=1,
            roll_max=1,
            entry_id="panic_spooked",
            label="Spooked",
            description="Stress level +1 for you.",
            severity=2,
            stress_delta=1,
        ),
        TableEntry(
            roll_min=2,
            roll_max=2,
            entry_id="panic_noisy",
            label="Noisy",
            description=(
                "Any enemies nearby (GM's discretion) are automatically alerted to "
                "your presence."
            ),
            severity=2,
        ),
        TableEntry(
            roll_min=3,
            roll_max=3,
            entry_id="panic_twitchy",
            label="Twitchy",
            description=(
                "Make an immediate supply roll for air, ammo, or power (GM's discretion)."
            ),
            severity=2,
        ),
        TableEntry(
            roll_min=4,
            roll_max=4,
            entry_id="panic_lose_item",
            label="Lose Item",
            description=(
                "You lose a weapon or other important item. The GM decides which one. "
                "In combat, you can pick up the item with a quick action. Out of "
                "combat, you need an OBSERVATION roll and a stretch of time to find "
                "the item."
            ),
            severity=3,
        ),
        TableEntry(
            roll_min=5,
            roll_max=5,
            entry_id="panic_paranoid",
            label="Paranoid",
            description="You cannot give or receive help on skill rolls until panic ends.",
            severity=3,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=6,
            roll_max=6,
            entry_id="panic_hesitant",
            label="Hesitant",
            description=(
                "You automatically get the #10 initiative card in combat until your "
                "panic stops. If several PCs are Hesitant, draw the highest value "
                "cards randomly."
            ),
            severity=3,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=7,
            roll_max=7,
            entry_id="panic_freeze",
            label="Freeze",
            description=(
                "You're frozen by fear, losing your next turn and unable to perform "
                "any interrupt actions before then."
            ),
            severity=4,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=8,
            roll_max=8,
            entry_id="panic_seek_cover",
            label="Seek Cover",
            description=(
                "You immediately seek (full) cover in the zone, if it is cluttered. "
                "This is an interrupt action breaking the turn order. Once in cover, "
                "your stress level is reduced 1 step, but you lose your next turn and "
                "are unable to perform any interrupt actions before then. If you are "
                "in an open zone, you Scream instead."
            ),
            severity=4,
            persistent=True,
            duration_type=DurationType.MANUAL,
            stress_delta=-1,
            apply_options=(
                ApplyOption(entry_id="panic_seek_cover", label="Apply: Seek Cover"),
                ApplyOption(entry_id="panic_scream", label="Apply: Scream"),
            ),
        ),
        TableEntry(
            roll_min=9,
            roll_max=9,
            entry_id="panic_scream",
            label="Scream",
            description=(
                "You scream your lungs out, losing your next turn and unable to "
                "perform any interrupt actions before then. Your stress level is "
                "reduced 1 step, but every friendly PC in the zone must make an "
                "immediate panic roll."
            ),
            severity=4,
            persistent=True,
            duration_type=DurationType.MANUAL,
            stress_delta=-1,
        ),
        TableEntry(
            roll_min=10,
            roll_max=10,
            entry_id="panic_flee",
            label="Flee",
            description=(
                "You immediately move away from the source of panic, into any "
                "adjacent zone, if such a move is possible. This is an interrupt "
                "action breaking the turn order. After the move, your stress level is "
                "reduced 1 step, but all friendly PCs in the starting zone get stress "
                "level +1. On your next turn and subsequent turns, you must spend all "
                "your actions to continue to move away, until you find a (reasonably) "
                "safe place, where you must remain until your panic stops. You cannot "
                "perform interrupt actions before then. If you cannot move out of "
                "your zone, you become Catatonic instead."
            ),
            severity=5,
            persistent=True,
            duration_type=DurationType.MANUAL,
            stress_delta=-1,
            apply_options=(
                ApplyOption(entry_id="panic_flee", label="Apply: Flee"),
                ApplyOption(entry_id="panic_catatonic", label="Apply: Catatonic"),
            ),
        ),
        TableEntry(
            roll_min=11,
            roll_max=11,
            entry_id="panic_frenzy",
            label="Frenzy",
            description=(
                "You immediately attack the nearest person or creature, friendly or "
                "not. Every friendly PC in the zone must make an immediate panic "
                "roll. You won't stop until you or the target is broken, or until "
                "your panic stops. You cannot perform interrupt actions before then."
            ),
            severity=5,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
        TableEntry(
            roll_min=12,
            roll_max=999,
            entry_id="panic_catatonic",
            label="Catatonic",
            description=(
                "You're doomed! You collapse to the floor and can't move, rambling or "
                "staring blankly into oblivion, until your panic stops."
            ),
            severity=5,
            persistent=True,
            duration_type=DurationType.MANUAL,
        ),
    ],
)
