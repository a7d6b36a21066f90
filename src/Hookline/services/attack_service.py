# services/attack_service.py

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import structlog

from Hookline.logging import bind_attack_context
from Hookline.metrics import (
    record_attack_duration,
    record_attack_error,
    record_attack_outcome,
    record_location_resolved,
)
from Hookline.rules.attack import requires_location
from Hookline.rules.dice import RollResult
from Hookline.rules.engine import HookLineRuleset, Ruleset
from Hookline.rules.errors import InvalidInput, MissingZoneData, RulesError
from Hookline.rules.location import LocationResult
from Hookline.rules.types import Combatant, OutcomeRecord
from Hookline.zone_tables import ZoneTableProvider

log = structlog.get_logger()


def roll_to_dict(roll: RollResult) -> dict[str, Any]:
    return {
        "formula": roll.formula,
        "total": roll.total,
        "faces": {str(size): list(vals) for size, vals in roll.faces.items()},
    }


@dataclass(frozen=True)
class AttackReport:
    attacker: str
    defender: str
    attack_roll: RollResult
    # As given by the caller; fractional defences are kept, not truncated
    defence_value: int | float
    outcome: OutcomeRecord
    location: LocationResult | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "attacker": self.attacker,
            "defender": self.defender,
            "attack_roll": roll_to_dict(self.attack_roll),
            "defence": self.defence_value,
            "margin": self.outcome.margin,
            "original": self.outcome.original.value,
            "upgraded": self.outcome.upgraded.value if self.outcome.upgraded else None,
            "effective": self.outcome.effective.value,
            "location": None,
        }
        if self.location is not None:
            loc = self.location
            out["location"] = {
                # Presentation hides the zone roll when it is the fixed placeholder
                "location_roll": None if loc.is_predetermined else roll_to_dict(loc.location_roll),
                "zone": loc.zone.location,
                "column": loc.column_roll.total,
                "columns": loc.zone.columns,
            }
        return out


async def resolve_attack(
    attack_roll: RollResult,
    defence_value: int | float,
    can_crit: bool,
    defender: Combatant,
    *,
    zones: ZoneTableProvider,
    ruleset: Ruleset,
    attacker_name: str = "",
) -> AttackReport:
    """Classify an already-rolled attack and resolve its location on a plain hit."""
    outcome = ruleset.determine_hit_margin(attack_roll, defence_value, can_crit)
    record_attack_outcome(outcome)
    log.info(
        "attack.roll.completed",
        total=attack_roll.total,
        defence=defence_value,
        margin=outcome.margin,
        original=outcome.original.value,
        upgraded=outcome.upgraded.value if outcome.upgraded else None,
    )

    location: LocationResult | None = None
    if requires_location(outcome):
        table = await zones.get_zone_table(defender.size)
        if table is None:
            raise MissingZoneData(defender.name, defender.size)
        location = ruleset.roll_hit_location(table)
        record_location_resolved(location.zone.location)
        log.info(
            "attack.location.resolved",
            zone=location.zone.location,
            location_total=location.location_roll.total,
            column=location.column_roll.total,
        )

    return AttackReport(
        attacker=attacker_name,
        defender=defender.name,
        attack_roll=attack_roll,
        defence_value=defence_value,
        outcome=outcome,
        location=location,
    )


async def roll_to_hit(
    attacker: Combatant,
    attack_key: str,
    defender: Combatant,
    die_count: int,
    die_size: int,
    *,
    zones: ZoneTableProvider,
    ruleset: Ruleset | None = None,
) -> AttackReport:
    """Roll an attacker's attribute against a defender and resolve the outcome.

    The defender is always passed explicitly; nothing here looks at a
    "currently targeted" actor.
    """
    rs = ruleset if ruleset is not None else HookLineRuleset()
    start = time.perf_counter()
    with bind_attack_context(attacker.name, defender.name, attack_key=attack_key, size=defender.size):
        try:
            defence_key = rs.defence_attribute_for(attack_key)
            if defence_key is None:
                raise InvalidInput(f"{attack_key!r} is not a targeted attribute")
            defence_value = defender.attribute(defence_key)
            attack_roll = rs.roll_attribute(die_count, die_size, attacker.attribute(attack_key))
            report = await resolve_attack(
                attack_roll,
                defence_value,
                rs.can_crit(attacker.actor_type),
                defender,
                zones=zones,
                ruleset=rs,
                attacker_name=attacker.name,
            )
        except RulesError as exc:
            record_attack_error(exc)
            log.warning("attack.failed", error=type(exc).__name__, reason=str(exc))
            raise
    dur_ms = int((time.perf_counter() - start) * 1000)
    record_attack_duration(dur_ms)
    return report
