"""To-hit classification and the matching-sixes upgrade rule.

The margin is the attack total minus the defender's defence total:

* ``margin >= crit_margin`` from a crit-capable attacker is a crit,
* any other non-negative margin is a hit,
* a negative margin is a miss.

Independently of the margin, rolling the maximum face on more than one
six-sided die upgrades the attack to the best tier the attacker can reach
(crit for crit-capable attackers, hit otherwise). The upgrade is only
recorded when it changes the outcome.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real

import structlog

from .dice import RollResult
from .errors import InvalidInput
from .types import HitType, OutcomeRecord

log = structlog.get_logger()


@dataclass(frozen=True)
class AttackRules:
    crit_margin: int = 5
    # Only dice of exactly this size take part in the upgrade; it is a rule
    # constant, not the largest die in the pool.
    upgrade_die_faces: int = 6
    upgrade_min_count: int = 2

    def __post_init__(self) -> None:
        if self.upgrade_die_faces < 2:
            raise InvalidInput("upgrade_die_faces must be at least 2")
        if self.upgrade_min_count < 1:
            raise InvalidInput("upgrade_min_count must be at least 1")


DEFAULT_RULES = AttackRules()


def classify(margin: float, can_crit: bool, rules: AttackRules = DEFAULT_RULES) -> HitType:
    if margin >= rules.crit_margin and can_crit:
        return HitType.CRIT
    if margin >= 0:
        return HitType.HIT
    return HitType.MISS


def count_upgrade_faces(attack_roll: RollResult, rules: AttackRules = DEFAULT_RULES) -> int:
    faces = rules.upgrade_die_faces
    return sum(1 for face in attack_roll.faces_of(faces) if face == faces)


def upgrade_triggered(attack_roll: RollResult, rules: AttackRules = DEFAULT_RULES) -> bool:
    return count_upgrade_faces(attack_roll, rules) >= rules.upgrade_min_count


def upgrade_target(can_crit: bool) -> HitType:
    return HitType.CRIT if can_crit else HitType.HIT


def check_defence(defence_value: object) -> float:
    # Compared as given, never truncated: 10 against 10.5 is a miss.
    if isinstance(defence_value, bool) or not isinstance(defence_value, Real):
        raise InvalidInput(f"Defence must be a number, got {defence_value!r}")
    if not math.isfinite(defence_value):
        raise InvalidInput(f"Defence must be finite, got {defence_value!r}")
    return defence_value


def determine_hit_margin(
    attack_roll: RollResult,
    defence_value: float,
    can_crit: bool,
    rules: AttackRules = DEFAULT_RULES,
) -> OutcomeRecord:
    margin = attack_roll.total - check_defence(defence_value)
    original = classify(margin, can_crit, rules)
    upgraded: HitType | None = None
    if upgrade_triggered(attack_roll, rules):
        target = upgrade_target(can_crit)
        if target is not original:
            upgraded = target
    log.debug(
        "rules.attack.classified",
        margin=margin,
        can_crit=can_crit,
        original=original.value,
        upgraded=upgraded.value if upgraded else None,
    )
    return OutcomeRecord(original=original, upgraded=upgraded, margin=margin)


def requires_location(outcome: OutcomeRecord) -> bool:
    """Only a plain hit (after any upgrade) rolls for location."""
    return outcome.effective is HitType.HIT
