from typing import Protocol

from .attack import DEFAULT_RULES, AttackRules, determine_hit_margin
from .dice import DicePool, DiceRNG, RollResult
from .location import LocationResult, ZoneTable, resolve_location
from .types import ActorType, OutcomeRecord

# Rolled attributes that target a defender, mapped to the defence they roll against.
TARGETED_ATTRIBUTES: dict[str, str] = {
    "close": "evade",
    "far": "evade",
    "mental": "willpower",
}


class Ruleset(Protocol):
    """
    Defines the interface for a game system's rules, abstracting away
    the specific mechanics of dice rolling and attack resolution.
    """

    def roll_dice(self, formula: str) -> RollResult:
        ...

    def roll_attribute(self, die_count: int, die_size: int, attribute_value: int | None = None) -> RollResult:
        ...

    def defence_attribute_for(self, attack_key: str) -> str | None:
        ...

    def can_crit(self, actor_type: ActorType) -> bool:
        ...

    def determine_hit_margin(self, attack_roll: RollResult, defence_value: float, can_crit: bool) -> OutcomeRecord:
        ...

    def roll_hit_location(self, table: ZoneTable) -> LocationResult:
        ...


class HookLineRuleset:
    """
    Fisher-versus-fish implementation of the Ruleset interface.
    """

    def __init__(self, seed: int | None = None, *, rules: AttackRules = DEFAULT_RULES, rng: DiceRNG | None = None):
        self.rng = rng if rng is not None else DiceRNG(seed)
        self.rules = rules

    def roll_dice(self, formula: str) -> RollResult:
        return self.rng.roll(formula)

    def roll_attribute(self, die_count: int, die_size: int, attribute_value: int | None = None) -> RollResult:
        # Untargeted/flat rolls have no attribute bonus: plain NdS
        modifier = 0 if attribute_value is None else attribute_value
        return self.rng.evaluate_pool(DicePool.single(die_count, die_size, modifier))

    def defence_attribute_for(self, attack_key: str) -> str | None:
        return TARGETED_ATTRIBUTES.get(attack_key)

    def can_crit(self, actor_type: ActorType) -> bool:
        return ActorType(actor_type) is ActorType.FISHER

    def determine_hit_margin(self, attack_roll: RollResult, defence_value: float, can_crit: bool) -> OutcomeRecord:
        return determine_hit_margin(attack_roll, defence_value, can_crit, self.rules)

    def roll_hit_location(self, table: ZoneTable) -> LocationResult:
        return resolve_location(table, self.rng)

