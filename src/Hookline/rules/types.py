from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidInput


class HitType(str, Enum):
    MISS = "miss"
    HIT = "hit"
    CRIT = "crit"


class ActorType(str, Enum):
    FISHER = "fisher"
    FISH = "fish"


@dataclass(frozen=True)
class OutcomeRecord:
    original: HitType
    upgraded: HitType | None = None
    margin: float = 0

    def __post_init__(self) -> None:
        if self.upgraded is None:
            return
        if self.upgraded is HitType.MISS:
            raise InvalidInput("An upgrade can never produce a miss")
        if self.upgraded is self.original:
            raise InvalidInput(f"Upgrade to {self.upgraded.value} repeats the original outcome")

    @property
    def effective(self) -> HitType:
        return self.upgraded if self.upgraded is not None else self.original

    @property
    def is_upgraded(self) -> bool:
        return self.upgraded is not None


@dataclass(frozen=True)
class Combatant:
    """Attacker or defender as handed over by the actor layer."""

    name: str
    actor_type: ActorType
    # attribute key -> total used for rolls (rolled attributes) or defence (flat ones)
    attributes: dict[str, int | float] = field(default_factory=dict)
    size: str | None = None

    def attribute(self, key: str) -> int | float:
        try:
            return self.attributes[key]
        except KeyError:
            raise InvalidInput(f"{self.name!r} has no {key!r} attribute") from None
