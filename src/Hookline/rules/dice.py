# rules/dice.py

from __future__ import annotations

import random
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from .errors import InvalidInput

_FORMULA_RE = re.compile(r"^[+\-]?[^+\-]+(?:[+\-][^+\-]+)*$")
_TOKEN_RE = re.compile(r"(?P<sign>[+\-]?)(?P<body>[^+\-]+)")
_DICE_RE = re.compile(r"^(?P<count>\d+)?d(?P<sides>\d+)$")

_MAX_DICE = 100
_MAX_SIDES = 1000


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class DiceTerm:
    count: int
    size: int

    def __post_init__(self) -> None:
        if not _is_int(self.count) or self.count < 0:
            raise InvalidInput(f"Die count must be a non-negative integer, got {self.count!r}")
        if not _is_int(self.size) or self.size < 1:
            raise InvalidInput(f"Die size must be a positive integer, got {self.size!r}")
        if self.count > _MAX_DICE:
            raise InvalidInput(f"Too many dice: {self.count} (max {_MAX_DICE})")
        if self.size > _MAX_SIDES:
            raise InvalidInput(f"Too many sides: {self.size} (max {_MAX_SIDES})")

    @property
    def formula(self) -> str:
        return f"{self.count}d{self.size}"


@dataclass(frozen=True)
class DicePool:
    """Ordered dice terms plus a flat modifier.

    A pool made of a single size-1 term and no modifier is the placeholder
    used by zone tables without a real location roll; it renders as a bare
    integer (``"1"``) so callers can recognise it from the formula alone.
    """

    terms: tuple[DiceTerm, ...] = ()
    modifier: int = 0

    def __post_init__(self) -> None:
        if not _is_int(self.modifier):
            raise InvalidInput(f"Flat modifier must be an integer, got {self.modifier!r}")

    @classmethod
    def single(cls, die_count: int, die_size: int, modifier: int = 0) -> DicePool:
        return cls(terms=(DiceTerm(die_count, die_size),), modifier=modifier)

    @classmethod
    def parse(cls, formula: str) -> DicePool:
        """
        Supports: XdY, XdY+Z, XdY-Z, 2d6+1d8+3
        Special case: a bare integer N is N fixed size-1 dice ("1" is the placeholder).
        """
        text = str(formula).replace(" ", "").lower()
        if not text or not _FORMULA_RE.match(text):
            raise InvalidInput(f"Bad dice expression: {formula!r}")
        if text.isdigit():
            return cls.single(int(text), 1)

        terms: list[DiceTerm] = []
        modifier = 0
        for m in _TOKEN_RE.finditer(text):
            sign = -1 if m.group("sign") == "-" else 1
            body = m.group("body")
            if body.isdigit():
                modifier += sign * int(body)
                continue
            dm = _DICE_RE.match(body)
            if not dm or sign < 0:
                raise InvalidInput(f"Bad dice expression: {formula!r}")
            terms.append(DiceTerm(int(dm.group("count") or 1), int(dm.group("sides"))))
        return cls(terms=tuple(terms), modifier=modifier)

    @property
    def is_placeholder(self) -> bool:
        return self.terms == (DiceTerm(1, 1),) and self.modifier == 0

    @property
    def formula(self) -> str:
        if len(self.terms) == 1 and self.terms[0].size == 1 and self.modifier == 0:
            return str(self.terms[0].count)
        parts = [t.formula for t in self.terms]
        if not parts:
            return str(self.modifier)
        out = "+".join(parts)
        if self.modifier > 0:
            out += f"+{self.modifier}"
        elif self.modifier < 0:
            out += f"-{abs(self.modifier)}"
        return out


@dataclass(frozen=True)
class RollResult:
    formula: str
    total: int
    modifier: int = 0
    # die size -> faces rolled for dice of that size, in roll order (read-only view)
    faces: Mapping[int, tuple[int, ...]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        frozen = {int(size): tuple(vals) for size, vals in self.faces.items()}
        object.__setattr__(self, "faces", MappingProxyType(frozen))

    def faces_of(self, size: int) -> tuple[int, ...]:
        return self.faces.get(size, ())

    @property
    def rolls(self) -> list[int]:
        return [face for group in self.faces.values() for face in group]

    @property
    def is_placeholder(self) -> bool:
        return self.formula == "1"


class DiceRNG:
    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng if rng is not None else random.Random(seed)
        self._log = structlog.get_logger()

    def evaluate(self, die_count: int, die_size: int, flat_modifier: int = 0) -> RollResult:
        return self.evaluate_pool(DicePool.single(die_count, die_size, flat_modifier))

    def roll(self, formula: str) -> RollResult:
        return self.evaluate_pool(DicePool.parse(formula))

    def evaluate_pool(self, pool: DicePool) -> RollResult:
        self._log.debug("rules.dice.roll.start", formula=pool.formula)
        grouped: dict[int, list[int]] = {}
        for term in pool.terms:
            bucket = grouped.setdefault(term.size, [])
            if term.size == 1:
                # Fixed die: no randomness consumed.
                bucket.extend([1] * term.count)
            else:
                bucket.extend(self._rng.randint(1, term.size) for _ in range(term.count))
        faces = {size: tuple(vals) for size, vals in grouped.items()}
        total = sum(sum(vals) for vals in faces.values()) + pool.modifier
        out = RollResult(formula=pool.formula, total=total, modifier=pool.modifier, faces=faces)
        self._log.debug("rules.dice.roll.result", formula=out.formula, total=out.total, faces=faces)
        return out
