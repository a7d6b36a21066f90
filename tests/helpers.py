"""Shared builders for attack resolution tests."""

import random

from Hookline.rules.dice import DiceRNG, RollResult


def make_roll(faces: dict[int, tuple[int, ...]], modifier: int = 0, formula: str = "test") -> RollResult:
    total = sum(sum(v) for v in faces.values()) + modifier
    return RollResult(formula=formula, total=total, modifier=modifier, faces=dict(faces))


class ScriptedRandom(random.Random):
    """random.Random that hands out pre-chosen faces in order."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a, b):
        self.calls.append((a, b))
        if not self.values:
            raise AssertionError(f"unexpected randint({a}, {b})")
        v = self.values.pop(0)
        assert a <= v <= b, f"scripted value {v} outside [{a}, {b}]"
        return v


def scripted_rng(*values: int) -> DiceRNG:
    return DiceRNG(rng=ScriptedRandom(values))
