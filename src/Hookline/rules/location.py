"""Hit location: pick a zone by range, then roll a column inside it."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .dice import DicePool, DiceRNG, RollResult
from .errors import InvalidInput, NoMatchingZone

log = structlog.get_logger()

PLACEHOLDER_FORMULA = "1"


class HitZone(BaseModel):
    location: str
    # Inclusive bounds are the first and last entries; the sequence may list
    # every value in between.
    range: tuple[int, ...] = Field(min_length=1)
    columns: int = Field(ge=1)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("range")
    @classmethod
    def validate_range(cls, v: tuple[int, ...]):
        if list(v) != sorted(v):
            raise ValueError(f"range must be sorted ascending, got {list(v)}")
        return v

    @property
    def low(self) -> int:
        return self.range[0]

    @property
    def high(self) -> int:
        return self.range[-1]

    def contains(self, total: int) -> bool:
        return self.low <= total <= self.high


class ZoneTable(BaseModel):
    location_roll: str = Field(default=PLACEHOLDER_FORMULA, alias="hitLocationRoll")
    regions: tuple[HitZone, ...] = Field(alias="hitRegions", min_length=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("location_roll", mode="before")
    @classmethod
    def default_location_roll(cls, v: Any):
        # Tables without a location roll use the fixed placeholder.
        if v is None or (isinstance(v, str) and not v.strip()):
            return PLACEHOLDER_FORMULA
        return str(v)

    @field_validator("location_roll")
    @classmethod
    def validate_location_roll(cls, v: str):
        DicePool.parse(v)
        return v

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> ZoneTable:
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInput(f"Invalid hit zone table: {exc}") from exc

    @property
    def pool(self) -> DicePool:
        return DicePool.parse(self.location_roll)


@dataclass(frozen=True)
class LocationResult:
    location_roll: RollResult
    zone: HitZone
    column_roll: RollResult

    @property
    def is_predetermined(self) -> bool:
        """True when the zone roll was the fixed placeholder and carries no information."""
        return self.location_roll.is_placeholder


def find_zone(regions: Iterable[HitZone], total: int) -> HitZone | None:
    # First listed zone wins when ranges overlap.
    return next((zone for zone in regions if zone.contains(total)), None)


def resolve_location(table: ZoneTable, rng: DiceRNG) -> LocationResult:
    location_roll = rng.evaluate_pool(table.pool)
    zone = find_zone(table.regions, location_roll.total)
    if zone is None:
        log.warning(
            "rules.location.no_zone",
            total=location_roll.total,
            formula=location_roll.formula,
        )
        raise NoMatchingZone(location_roll.total, [(z.low, z.high) for z in table.regions])
    column_roll = rng.evaluate(1, zone.columns, 0)
    log.debug(
        "rules.location.resolved",
        zone=zone.location,
        location_total=location_roll.total,
        column=column_roll.total,
    )
    return LocationResult(location_roll=location_roll, zone=zone, column_roll=column_roll)
