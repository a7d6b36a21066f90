"""Hit zone tables keyed by defender size profile.

Tables are validated when loaded so resolution never sees an empty or
unsorted range. File layout (TOML shown, JSON uses the same shape)::

    [medium]
    hitLocationRoll = "1d6"

    [[medium.hitRegions]]
    location = "head"
    range = [1, 2]
    columns = 3
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import structlog
import tomllib

from Hookline.rules.errors import InvalidInput
from Hookline.rules.location import ZoneTable

log = structlog.get_logger()


class ZoneTableProvider(Protocol):
    async def get_zone_table(self, profile: str | None) -> ZoneTable | None:
        """Return the table for a size profile, or None when there is none."""


class StaticZoneTableProvider:
    """In-memory provider over already-validated tables."""

    def __init__(self, tables: Mapping[str, ZoneTable] | None = None):
        self._tables: dict[str, ZoneTable] = dict(tables or {})

    async def get_zone_table(self, profile: str | None) -> ZoneTable | None:
        if profile is None:
            return None
        return self._tables.get(profile)

    def profiles(self) -> list[str]:
        return sorted(self._tables)


def parse_zone_tables(data: Mapping[str, Any]) -> dict[str, ZoneTable]:
    if not isinstance(data, Mapping):
        raise InvalidInput("Zone table data must be a mapping of profile -> table")
    tables: dict[str, ZoneTable] = {}
    for profile, raw in data.items():
        if not isinstance(raw, Mapping):
            raise InvalidInput(f"Zone table for {profile!r} must be a mapping")
        try:
            tables[str(profile)] = ZoneTable.from_data(dict(raw))
        except InvalidInput as exc:
            raise InvalidInput(f"Profile {profile!r}: {exc}") from exc
    return tables


def load_zone_tables(path: str | Path) -> dict[str, ZoneTable]:
    p = Path(path)
    suffix = p.suffix.lower()
    try:
        if suffix == ".toml":
            with p.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            data = json.loads(p.read_text(encoding="utf-8"))
        else:
            raise InvalidInput(f"Unsupported zone table format: {p.name}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise InvalidInput(f"Could not parse {p.name}: {exc}") from exc
    tables = parse_zone_tables(data)
    log.info("zone_tables.loaded", path=str(p), profiles=sorted(tables))
    return tables
