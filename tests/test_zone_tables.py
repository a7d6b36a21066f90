import json

import pytest

from Hookline.rules.errors import InvalidInput
from Hookline.zone_tables import StaticZoneTableProvider, load_zone_tables, parse_zone_tables

TOML_TABLES = """
[small]

[[small.hitRegions]]
location = "body"
range = [1]
columns = 4

[medium]
hitLocationRoll = "1d6"

[[medium.hitRegions]]
location = "head"
range = [1, 2]
columns = 3

[[medium.hitRegions]]
location = "tail"
range = [3, 4, 5, 6]
columns = 5
"""


def test_load_toml(tmp_path):
    p = tmp_path / "zones.toml"
    p.write_text(TOML_TABLES, encoding="utf-8")
    tables = load_zone_tables(p)
    assert sorted(tables) == ["medium", "small"]
    assert tables["small"].location_roll == "1"
    assert [z.location for z in tables["medium"].regions] == ["head", "tail"]
    assert tables["medium"].regions[1].high == 6


def test_load_json(tmp_path):
    p = tmp_path / "zones.json"
    p.write_text(
        json.dumps(
            {
                "large": {
                    "hitLocationRoll": "2d6",
                    "hitRegions": [{"location": "fin", "range": [2, 12], "columns": 6}],
                }
            }
        ),
        encoding="utf-8",
    )
    tables = load_zone_tables(p)
    assert tables["large"].pool.formula == "2d6"


def test_unsupported_suffix(tmp_path):
    p = tmp_path / "zones.yaml"
    p.write_text("large: {}", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_zone_tables(p)


def test_malformed_file(tmp_path):
    p = tmp_path / "zones.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidInput):
        load_zone_tables(p)


def test_invalid_profile_named_in_error():
    with pytest.raises(InvalidInput, match="'huge'"):
        parse_zone_tables({"huge": {"hitRegions": [{"location": "a", "range": [3, 1], "columns": 1}]}})


def test_profile_must_be_mapping():
    with pytest.raises(InvalidInput):
        parse_zone_tables({"huge": [1, 2, 3]})


@pytest.mark.asyncio
async def test_static_provider_lookup():
    tables = parse_zone_tables({"small": {"hitRegions": [{"location": "body", "range": [1], "columns": 2}]}})
    provider = StaticZoneTableProvider(tables)
    assert (await provider.get_zone_table("small")).regions[0].location == "body"
    assert await provider.get_zone_table("large") is None
    assert await provider.get_zone_table(None) is None
    assert provider.profiles() == ["small"]
