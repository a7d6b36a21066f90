"""
Command line entry point for rolling dice and resolving single attacks.

Examples:
  hookline roll 2d6+3 --seed 7
  hookline attack --pool 3d6+2 --defence 10 --can-crit --profile medium --tables zones.toml

Results are printed as JSON so another tool can render them.
"""

from __future__ import annotations

import asyncio
import json

import click

from Hookline.config import load_settings
from Hookline.logging import setup_logging
from Hookline.rules.engine import HookLineRuleset
from Hookline.rules.errors import RulesError
from Hookline.rules.types import ActorType, Combatant
from Hookline.services.attack_service import resolve_attack, roll_to_dict
from Hookline.zone_tables import StaticZoneTableProvider, load_zone_tables


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    settings = load_settings()
    setup_logging(settings)
    ctx.obj = settings


@main.command()
@click.argument("formula")
@click.option("--seed", type=int, default=None, help="Seed for the random source.")
@click.pass_obj
def roll(settings, formula: str, seed: int | None) -> None:
    """Roll a dice formula such as 2d6+3."""
    rs = HookLineRuleset(seed if seed is not None else settings.rng_seed)
    try:
        res = rs.roll_dice(formula)
    except RulesError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(roll_to_dict(res)))


@main.command()
@click.option("--pool", "pool", required=True, help="Attacker dice formula, e.g. 3d6+2.")
@click.option("--defence", type=float, required=True, help="Defender's defence total.")
@click.option("--can-crit/--no-crit", default=False, help="Whether the attacker can crit.")
@click.option("--profile", default=None, help="Defender size profile in the zone tables.")
@click.option("--tables", "tables_path", default=None, type=click.Path(dir_okay=False), help="Zone table file.")
@click.option("--seed", type=int, default=None, help="Seed for the random source.")
@click.pass_obj
def attack(settings, pool, defence, can_crit, profile, tables_path, seed) -> None:
    """Resolve one attack roll against a defence value."""
    # Whole defences stay ints in the report; fractional ones are kept as given
    if defence.is_integer():
        defence = int(defence)
    rs = HookLineRuleset(
        seed if seed is not None else settings.rng_seed,
        rules=settings.attack_rules(),
    )
    path = tables_path or settings.zone_tables_path
    try:
        zones = StaticZoneTableProvider(load_zone_tables(path) if path else {})
        attack_roll = rs.roll_dice(pool)
        defender = Combatant(name=profile or "defender", actor_type=ActorType.FISH, size=profile)
        report = asyncio.run(
            resolve_attack(attack_roll, defence, can_crit, defender, zones=zones, ruleset=rs)
        )
    except (RulesError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(report.to_dict()))


if __name__ == "__main__":  # pragma: no cover
    main()
