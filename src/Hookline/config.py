"""Settings loader for Hookline."""

from pathlib import Path
from typing import Any

import tomllib
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from Hookline.rules.attack import AttackRules


def _toml_settings_source() -> dict[str, Any]:
    """Load settings from config.toml with keys mapped to Settings fields.

    This source has LOWER priority than env/.env so those can override TOML.
    """
    cfg_path = Path("config.toml")
    if not cfg_path.exists():
        return {}
    with cfg_path.open("rb") as f:
        t = tomllib.load(f)
    rules_cfg = t.get("rules", {}) or {}
    out: dict[str, Any] = {
        "env": t.get("app", {}).get("env", "dev"),
        # [dice].seed pins the random source for reproducible sessions
        "rng_seed": (t.get("dice", {}) or {}).get("seed"),
        "zone_tables_path": (t.get("zones", {}) or {}).get("tables_path"),
        "rules_crit_margin": rules_cfg.get("crit_margin", 5),
        "rules_upgrade_die_faces": rules_cfg.get("upgrade_die_faces", 6),
        "rules_upgrade_min_count": rules_cfg.get("upgrade_min_count", 2),
        # Logging config
        "logging_level": t.get("logging", {}).get("level", "INFO"),
        "logging_console": None,
        "logging_file": None,
        "logging_file_path": t.get("logging", {}).get("file_path", "logs/hookline.jsonl"),
        "logging_max_bytes": t.get("logging", {}).get("max_bytes", 5_000_000),
        "logging_backup_count": t.get("logging", {}).get("backup_count", 5),
    }

    log_cfg = t.get("logging", {}) or {}
    # Per-handler levels: strings INFO|DEBUG|WARNING|ERROR|CRITICAL|NONE
    # Booleans map True -> overall level, False -> NONE
    overall = out["logging_level"]

    def _norm_level(v, default):
        if isinstance(v, str):
            return v.upper()
        if isinstance(v, bool):
            return default if v else "NONE"
        return default

    out["logging_console"] = _norm_level(log_cfg.get("console", None), overall)
    out["logging_file"] = _norm_level(log_cfg.get("to_file", None), overall)
    return out


class Settings(BaseSettings):
    env: str = Field(default="dev")

    # --- Dice ---
    rng_seed: int | None = None

    # --- Zone tables ---
    zone_tables_path: str | None = Field(
        default=None, description="TOML or JSON file with hit-zone tables per size profile."
    )

    # --- Rules constants ---
    rules_crit_margin: int = 5
    rules_upgrade_die_faces: int = 6
    rules_upgrade_min_count: int = 2

    # --- Logging ---
    logging_level: str = "INFO"
    logging_console: str = "INFO"
    logging_file: str = "NONE"
    logging_file_path: str = "logs/hookline.jsonl"
    logging_max_bytes: int = 5_000_000
    logging_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_prefix="HOOKLINE_",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",  # Safely ignore any extra env vars
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Precedence (highest to lowest):
        # 1) init_settings (explicit overrides in code/tests)
        # 2) dotenv (.env in cwd): developer-local overrides
        # 3) env_settings (OS env)
        # 4) TOML (repo config.toml): project defaults
        # 5) file_secret_settings
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            _toml_settings_source,
            file_secret_settings,
        )

    def attack_rules(self) -> AttackRules:
        return AttackRules(
            crit_margin=self.rules_crit_margin,
            upgrade_die_faces=self.rules_upgrade_die_faces,
            upgrade_min_count=self.rules_upgrade_min_count,
        )


def load_settings() -> Settings:
    return Settings()
