"""
nuggies.config — YAML Configuration Loader
===========================================

**Why this file exists:**
This module reads ``config.yaml`` for **soft** settings (bot identity, the
admin owner id, the reference time zone, upstream model names, the persona
prompt).  Secrets — the Discord token, API keys and ``DATABASE_URL`` — stay
in the environment (``.env``) and are never written to YAML.

Usage::

    from nuggies.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.bot_name)          # "Nuggies"
    print(cfg.timezone)          # "Europe/Berlin"
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml

from nuggies.constants import DEFAULT_TIMEZONE

DEFAULT_PERSONA_PROMPT = (
    "You are an Female AI assistant called 'Nuggies'."
    "You have a somewhat friendly, norse nordic, slightly pagan, with a healthy "
    "dose of cute sarcasm, gothic and somewhat unhinged personality."
    "dont Roleplay"
)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class NuggiesConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    bot_name: str

    # Admin: the only account allowed to fire ``assignrole:*`` triggers
    owner_id: int

    # Economy calendar — claims are keyed to days in this zone, not UTC
    timezone: str = DEFAULT_TIMEZONE

    # Upstreams
    gemini_model: str = "gemini-1.5-flash"
    gif_query: str = "fox"
    default_gif_url: str = "https://media.tenor.com/YxT1w3VX5BAAAAAM/fox-dance.gif"
    upstream_timeout: float = 20.0

    # Persona + triggers
    persona_prompt: str = DEFAULT_PERSONA_PROMPT
    constantinople_image: str = "constantinople.png"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> NuggiesConfig:
    """Read *path* and return a :class:`NuggiesConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    optional: dict = {}
    for key in (
        "timezone",
        "gemini_model",
        "gif_query",
        "default_gif_url",
        "persona_prompt",
        "constantinople_image",
    ):
        if raw.get(key):
            optional[key] = str(raw[key])
    if raw.get("upstream_timeout"):
        optional["upstream_timeout"] = float(raw["upstream_timeout"])

    cfg = NuggiesConfig(
        bot_name=raw["bot_name"],
        owner_id=int(raw["owner_id"]),
        **optional,
    )
    # Raises ZoneInfoNotFoundError at startup rather than on the first /daily
    ZoneInfo(cfg.timezone)
    return cfg
