"""
tests/test_config.py — YAML Configuration Loader Tests
=======================================================
"""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from nuggies.config import DEFAULT_PERSONA_PROMPT, load_config


def _write(tmp_path, text: str):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_minimal_config_uses_defaults(tmp_path):
    cfg = load_config(_write(tmp_path, "bot_name: Nuggies\nowner_id: 42\n"))
    assert cfg.bot_name == "Nuggies"
    assert cfg.owner_id == 42
    assert cfg.timezone == "Europe/Berlin"
    assert cfg.tz == ZoneInfo("Europe/Berlin")
    assert cfg.gif_query == "fox"
    assert cfg.upstream_timeout == 20.0
    assert cfg.persona_prompt == DEFAULT_PERSONA_PROMPT


def test_overrides(tmp_path):
    cfg = load_config(_write(tmp_path, (
        "bot_name: Nugs\n"
        "owner_id: '241614046913101825'\n"
        "timezone: Europe/Stockholm\n"
        "gif_query: red panda\n"
        "upstream_timeout: 5\n"
    )))
    assert cfg.owner_id == 241614046913101825
    assert cfg.timezone == "Europe/Stockholm"
    assert cfg.gif_query == "red panda"
    assert cfg.upstream_timeout == 5.0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="config.yaml.example"):
        load_config(tmp_path / "nope.yaml")


def test_missing_required_key(tmp_path):
    with pytest.raises(KeyError):
        load_config(_write(tmp_path, "bot_name: Nuggies\n"))


def test_unknown_timezone_fails_at_load(tmp_path):
    with pytest.raises(ZoneInfoNotFoundError):
        load_config(_write(tmp_path, "bot_name: N\nowner_id: 1\ntimezone: Mars/Olympus\n"))
