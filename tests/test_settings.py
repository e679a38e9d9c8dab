"""Tests for statement_engine.settings and statement_engine.settings_store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def cfg_dir(tmp_path: Path, monkeypatch) -> Path:
    d = tmp_path / "cfg"
    d.mkdir()
    monkeypatch.setenv("STATEMENT_ENGINE_CONFIG_DIR", str(d))
    return d


def test_settings_dataclass_defaults():
    """Settings dataclass should carry the parser defaults."""
    from statement_engine.settings import Settings

    s = Settings()
    assert s.line_tolerance == 5.0
    assert s.lookahead_lines == 2
    assert s.min_line_length == 5
    assert s.min_structured_transactions == 5
    assert s.balance_gap_ratio == pytest.approx(0.10)
    assert s.narration_placeholder == "Transaction"


def test_settings_dataclass_custom_values():
    from statement_engine.settings import Settings

    s = Settings(line_tolerance=3.0, lookahead_lines=4, narration_placeholder="N/A")
    assert s.line_tolerance == 3.0
    assert s.lookahead_lines == 4
    assert s.narration_placeholder == "N/A"


def test_app_metadata():
    from statement_engine.settings import APP_NAME, APP_VERSION

    assert APP_NAME == "statement-engine"
    assert APP_VERSION


def test_save_and_load_settings(cfg_dir: Path):
    """Settings should roundtrip through save/load."""
    from statement_engine.settings import Settings
    from statement_engine.settings_store import load_settings, save_settings

    save_settings(Settings(min_structured_transactions=3, max_upload_mb=5))

    loaded = load_settings()
    assert loaded.min_structured_transactions == 3
    assert loaded.max_upload_mb == 5
    assert (cfg_dir / "settings.json").exists()
    assert not (cfg_dir / "settings.tmp").exists()


def test_load_settings_missing_file(cfg_dir: Path):
    """load_settings should return defaults when no config file exists."""
    from statement_engine.settings_store import load_settings

    s = load_settings()
    assert s.lookahead_lines == 2
    assert s.min_structured_transactions == 5


def test_load_settings_ignores_unknown_keys(cfg_dir: Path):
    from statement_engine.settings_store import load_settings

    (cfg_dir / "settings.json").write_text(
        json.dumps({"lookahead_lines": 3, "whisper_model": "large"}),
        encoding="utf-8",
    )
    s = load_settings()
    assert s.lookahead_lines == 3
    assert not hasattr(s, "whisper_model")


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_load_settings_corrupt_file_falls_back_to_defaults(cfg_dir: Path, content: str):
    from statement_engine.settings_store import load_settings

    (cfg_dir / "settings.json").write_text(content, encoding="utf-8")
    s = load_settings()
    assert s.line_tolerance == 5.0
