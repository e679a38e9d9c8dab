from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, fields
from pathlib import Path

from .settings import Settings

log = logging.getLogger("statement_engine.settings")

APP_DIRNAME = "statement_engine"
FILENAME = "settings.json"


def _local_config_dir() -> Path:
    """Default location: inside the package folder (statement_engine/.statement_engine/).

    Override with STATEMENT_ENGINE_CONFIG_DIR (deployments, tests).
    """
    env_dir = (os.environ.get("STATEMENT_ENGINE_CONFIG_DIR") or "").strip()
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    package_dir = Path(__file__).resolve().parent
    return package_dir / f".{APP_DIRNAME}"


def _config_path() -> Path:
    cfg_dir = _local_config_dir()
    cfg_dir.mkdir(parents=True, exist_ok=True)
    return cfg_dir / FILENAME


def _read_settings_file(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        # A corrupt file must not take the engine down; user can delete it.
        log.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring settings file %s: expected a JSON object", path)
        return {}
    return data


def load_settings() -> Settings:
    """Load settings from the config dir, falling back to defaults.

    Unknown keys are ignored so older/newer files stay loadable.
    """
    data = _read_settings_file(_config_path())

    s = Settings()
    known = {f.name for f in fields(Settings)}
    for k, v in data.items():
        if k in known:
            setattr(s, k, v)
    return s


def save_settings(settings: Settings) -> None:
    """Save settings to the config dir."""
    path = _config_path()
    tmp = path.with_suffix(".tmp")

    data = asdict(settings)
    # Write atomically (reduce risk of partial writes)
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)
