"""
Client configuration.

The API base URL resolves from, in order: an explicit value, the
REPLBOOK_API_BASE environment variable, ``api_base`` in
``~/.replbook/config.json``, then the evaluator's default bind address.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

DEFAULT_API_BASE = "http://127.0.0.1:3000"
DEFAULT_TIMEOUT = 30.0

API_BASE_ENV = "REPLBOOK_API_BASE"
HOME_ENV = "REPLBOOK_HOME"


def state_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override)
    return Path.home() / ".replbook"


def config_path() -> Path:
    return state_dir() / "config.json"


def state_path() -> Path:
    """File holding the persisted session id."""
    return state_dir() / "state.json"


def load_config() -> dict[str, Any]:
    try:
        cfg = json.loads(config_path().read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def save_config(cfg: dict[str, Any]) -> None:
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


class Settings(BaseModel):
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    state_file: Path

    @classmethod
    def resolve(cls, api_base: Optional[str] = None, timeout: Optional[float] = None) -> "Settings":
        cfg = load_config()
        base = api_base or os.environ.get(API_BASE_ENV) or cfg.get("api_base") or DEFAULT_API_BASE
        return cls(
            api_base=base.rstrip("/"),
            timeout=timeout if timeout is not None else float(cfg.get("timeout", DEFAULT_TIMEOUT)),
            state_file=state_path(),
        )
