import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from chattool.errors import ConfigurationMissing, PathInvalid

CONFIG_ENV = "CHATTOOL_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "api": {
        "url": "https://api.anthropic.com/v1/messages",
        "version": "2023-06-01",
        "model": "claude-sonnet-4-5",
        "max_tokens": 800,
        "timeout": None,
        "key_env": "ANTHROPIC_API_KEY",
    },
    "chat": {
        "assistant_label": "Claude",
        "tree_max_files": 80,
        "spreadsheet_max_rows": 60,
        "paste_terminator": "END",
        "paste_language": "csharp",
    },
    "data_paths": {
        "logs": "logs",
    },
}


def _merge(base: Dict[str, Any], loaded: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV, "config/local.yaml"))


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or default_config_path()
    if not path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return copy.deepcopy(DEFAULT_CONFIG)
    if not isinstance(loaded, dict):
        return copy.deepcopy(DEFAULT_CONFIG)
    return _merge(DEFAULT_CONFIG, loaded)


def load_env_file(path: Path = Path(".env")) -> bool:
    """Load KEY=VALUE pairs from ``path`` without overriding the real environment."""
    if not path.exists():
        return False
    return load_dotenv(path, override=False)


def read_credential(cfg: Dict[str, Any]) -> str:
    key_env = cfg.get("api", {}).get("key_env") or "ANTHROPIC_API_KEY"
    value = os.environ.get(key_env, "").strip()
    if not value:
        raise ConfigurationMissing(f"Missing {key_env}. Set it in your environment or in a .env file.")
    return value


@dataclass
class SessionConfig:
    credential: str
    root: Path = field(default_factory=Path.cwd)

    def set_root(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        try:
            exists = candidate.is_dir()
        except OSError as exc:
            raise PathInvalid(path) from exc
        if not exists:
            raise PathInvalid(path)
        self.root = candidate
        return self.root

    @classmethod
    def from_environment(cls, cfg: Dict[str, Any], root: Optional[Path] = None) -> "SessionConfig":
        credential = read_credential(cfg)
        return cls(credential=credential, root=root or Path.cwd())
