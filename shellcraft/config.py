"""
Configuration — loads settings from .shellcraft.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

from __future__ import annotations

import os

import yaml


_DEFAULTS = {
    "shell_files": ["~/.zshrc", "~/.zprofile"],
    "git_config": "~/.gitconfig",
    "backups_enabled": True,
    "backup_dir": "~/.config/shellcraft/backups",
    "backup_keep": 20,
    "log_dir": "~/.config/shellcraft/logs",
    "history_file": "~/.config/shellcraft/edit_history.jsonl",
    "validate_workers": 8,
}

# Config file search locations
_CONFIG_FILENAMES = [".shellcraft.yaml", ".shellcraft.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables (``SHELLCRAFT_*``)
    3. .shellcraft.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return _DEFAULTS[yaml_key]

        def _get_bool(env_key: str, yaml_key: str) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() in ("1", "true", "yes")
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return _DEFAULTS[yaml_key]

        # Shell files: colon-separated in the environment, a list in YAML
        env_files = os.getenv("SHELLCRAFT_SHELL_FILES")
        if env_files:
            self.SHELL_FILES = [f for f in env_files.split(":") if f]
        elif isinstance(yd.get("shell_files"), list):
            self.SHELL_FILES = [str(f) for f in yd["shell_files"]]
        else:
            self.SHELL_FILES = list(_DEFAULTS["shell_files"])

        self.GIT_CONFIG = _get("SHELLCRAFT_GIT_CONFIG", "git_config")

        self.BACKUPS_ENABLED = _get_bool("SHELLCRAFT_BACKUPS", "backups_enabled")
        self.BACKUP_DIR = _get("SHELLCRAFT_BACKUP_DIR", "backup_dir")
        self.BACKUP_KEEP = _get("SHELLCRAFT_BACKUP_KEEP", "backup_keep", cast=int)

        self.LOG_DIR = _get("SHELLCRAFT_LOG_DIR", "log_dir")
        self.HISTORY_FILE = _get("SHELLCRAFT_HISTORY_FILE", "history_file")

        self.VALIDATE_WORKERS = _get("SHELLCRAFT_VALIDATE_WORKERS",
                                     "validate_workers", cast=int)

    @property
    def default_shell_file(self) -> str:
        return self.SHELL_FILES[0] if self.SHELL_FILES else "~/.zshrc"

    def editor_kwargs(self) -> dict:
        """Keyword arguments for :class:`ShellConfigEditor`."""
        return {
            "backup": self.BACKUPS_ENABLED,
            "backup_root": self.BACKUP_DIR,
            "backup_keep": self.BACKUP_KEEP,
            "history_file": self.HISTORY_FILE,
        }

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
