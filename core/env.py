"""
core/env.py
-----------
Environment variable helpers and the bridge configuration.

Values can come from the shell or from a .env file next to where the
bridge is started.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

_DOTENV_LOADED = False

DEFAULT_EXECUTABLE = "rulu"
DEFAULT_EXTENSION = ".rulu"
DEFAULT_UNTITLED_ATTEMPTS = 1000
DEFAULT_LOG_LEVEL = "INFO"


def _ensure_dotenv_loaded() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    load_dotenv()
    _DOTENV_LOADED = True


def get_env_str(name: str, default: str) -> str:
    """Return a stripped env var, or default when unset/blank."""
    _ensure_dotenv_loaded()
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def get_env_int(name: str, default: int) -> int:
    raw = get_env_str(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Env var {name} must be an integer, got {raw!r}.")


def normalize_extension(ext: str) -> str:
    """'rulu' -> '.rulu'"""
    ext = ext.strip()
    return ext if ext.startswith(".") else f".{ext}"


@dataclass(frozen=True)
class BridgeConfig:
    executable: str = DEFAULT_EXECUTABLE
    extension: str = DEFAULT_EXTENSION
    untitled_attempts: int = DEFAULT_UNTITLED_ATTEMPTS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def extension_name(self) -> str:
        """Extension without the dot, as dialog filters want it."""
        return self.extension.lstrip(".")

    @classmethod
    def from_env(cls, overrides: Optional[dict] = None) -> "BridgeConfig":
        values = {
            "executable": get_env_str("RULU_EXECUTABLE", DEFAULT_EXECUTABLE),
            "extension": normalize_extension(get_env_str("RULU_EXTENSION", DEFAULT_EXTENSION)),
            "untitled_attempts": get_env_int("RULU_UNTITLED_ATTEMPTS", DEFAULT_UNTITLED_ATTEMPTS),
            "log_level": get_env_str("RULU_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        }
        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})
        if values["untitled_attempts"] < 1:
            raise RuntimeError("RULU_UNTITLED_ATTEMPTS must be at least 1.")
        return cls(**values)
