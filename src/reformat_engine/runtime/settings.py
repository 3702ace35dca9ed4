"""Environment-driven settings shared by the runtime services.

Every knob is read from an environment variable carrying the
``REFORMAT_ENGINE_`` prefix so hosts can tune logging and code style without
touching code.
"""

from __future__ import annotations

import os
from typing import Optional

ENV_PREFIX = "REFORMAT_ENGINE_"

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in _TRUTHY


def env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{ENV_PREFIX}{name} must be >= {minimum}, got {value}")
    return value


__all__ = ["ENV_PREFIX", "env", "env_flag", "env_int"]
