"""Environment variable helpers and runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from core.logging import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


def load_dotenv_if_available(path: Optional[Path] = None) -> bool:
    """Load variables from a .env file when it exists. Real env always wins."""

    env_path = path or Path(".env")
    if not env_path.exists():
        return False
    loaded = load_dotenv(dotenv_path=env_path, override=False)
    logger.debug("Loaded environment variables from %s", env_path)
    return loaded


def env_int(key: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        value = int(raw)
        if minimum is not None and value < minimum:
            raise ValueError
        return value
    except ValueError:
        logger.warning("Invalid %s value '%s'. Falling back to %d.", key, raw, default)
        return default


def env_float(key: str, default: float, *, minimum: Optional[float] = None) -> float:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        value = float(raw)
        if minimum is not None and value < minimum:
            raise ValueError
        return value
    except ValueError:
        logger.warning("Invalid %s value '%s'. Falling back to %.2f.", key, raw, default)
        return default


def env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean env %s='%s'. Using default=%s.", key, raw, default)
    return default


@dataclass(frozen=True)
class AskSettings:
    """Knobs for the ask pipeline. Built once at startup."""

    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 1000
    tolerate_source_failures: bool = False

    @classmethod
    def from_env(cls) -> "AskSettings":
        return cls(
            model=os.getenv("LLM_ASK_MODEL") or cls.model,
            temperature=env_float("LLM_ASK_TEMPERATURE", cls.temperature, minimum=0.0),
            max_tokens=env_int("LLM_ASK_MAX_TOKENS", cls.max_tokens, minimum=1),
            tolerate_source_failures=env_bool("ASK_TOLERATE_SOURCE_FAILURES", cls.tolerate_source_failures),
        )


__all__ = ["AskSettings", "env_bool", "env_float", "env_int", "load_dotenv_if_available"]
