import json
import os
from typing import Optional

from .models import Thresholds


CONCURRENCY_ENV = "SMILCHECK_CONCURRENCY"
VERBOSE_ENV = "SMILCHECK_VERBOSE"
THRESHOLDS_ENV = "SMILCHECK_THRESHOLDS"

DEFAULT_CONCURRENCY = 1


def _parse_env_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return None


def resolve_concurrency(requested: Optional[int] = None) -> int:
    """CLI value first, then SMILCHECK_CONCURRENCY, then sequential."""
    if requested is None:
        env_value = os.getenv(CONCURRENCY_ENV)
        if env_value is None or not env_value.strip():
            return DEFAULT_CONCURRENCY
        try:
            requested = int(env_value)
        except ValueError as exc:
            raise ValueError(
                f"{CONCURRENCY_ENV} must be an integer, got {env_value!r}"
            ) from exc

    if requested < 1:
        raise ValueError("--concurrency must be >= 1")
    return requested


def resolve_verbose(requested: bool = False) -> bool:
    if requested:
        return True
    return bool(_parse_env_bool(os.getenv(VERBOSE_ENV)))


def resolve_thresholds_path(requested: Optional[str] = None) -> Optional[str]:
    if requested:
        return requested
    env_value = os.getenv(THRESHOLDS_ENV)
    return env_value or None


def load_thresholds(path: Optional[str] = None) -> Thresholds:
    """Load threshold overrides from a JSON object; missing keys keep their defaults."""
    if path is None:
        return Thresholds()

    try:
        with open(path, "r", encoding="utf-8") as thresholds_file:
            values = json.load(thresholds_file)
    except OSError as exc:
        raise ValueError(f"Cannot read thresholds file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in thresholds file {path}: {exc}") from exc

    if not isinstance(values, dict):
        raise ValueError(f"Thresholds file {path} must contain a JSON object.")
    return Thresholds.from_dict(values)
