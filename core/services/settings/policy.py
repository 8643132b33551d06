from __future__ import annotations

import os
from typing import Mapping

from core.exceptions import ValidationError
from core.models import SystemConfig

# stored key -> environment override
ENV_OVERRIDES = {
    "max_utilization_percentage": "RP_MAX_UTILIZATION_PERCENTAGE",
    "allow_overallocation": "RP_ALLOW_OVERALLOCATION",
    "default_allocation_percentage": "RP_DEFAULT_ALLOCATION_PERCENTAGE",
    "ending_soon_days": "RP_ENDING_SOON_DAYS",
}

_INT_KEYS = {"max_utilization_percentage", "default_allocation_percentage", "ending_soon_days"}
_FLOAT_KEYS = {"hours_per_day", "default_weekly_capacity_hours"}
_BOOL_KEYS = {"allow_overallocation"}

KNOWN_KEYS = frozenset(_INT_KEYS | _FLOAT_KEYS | _BOOL_KEYS)


def parse_bool(raw: str) -> bool:
    token = (raw or "").strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    if token in {"0", "false", "no", "off", ""}:
        return False
    raise ValidationError(f"Invalid boolean value: {raw!r}.", code="SETTING_INVALID")


def parse_setting(key: str, raw: str):
    if key not in KNOWN_KEYS:
        raise ValidationError(f"Unknown setting: {key}.", code="SETTING_UNKNOWN")
    if key in _BOOL_KEYS:
        return parse_bool(raw)
    try:
        value = int(str(raw).strip()) if key in _INT_KEYS else float(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"Invalid value for {key}: {raw!r}.", code="SETTING_INVALID") from e
    if value < 0:
        raise ValidationError(f"{key} cannot be negative.", code="SETTING_INVALID")
    if key in {"max_utilization_percentage", "default_allocation_percentage"} and value < 1:
        raise ValidationError(f"{key} must be at least 1.", code="SETTING_INVALID")
    return value


def build_system_config(stored: Mapping[str, str], environ: Mapping[str, str] | None = None) -> SystemConfig:
    """Stored values first, then environment overrides; unknown stored keys are ignored."""
    env = os.environ if environ is None else environ
    values = {}
    for key, raw in stored.items():
        if key in KNOWN_KEYS:
            values[key] = parse_setting(key, raw)
    for key, env_name in ENV_OVERRIDES.items():
        raw = (env.get(env_name) or "").strip()
        if raw:
            values[key] = parse_setting(key, raw)
    return SystemConfig(**values)


__all__ = ["ENV_OVERRIDES", "KNOWN_KEYS", "parse_bool", "parse_setting", "build_system_config"]
