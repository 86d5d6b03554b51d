"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "sheets_sync_enabled",
    "offline_replay_enabled",
    "auto_sync_enabled",
]


class FeatureFlagValues(TypedDict):
    sheets_sync_enabled: bool
    offline_replay_enabled: bool
    auto_sync_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "sheets_sync_enabled": FeatureFlagDefinition("SHEETS_SYNC_ENABLED", True),
    "offline_replay_enabled": FeatureFlagDefinition("OFFLINE_REPLAY_ENABLED", True),
    "auto_sync_enabled": FeatureFlagDefinition("AUTO_SYNC_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    """Return whether the supplied feature flag evaluates to true."""
    return get_feature_flags()[flag]


def sheets_sync_enabled() -> bool:
    """Toggle for the Google Sheets push/pull endpoints."""
    return is_feature_enabled("sheets_sync_enabled")


def offline_replay_enabled() -> bool:
    """Toggle for replaying writes queued by offline clients."""
    return is_feature_enabled("offline_replay_enabled")


def auto_sync_enabled() -> bool:
    """Global kill switch for background pushes after record writes."""
    return is_feature_enabled("auto_sync_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
