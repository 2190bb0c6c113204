"""Configuration for the round tracking engine.

Every heuristic threshold used by position resolution, shot detection and
scoring lives here so deployments can tune them through ``ROUNDTRACK_*``
environment variables (or a ``.env`` file) instead of editing code.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    # Fix buffer
    fix_window_s: float = Field(default=10.0, gt=0)
    fix_buffer_capacity: int = Field(default=64, ge=2)
    gap_threshold_s: float = Field(default=30.0, gt=0)

    # Shot detection
    min_shot_interval_s: float = Field(default=1.0, ge=0)
    min_shot_distance_m: float = Field(default=30.0, ge=0)
    accuracy_distance_multiplier: float = Field(default=3.0, ge=0)
    min_shot_speed_mps: float = Field(default=8.0, gt=0)
    club_confidence_floor: float = Field(default=0.5, ge=0, le=1)

    # Position classification
    tee_radius_m: float = Field(default=20.0, ge=0)
    green_radius_m: float = Field(default=20.0, ge=0)
    fairway_width_m: float = Field(default=35.0, ge=0)
    rough_corridor_m: float = Field(default=75.0, ge=0)
    hazard_radius_m: float = Field(default=10.0, ge=0)
    hole_change_debounce_fixes: int = Field(default=3, ge=1)
    auto_advance_holes: bool = True

    # Hole completion and scoring
    completion_radius_m: float = Field(default=5.0, ge=0)
    completion_dwell_s: float = Field(default=10.0, ge=0)
    score_confidence_floor: float = Field(default=0.6, ge=0, le=1)
    max_plausible_shots: int = Field(default=12, ge=1)
    max_strokes_from_par: int = Field(default=3, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="ROUNDTRACK_", env_file=".env", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return cached engine settings."""

    return EngineSettings()


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


__all__ = ["EngineSettings", "env_bool", "get_settings", "reset_settings_cache"]
