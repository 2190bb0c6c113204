"""Context snapshots handed to advice and voice consumers."""

from .assembler import build_context, performance_label, round_progress
from .schemas import (
    GolfContext,
    RoundProgress,
    SkillLevel,
    UserProfile,
    WeatherConditions,
)
from .shot_type import ShotTypeResult, shot_distance_range, shot_type

__all__ = [
    "GolfContext",
    "RoundProgress",
    "ShotTypeResult",
    "SkillLevel",
    "UserProfile",
    "WeatherConditions",
    "build_context",
    "performance_label",
    "round_progress",
    "shot_distance_range",
    "shot_type",
]
