from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from roundtrack.clubs.recommend import ClubOption, WindCondition
from roundtrack.courses.position import GreenDistances, PositionLabel
from roundtrack.courses.schemas import HazardKind
from roundtrack.geo.schemas import DistanceResult
from roundtrack.scoring.models import ScoreSuggestion
from roundtrack.tracking.models import ShotEvent

from .shot_type import ShotTypeResult

SkillLevel = Literal["beginner", "intermediate", "advanced", "professional"]
PerformanceLabel = Literal["playing_well", "struggling"]


class WeatherConditions(BaseModel):
    wind_speed_mps: Optional[float] = Field(
        default=None,
        ge=0.0,
        validation_alias=AliasChoices("wind_speed_mps", "windSpeedMps"),
    )
    wind_from_deg: Optional[float] = Field(
        default=None,
        ge=0.0,
        lt=360.0,
        validation_alias=AliasChoices("wind_from_deg", "windFromDeg"),
    )
    temperature_c: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("temperature_c", "temperatureC")
    )
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class UserProfile(BaseModel):
    user_id: str = Field(validation_alias=AliasChoices("user_id", "userId"))
    skill_level: Optional[SkillLevel] = Field(
        default=None, validation_alias=AliasChoices("skill_level", "skillLevel")
    )
    handicap: Optional[float] = Field(default=None, ge=-10.0, le=54.0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RoundProgress(BaseModel):
    holes_scored: int
    total_score: int
    total_par: int
    relative_to_par: int
    performance: Optional[PerformanceLabel] = None

    model_config = ConfigDict(frozen=True)


class GolfContext(BaseModel):
    """Read-only snapshot of a round for downstream advice consumers.

    Optional sections are ``None`` when their inputs were unavailable.
    """

    round_id: str
    user_id: str
    course_id: str
    hole_number: int
    par: Optional[int] = None
    position: PositionLabel = "unknown"
    hazard_kind: Optional[HazardKind] = None
    distance_to_pin: Optional[DistanceResult] = None
    green: Optional[GreenDistances] = None
    recommended_club: Optional[str] = None
    club_options: List[ClubOption] = Field(default_factory=list)
    wind: Optional[WindCondition] = None
    shot_type: Optional[ShotTypeResult] = None
    shots_this_hole: int = 0
    last_shot: Optional[ShotEvent] = None
    score_suggestion: Optional[ScoreSuggestion] = None
    weather: Optional[WeatherConditions] = None
    player: Optional[UserProfile] = None
    progress: Optional[RoundProgress] = None
    generated_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = [
    "GolfContext",
    "PerformanceLabel",
    "RoundProgress",
    "SkillLevel",
    "UserProfile",
    "WeatherConditions",
]
