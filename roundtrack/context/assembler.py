"""Merge tracking outputs into a single :class:`GolfContext` snapshot."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from roundtrack.clubs.recommend import (
    ClubConditions,
    WindCondition,
    club_options,
    recommend_club,
    wind_condition,
)
from roundtrack.courses.position import PositionResult
from roundtrack.courses.schemas import HoleGeometry
from roundtrack.scoring.models import ScoreSuggestion
from roundtrack.tracking.state import RoundState

from .schemas import (
    GolfContext,
    PerformanceLabel,
    RoundProgress,
    UserProfile,
    WeatherConditions,
)
from .shot_type import shot_type

PLAYING_WELL_BELOW = -2
STRUGGLING_ABOVE = 4

logger = logging.getLogger(__name__)


def performance_label(relative_to_par: int) -> Optional[PerformanceLabel]:
    if relative_to_par < PLAYING_WELL_BELOW:
        return "playing_well"
    if relative_to_par > STRUGGLING_ABOVE:
        return "struggling"
    return None


def round_progress(state: RoundState) -> Optional[RoundProgress]:
    suggestions = state.score_suggestions
    if not suggestions:
        return None
    total = sum(s.suggested_score for s in suggestions)
    par = sum(s.par for s in suggestions)
    return RoundProgress(
        holes_scored=len(suggestions),
        total_score=total,
        total_par=par,
        relative_to_par=total - par,
        performance=performance_label(total - par),
    )


def _wind(
    position: PositionResult, weather: Optional[WeatherConditions]
) -> Optional[WindCondition]:
    if (
        weather is None
        or weather.wind_speed_mps is None
        or weather.wind_from_deg is None
        or position.distance_to_pin is None
        or position.distance_to_pin.bearing_deg is None
    ):
        return None
    return wind_condition(
        weather.wind_speed_mps, weather.wind_from_deg, position.distance_to_pin.bearing_deg
    )


def build_context(
    state: RoundState,
    position: Optional[PositionResult],
    score_suggestion: Optional[ScoreSuggestion] = None,
    weather: Optional[WeatherConditions] = None,
    user_profile: Optional[UserProfile] = None,
    hole: Optional[HoleGeometry] = None,
) -> GolfContext:
    """Assemble a context snapshot; missing inputs leave their fields empty.

    No club is recommended while the position is unknown.
    """

    shots = state.shots_for_hole(state.current_hole)
    fields = {
        "round_id": state.round_id,
        "user_id": state.user_id,
        "course_id": state.course_id,
        "hole_number": state.current_hole,
        "shots_this_hole": len(shots),
        "last_shot": shots[-1] if shots else None,
        "score_suggestion": score_suggestion,
        "weather": weather,
        "player": user_profile,
        "progress": round_progress(state),
        "generated_at": datetime.now(timezone.utc),
    }
    if hole is not None and hole.hole_number == state.current_hole:
        fields["par"] = hole.par

    if position is not None and position.hole_number == state.current_hole:
        fields["position"] = position.classification
        fields["hazard_kind"] = position.hazard_kind
        fields["distance_to_pin"] = position.distance_to_pin
        fields["green"] = position.green
        wind = _wind(position, weather)
        fields["wind"] = wind
        if position.is_known and position.distance_to_pin is not None:
            conditions = ClubConditions(wind=wind)
            yards = position.distance_to_pin.yards
            fields["recommended_club"] = recommend_club(yards, conditions)
            fields["club_options"] = club_options(yards, conditions)
            fields["shot_type"] = shot_type(
                position.classification,
                yards,
                par=fields.get("par"),
                hazard_kind=position.hazard_kind,
            )
    elif position is not None:
        logger.debug(
            "round %s: position for hole %s ignored, current hole is %s",
            state.round_id,
            position.hole_number,
            state.current_hole,
        )

    return GolfContext(**fields)


__all__ = ["build_context", "performance_label", "round_progress"]
