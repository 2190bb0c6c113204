from .recommend import (
    CONDITION_FACTORS,
    ClubConditions,
    ClubOption,
    adjusted_distance,
    club_options,
    recommend_club,
    wind_condition,
)
from .table import DEFAULT_CLUB_BANDS, ClubBand

__all__ = [
    "CONDITION_FACTORS",
    "ClubBand",
    "ClubConditions",
    "ClubOption",
    "DEFAULT_CLUB_BANDS",
    "adjusted_distance",
    "club_options",
    "recommend_club",
    "wind_condition",
]
