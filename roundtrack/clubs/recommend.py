"""Club selection from a distance and optional playing conditions."""

from __future__ import annotations

import math
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .table import DEFAULT_CLUB_BANDS, ClubBand

WindCondition = Literal["headwind", "tailwind", "crosswind", "calm"]
ElevationCondition = Literal["uphill", "downhill", "level"]
PinCondition = Literal["front", "middle", "back"]
StrategyCondition = Literal["conservative", "aggressive", "normal"]
ShotDifficulty = Literal["easy", "full", "hard"]

BAND_TOLERANCE_YARDS = 10.0
OPTIONS_TOLERANCE_YARDS = 15.0
MIN_OPTION_CONFIDENCE = 0.5
CALM_WIND_MPS = 1.5

CONDITION_FACTORS: Dict[str, Dict[str, float]] = {
    "wind": {"headwind": 1.10, "tailwind": 0.90, "crosswind": 1.0, "calm": 1.0},
    "elevation": {"uphill": 1.10, "downhill": 0.90, "level": 1.0},
    "pin": {"back": 1.05, "front": 0.95, "middle": 1.0},
    "strategy": {"conservative": 1.05, "aggressive": 0.95, "normal": 1.0},
}


class ClubConditions(BaseModel):
    wind: Optional[WindCondition] = None
    elevation: Optional[ElevationCondition] = None
    pin: Optional[PinCondition] = None
    strategy: Optional[StrategyCondition] = None

    model_config = ConfigDict(frozen=True)


class ClubOption(BaseModel):
    club: str
    confidence: float
    difficulty: ShotDifficulty

    model_config = ConfigDict(frozen=True)


def _check_distance(distance_yards: float) -> float:
    if not math.isfinite(distance_yards) or distance_yards < 0:
        raise ValueError(f"distance must be a finite, non-negative number: {distance_yards!r}")
    return float(distance_yards)


def adjusted_distance(
    distance_yards: float, conditions: ClubConditions | None = None
) -> float:
    """Apply multiplicative condition factors to the base distance."""

    distance = _check_distance(distance_yards)
    if conditions is None:
        return distance
    factor = 1.0
    for field, table in CONDITION_FACTORS.items():
        value = getattr(conditions, field)
        if value is not None:
            factor *= table[value]
    return distance * factor


def _fallback_band(distance: float, bands: Sequence[ClubBand]) -> ClubBand:
    longest = max(bands, key=lambda band: band.max_yards)
    shortest = min(bands, key=lambda band: band.min_yards)
    if distance > longest.max_yards:
        return longest
    if distance < shortest.min_yards:
        return shortest

    def edge_gap(band: ClubBand) -> float:
        if distance < band.min_yards:
            return band.min_yards - distance
        return max(0.0, distance - band.max_yards)

    return min(bands, key=edge_gap)


def recommend_club(
    distance_yards: float,
    conditions: ClubConditions | None = None,
    bands: Sequence[ClubBand] = DEFAULT_CLUB_BANDS,
) -> str:
    """Pick the club whose average best matches the plays-like distance.

    Only bands covering the adjusted distance (with a small tolerance) are
    eligible; when none are, the longest club is used above the table and
    the shortest below it. Always returns a club.
    """

    if not bands:
        raise ValueError("club table must contain at least one band")
    distance = adjusted_distance(distance_yards, conditions)

    best: Tuple[ClubBand, float] | None = None
    for band in bands:
        if not (
            band.min_yards - BAND_TOLERANCE_YARDS
            <= distance
            <= band.max_yards + BAND_TOLERANCE_YARDS
        ):
            continue
        score = abs(distance - band.avg_yards)
        if best is None or score < best[1]:
            best = (band, score)

    if best is None:
        return _fallback_band(distance, bands).club
    return best[0].club


def _difficulty(distance: float, band: ClubBand) -> ShotDifficulty:
    if distance < band.avg_yards - band.width * 0.2:
        return "easy"
    if distance > band.avg_yards + band.width * 0.2:
        return "hard"
    return "full"


def club_options(
    distance_yards: float,
    conditions: ClubConditions | None = None,
    bands: Sequence[ClubBand] = DEFAULT_CLUB_BANDS,
    limit: int = 3,
) -> List[ClubOption]:
    """Rank the clubs that can reasonably cover the distance."""

    distance = adjusted_distance(distance_yards, conditions)
    options: List[ClubOption] = []
    for band in bands:
        if not (
            band.min_yards - OPTIONS_TOLERANCE_YARDS
            <= distance
            <= band.max_yards + OPTIONS_TOLERANCE_YARDS
        ):
            continue
        width = band.width or 1.0
        confidence = max(
            MIN_OPTION_CONFIDENCE, 1.0 - abs(distance - band.avg_yards) / width
        )
        options.append(
            ClubOption(
                club=band.club,
                confidence=round(confidence, 2),
                difficulty=_difficulty(distance, band),
            )
        )

    # sorted() is stable, so equal confidences keep table order
    options = sorted(options, key=lambda option: option.confidence, reverse=True)
    return options[: max(0, limit)]


def _wind_components(
    wind_mps: float, wind_from_deg: float, target_bearing_deg: float
) -> Tuple[float, float]:
    """Return (headwind_mps, crosswind_mps). Positive headwind means into the wind."""
    rel = math.radians((wind_from_deg - target_bearing_deg + 360.0) % 360.0)
    head = wind_mps * math.cos(rel)
    cross = wind_mps * math.sin(rel)
    return head, cross


def wind_condition(
    wind_speed_mps: float, wind_from_deg: float, target_bearing_deg: float
) -> WindCondition:
    """Classify the wind relative to the line of play."""

    if wind_speed_mps < CALM_WIND_MPS:
        return "calm"
    head, cross = _wind_components(wind_speed_mps, wind_from_deg, target_bearing_deg)
    if abs(cross) > abs(head):
        return "crosswind"
    return "headwind" if head > 0 else "tailwind"


__all__ = [
    "CONDITION_FACTORS",
    "ClubConditions",
    "ClubOption",
    "ShotDifficulty",
    "WindCondition",
    "adjusted_distance",
    "club_options",
    "recommend_club",
    "wind_condition",
]
