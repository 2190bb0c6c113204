"""Classify the next shot from where the golfer stands and how far is left."""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from roundtrack.courses.position import PositionLabel
from roundtrack.courses.schemas import HazardKind

ShotTypeKind = Literal[
    "putt",
    "chip",
    "pitch",
    "bunker",
    "tee_shot_par3",
    "drive",
    "approach",
    "layup",
    "recovery",
    "general",
]

PUTT_MAX_YARDS = 20.0
CHIP_MAX_YARDS = 30.0
PITCH_MAX_YARDS = 80.0
APPROACH_MAX_YARDS = 200.0
RECOVERY_MAX_YARDS = 150.0

BASE_CONFIDENCE = 0.7
CLEAR_CONFIDENCE = 0.9

# How sure a position label is about the lie, relative to BASE_CONFIDENCE.
LABEL_CONFIDENCE: Dict[str, float] = {
    "green": 0.9,
    "on_tee": 0.9,
    "hazard": 0.8,
    "fairway": 0.7,
    "rough": 0.7,
    "out_of_bounds": 0.5,
    "unknown": 0.5,
}

logger = logging.getLogger(__name__)


class ShotDistanceRange(BaseModel):
    shot_type: ShotTypeKind
    min_yards: float
    max_yards: float
    description: str

    model_config = ConfigDict(frozen=True)


class ShotTypeResult(BaseModel):
    shot_type: ShotTypeKind
    confidence: float = Field(ge=0.0, le=1.0)
    distance_yards: float
    distance_range: ShotDistanceRange
    reasoning: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def _range(kind: ShotTypeKind, low: float, high: float, description: str) -> ShotDistanceRange:
    return ShotDistanceRange(
        shot_type=kind, min_yards=low, max_yards=high, description=description
    )


SHOT_DISTANCE_RANGES: Dict[str, ShotDistanceRange] = {
    "drive": _range("drive", 200, 400, "Long tee shot on a par 4 or 5"),
    "tee_shot_par3": _range("tee_shot_par3", 100, 250, "Tee shot at a par 3 green"),
    "approach": _range("approach", 80, 200, "Mid-distance approach to the green"),
    "chip": _range("chip", 5, 40, "Low running shot around the green"),
    "pitch": _range("pitch", 20, 80, "High soft shot to the green"),
    "bunker": _range("bunker", 10, 60, "Escape from sand"),
    "putt": _range("putt", 0, 20, "Rolling the ball on the green"),
    "layup": _range("layup", 0, 400, "Safe advance short of trouble"),
    "recovery": _range("recovery", 0, 400, "Getting back into play"),
    "general": _range("general", 0, 400, "General golf shot"),
}


def shot_distance_range(kind: ShotTypeKind) -> ShotDistanceRange:
    return SHOT_DISTANCE_RANGES.get(kind, SHOT_DISTANCE_RANGES["general"])


def _primary(
    position: PositionLabel,
    distance_yards: float,
    par: Optional[int],
    hazard_kind: Optional[HazardKind],
) -> ShotTypeKind:
    if position == "green" and distance_yards <= PUTT_MAX_YARDS:
        return "putt"
    if position == "hazard" and hazard_kind == "bunker":
        return "bunker"
    if position == "on_tee":
        return "tee_shot_par3" if par == 3 else "drive"
    if position == "hazard" and hazard_kind in ("trees", "out_of_play"):
        return "layup" if distance_yards > RECOVERY_MAX_YARDS else "recovery"
    if distance_yards <= CHIP_MAX_YARDS:
        return "chip"
    if distance_yards <= PITCH_MAX_YARDS:
        return "pitch"
    if distance_yards <= APPROACH_MAX_YARDS:
        return "approach"
    if position == "rough":
        return "layup"
    return "general"


def shot_type(
    position: PositionLabel,
    distance_yards: float,
    par: Optional[int] = None,
    hazard_kind: Optional[HazardKind] = None,
) -> ShotTypeResult:
    """Name the shot a golfer faces from *position* with *distance_yards* left.

    The lie decides first (putt on the green, sand, tee, trouble); otherwise
    the remaining distance picks chip, pitch or approach, and long shots
    from the rough become lay-ups.
    """

    if distance_yards < 0:
        raise ValueError("distance_yards must be non-negative")

    kind = _primary(position, distance_yards, par, hazard_kind)
    base = CLEAR_CONFIDENCE if kind in ("putt", "chip", "bunker") else BASE_CONFIDENCE
    lie = LABEL_CONFIDENCE.get(position, BASE_CONFIDENCE)
    confidence = round(min(1.0, max(0.0, base + lie - BASE_CONFIDENCE)), 3)

    reasoning = [f"{distance_yards:.0f} yards to the pin", f"Position: {position}"]
    if par is not None:
        reasoning.append(f"Par {par}")
    if hazard_kind is not None:
        reasoning.append(f"In a {hazard_kind} hazard")

    logger.debug("shot type %s at %.0f yd from %s", kind, distance_yards, position)
    return ShotTypeResult(
        shot_type=kind,
        confidence=confidence,
        distance_yards=round(distance_yards, 1),
        distance_range=shot_distance_range(kind),
        reasoning=reasoning,
    )


__all__ = [
    "SHOT_DISTANCE_RANGES",
    "ShotDistanceRange",
    "ShotTypeKind",
    "ShotTypeResult",
    "shot_distance_range",
    "shot_type",
]
