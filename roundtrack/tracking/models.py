from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from roundtrack.geo.schemas import DistanceResult, LocationFix


class ShotEvent(BaseModel):
    """A detected shot. Never edited once appended to a round."""

    sequence_number: int = Field(ge=1)
    hole_number: int
    start_fix: LocationFix
    end_fix: LocationFix
    estimated_distance_yards: float
    estimated_distance_m: float
    estimated_club: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: datetime

    model_config = ConfigDict(frozen=True)


class MovementAnalysis(BaseModel):
    shot_detected: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    estimated_distance: Optional[DistanceResult] = None
    estimated_club: Optional[str] = None
    speed_mps: Optional[float] = None
    start_fix: Optional[LocationFix] = None
    end_fix: Optional[LocationFix] = None
    notes: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


__all__ = ["MovementAnalysis", "ShotEvent"]
