from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class HoleCompletion(BaseModel):
    hole_number: int
    completed: bool = False
    near_hole: bool = False
    on_green: bool = False
    distance_to_pin_m: Optional[float] = None
    dwell_s: float = 0.0
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    recommended_action: str = ""
    timestamp: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)


class ScoreSuggestion(BaseModel):
    """Engine's proposal for a hole score; persistence decides what to keep."""

    hole_number: int
    par: int
    suggested_score: int = Field(ge=1)
    confidence: float = Field(ge=0.0, le=1.0)
    alternative_scores: List[int] = Field(default_factory=list)
    detected_shot_count: int = Field(ge=0)
    requires_confirmation: bool
    completed: bool = False
    distance_to_pin_m: Optional[float] = None
    reasoning: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def relative_to_par(self) -> int:
        return self.suggested_score - self.par


class ScoreValidation(BaseModel):
    final_score: int
    detected_score: int
    user_corrected: bool
    confidence: float = Field(ge=0.0, le=1.0)
    notes: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


__all__ = ["HoleCompletion", "ScoreSuggestion", "ScoreValidation"]
