"""Turn detected shots and hole completion into a suggested score."""

from __future__ import annotations

import logging
from statistics import fmean
from typing import List, Optional

from roundtrack.config import EngineSettings, get_settings
from roundtrack.courses.schemas import HoleGeometry
from roundtrack.tracking.state import RoundState

from .models import HoleCompletion, ScoreSuggestion

SHOT_CONFIDENCE_WEIGHT = 0.5
PROXIMITY_WEIGHT = 0.3
GAP_WEIGHT = 0.2
GAP_PENALTY = 0.25

logger = logging.getLogger(__name__)


class ScoreEngine:
    """Suggest, never commit, a score for the hole being played.

    Detected shots are strokes that visibly moved the golfer; the holing
    putt is too short to register, so a confirmed completion adds one
    closing stroke on top of the detected count.
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def _distance_to_pin(
        self, state: RoundState, hole: HoleGeometry, completion: Optional[HoleCompletion]
    ) -> Optional[float]:
        if completion is not None and completion.distance_to_pin_m is not None:
            return completion.distance_to_pin_m
        position = state.last_known_position
        if (
            position is not None
            and position.hole_number == hole.hole_number
            and position.distance_to_pin is not None
        ):
            return position.distance_to_pin.meters
        return None

    def _proximity_score(self, distance_m: Optional[float]) -> float:
        if distance_m is None:
            return 0.0
        radius = self.settings.green_radius_m or 1.0
        return min(1.0, max(0.0, 1.0 - distance_m / radius))

    def suggest_score(
        self,
        state: RoundState,
        hole: HoleGeometry,
        completion: Optional[HoleCompletion] = None,
    ) -> ScoreSuggestion:
        shots = state.shots_for_hole(hole.hole_number)
        shot_count = len(shots)
        completed = completion is not None and completion.completed
        distance = self._distance_to_pin(state, hole, completion)
        gaps = state.gap_count(hole.hole_number)
        reasoning: List[str] = []

        if shot_count == 0:
            suggested = hole.par
            reasoning.append("No shot events detected - suggesting par")
        else:
            suggested = shot_count + (1 if completed else 0)
            reasoning.append(f"Detected {shot_count} shots")
            if completed:
                reasoning.append("Added 1 closing stroke for holing out")

        if completed:
            reasoning.append("Hole completion confirmed near the pin")
        else:
            reasoning.append("Hole completion not confirmed")
        if distance is not None:
            reasoning.append(f"{distance:.1f}m from pin at completion check")
        if gaps:
            reasoning.append(f"{gaps} GPS gap(s) during the hole")

        shot_confidence = fmean(s.confidence for s in shots) if shots else 0.0
        gap_score = max(0.0, 1.0 - GAP_PENALTY * gaps)
        confidence = (
            SHOT_CONFIDENCE_WEIGHT * shot_confidence
            + PROXIMITY_WEIGHT * self._proximity_score(distance)
            + GAP_WEIGHT * gap_score
        )
        confidence = round(min(1.0, max(0.0, confidence)), 3)

        requires_confirmation = False
        if confidence < self.settings.score_confidence_floor:
            requires_confirmation = True
            reasoning.append(f"Confidence {confidence:.2f} below threshold")
        if shot_count == 0:
            requires_confirmation = True
        if shot_count > self.settings.max_plausible_shots:
            requires_confirmation = True
            reasoning.append(f"Implausibly many shots ({shot_count})")
        if abs(suggested - hole.par) > self.settings.max_strokes_from_par:
            requires_confirmation = True
            reasoning.append(f"Score {suggested} is unusual for a par {hole.par}")
        if not completed:
            requires_confirmation = True

        alternatives = [s for s in (suggested + 1, suggested - 1) if s >= 1]

        suggestion = ScoreSuggestion(
            hole_number=hole.hole_number,
            par=hole.par,
            suggested_score=suggested,
            confidence=confidence,
            alternative_scores=alternatives,
            detected_shot_count=shot_count,
            requires_confirmation=requires_confirmation,
            completed=completed,
            distance_to_pin_m=None if distance is None else round(distance, 2),
            reasoning=reasoning,
        )
        logger.info(
            "round %s hole %s: suggested %s (confidence %.2f, confirm=%s)",
            state.round_id,
            hole.hole_number,
            suggested,
            confidence,
            requires_confirmation,
        )
        return suggestion


__all__ = ["ScoreEngine"]
