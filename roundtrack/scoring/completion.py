"""Hole completion from sustained proximity to the pin."""

from __future__ import annotations

import logging
from typing import Optional

from roundtrack.config import EngineSettings, get_settings
from roundtrack.courses.position import PositionResult
from roundtrack.geo.schemas import LocationFix
from roundtrack.tracking.state import RoundState

from .models import HoleCompletion

NEAR_HOLE_CONFIDENCE = 0.9
ON_GREEN_CONFIDENCE = 0.6
ELSEWHERE_CONFIDENCE = 0.2

logger = logging.getLogger(__name__)


def analyze_completion(
    position: PositionResult, settings: EngineSettings | None = None
) -> HoleCompletion:
    """Single-fix view of how close the golfer is to finishing the hole."""

    settings = settings or get_settings()
    if position.distance_to_pin is None:
        return HoleCompletion(
            hole_number=position.hole_number,
            recommended_action="Hole information not available",
        )

    distance = position.distance_to_pin.meters
    on_green = position.classification == "green"
    near_hole = on_green and distance <= settings.completion_radius_m

    if near_hole:
        confidence, action = NEAR_HOLE_CONFIDENCE, "Hole appears completed - confirm your score"
    elif on_green:
        confidence, action = ON_GREEN_CONFIDENCE, "On the green - continue putting"
    else:
        confidence, action = ELSEWHERE_CONFIDENCE, "Continue playing towards the hole"

    return HoleCompletion(
        hole_number=position.hole_number,
        near_hole=near_hole,
        on_green=on_green,
        distance_to_pin_m=distance,
        confidence=confidence,
        recommended_action=action,
    )


class HoleCompletionDetector:
    """Confirm completion once the golfer dwells by the pin.

    The dwell clock runs on fix timestamps. A late-arriving fix older than
    the current dwell start can extend the dwell backwards but never
    cancel it.
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def observe(
        self, state: RoundState, fix: LocationFix, position: Optional[PositionResult]
    ) -> HoleCompletion:
        if position is None or position.hole_number != state.current_hole:
            return HoleCompletion(hole_number=state.current_hole, timestamp=fix.timestamp)

        snapshot = analyze_completion(position, self.settings)
        since = state.completion_since
        if snapshot.near_hole:
            if since is None or fix.timestamp < since:
                state.completion_since = since = fix.timestamp
        elif since is not None and fix.timestamp >= since:
            logger.debug("round %s: left the hole, dwell reset", state.round_id)
            state.completion_since = since = None

        dwell = 0.0
        if since is not None and snapshot.near_hole:
            dwell = max(0.0, (fix.timestamp - since).total_seconds())
        completed = snapshot.near_hole and dwell >= self.settings.completion_dwell_s

        return snapshot.model_copy(
            update={"completed": completed, "dwell_s": dwell, "timestamp": fix.timestamp}
        )


__all__ = ["HoleCompletionDetector", "analyze_completion"]
