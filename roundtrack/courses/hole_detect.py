from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from roundtrack.config import EngineSettings, get_settings
from roundtrack.geo.distance import haversine_m, is_valid_coordinate
from roundtrack.geo.schemas import Coordinate, LocationFix

from .position import PositionLabel, PositionResult, resolve_position
from .schemas import CourseGeometry, HoleGeometry

# Labels that place a golfer on a hole, strongest evidence first.
LABEL_CONFIDENCE: Dict[str, float] = {
    "on_tee": 0.9,
    "green": 0.85,
    "fairway": 0.7,
    "hazard": 0.6,
    "rough": 0.5,
}
STAY_CONFIDENCE = 0.6

HoleDetectReason = Literal["stay_on_current", "on_tee", "on_green", "in_play"]

logger = logging.getLogger(__name__)


class HoleSuggestion(BaseModel):
    hole: int
    confidence: float
    reason: HoleDetectReason
    classification: PositionLabel

    model_config = ConfigDict(frozen=True)


class HoleTransition(BaseModel):
    from_hole: int
    to_hole: int
    timestamp: datetime
    consecutive_fixes: int
    reason: str

    model_config = ConfigDict(frozen=True)


def _reason(classification: PositionLabel) -> HoleDetectReason:
    if classification == "on_tee":
        return "on_tee"
    if classification == "green":
        return "on_green"
    return "in_play"


def _reference_distance(position: PositionResult) -> float:
    measured = (
        position.distance_to_tee
        if position.classification == "on_tee"
        else position.distance_to_pin
    )
    return measured.meters if measured is not None else float("inf")


def suggest_hole(
    course: CourseGeometry,
    point: Coordinate,
    current_hole: Optional[int] = None,
    settings: EngineSettings | None = None,
) -> Optional[HoleSuggestion]:
    """One-shot hole hint for a position, with no debounce.

    The point is resolved on every hole. A point still in play on
    *current_hole* stays there; otherwise the hole with the strongest
    label wins (tee, green, fairway, hazard, rough), ties going to the
    nearer tee or pin. Used when a round starts without an explicit hole;
    live tracking goes through :class:`HoleChangeDetector`.
    """

    if not course.holes or not is_valid_coordinate(point):
        return None
    settings = settings or get_settings()
    positions = [resolve_position(point, hole, settings) for hole in course.holes]

    if current_hole is not None:
        current = next((p for p in positions if p.hole_number == current_hole), None)
        if current is not None and current.classification in LABEL_CONFIDENCE:
            return HoleSuggestion(
                hole=current_hole,
                confidence=STAY_CONFIDENCE,
                reason="stay_on_current",
                classification=current.classification,
            )

    ranked = [p for p in positions if p.classification in LABEL_CONFIDENCE]
    if not ranked:
        return None
    best = max(
        ranked,
        key=lambda p: (LABEL_CONFIDENCE[p.classification], -_reference_distance(p)),
    )
    return HoleSuggestion(
        hole=best.hole_number,
        confidence=LABEL_CONFIDENCE[best.classification],
        reason=_reason(best.classification),
        classification=best.classification,
    )


def neighbouring_holes(course: CourseGeometry, current_hole: int) -> List[HoleGeometry]:
    """Current hole plus its predecessor and successor, wrapping at the ends."""

    numbers = [hole.hole_number for hole in course.holes]
    if not numbers:
        return []
    if current_hole not in numbers:
        return list(course.holes)

    index = numbers.index(current_hole)
    wanted = {numbers[index], numbers[(index + 1) % len(numbers)], numbers[index - 1]}
    return [hole for hole in course.holes if hole.hole_number in wanted]


def best_match_hole(
    course: CourseGeometry, point: Coordinate, current_hole: int
) -> Optional[HoleGeometry]:
    """Neighbouring hole whose tee is closest to *point*.

    Ties keep the current hole.
    """

    if not is_valid_coordinate(point):
        return None
    candidates = neighbouring_holes(course, current_hole)
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda hole: (
            haversine_m(hole.tee, point),
            hole.hole_number != current_hole,
        ),
    )


@dataclass
class DebounceState:
    """Per-round bookkeeping for pending hole changes."""

    candidate: Optional[int] = None
    count: int = 0

    def clear(self) -> None:
        self.candidate = None
        self.count = 0


class HoleChangeDetector:
    """Propose hole transitions only after sustained, corroborated evidence.

    A fix votes for a different hole when that hole has the nearest tee
    among the neighbours of the current hole *and* the fix is corroborated
    by position: either it classifies as ``on_tee`` on the candidate, or it
    no longer resolves to a known position on the current hole while
    resolving to one on the candidate. ``debounce_fixes`` consecutive votes
    for the same hole produce a :class:`HoleTransition`.
    """

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def _corroborated(
        self,
        fix: LocationFix,
        candidate: HoleGeometry,
        current_position: Optional[PositionResult],
    ) -> bool:
        on_candidate = resolve_position(fix, candidate, self.settings)
        if on_candidate.classification == "on_tee":
            return True
        lost_current = current_position is None or current_position.classification in (
            "unknown",
            "out_of_bounds",
        )
        return lost_current and on_candidate.classification not in (
            "unknown",
            "out_of_bounds",
        )

    def observe(
        self,
        debounce: DebounceState,
        course: CourseGeometry,
        current_hole: int,
        fix: LocationFix,
        current_position: Optional[PositionResult] = None,
    ) -> Optional[HoleTransition]:
        best = best_match_hole(course, fix.coordinate, current_hole)
        if (
            best is None
            or best.hole_number == current_hole
            or not self._corroborated(fix, best, current_position)
        ):
            if debounce.candidate is not None:
                logger.debug(
                    "hole change to %s abandoned after %s fixes",
                    debounce.candidate,
                    debounce.count,
                )
            debounce.clear()
            return None

        if debounce.candidate == best.hole_number:
            debounce.count += 1
        else:
            debounce.candidate = best.hole_number
            debounce.count = 1

        if debounce.count < self.settings.hole_change_debounce_fixes:
            return None

        transition = HoleTransition(
            from_hole=current_hole,
            to_hole=best.hole_number,
            timestamp=fix.timestamp,
            consecutive_fixes=debounce.count,
            reason="nearest_tee_sustained",
        )
        debounce.clear()
        return transition


__all__ = [
    "DebounceState",
    "HoleChangeDetector",
    "HoleSuggestion",
    "HoleTransition",
    "best_match_hole",
    "neighbouring_holes",
    "suggest_hole",
]
