"""Shot detection from short bursts of fast GPS displacement."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from roundtrack.clubs import DEFAULT_CLUB_BANDS, ClubBand, recommend_club
from roundtrack.config import EngineSettings, get_settings
from roundtrack.geo.distance import (
    bearing_deg,
    distance_and_bearing,
    haversine_m,
    is_valid_coordinate,
)
from roundtrack.geo.schemas import LocationFix

from .models import MovementAnalysis, ShotEvent
from .state import RoundState

SPEED_WEIGHT = 0.40
ACCURACY_WEIGHT = 0.35
BEARING_WEIGHT = 0.25

BEST_ACCURACY_M = 3.0
WORST_ACCURACY_M = 25.0
UNKNOWN_ACCURACY_SCORE = 0.5
MIN_SEGMENT_M = 1.0

logger = logging.getLogger(__name__)


def accuracy_score(accuracy_m: float | None) -> float:
    """1.0 at or below 3 m, falling linearly to 0.0 at 25 m."""

    if accuracy_m is None or not accuracy_m > 0:
        return UNKNOWN_ACCURACY_SCORE
    if accuracy_m <= BEST_ACCURACY_M:
        return 1.0
    span = WORST_ACCURACY_M - BEST_ACCURACY_M
    return float(min(1.0, max(0.0, 1.0 - (accuracy_m - BEST_ACCURACY_M) / span)))


def worst_accuracy(*fixes: LocationFix) -> float | None:
    known = [f.accuracy_m for f in fixes if f.accuracy_m is not None and f.accuracy_m > 0]
    return max(known) if known else None


def bearing_consistency(path: Sequence[LocationFix]) -> float:
    """Length-weighted mean resultant length of segment bearings.

    1.0 means every segment points the same way; values near 0 mean the
    track doubles back on itself. Fewer than two usable segments count as
    perfectly consistent.
    """

    angles: List[float] = []
    weights: List[float] = []
    for start, end in zip(path, path[1:]):
        length = haversine_m(start.coordinate, end.coordinate)
        if length < MIN_SEGMENT_M:
            continue
        angles.append(np.radians(bearing_deg(start.coordinate, end.coordinate)))
        weights.append(length)

    if len(angles) < 2:
        return 1.0
    theta = np.asarray(angles)
    w = np.asarray(weights)
    resultant = np.hypot(np.sum(w * np.cos(theta)), np.sum(w * np.sin(theta)))
    return float(min(1.0, resultant / np.sum(w)))


class MovementAnalyzer:
    """Flag a shot when the golfer's position jumps faster than walking pace.

    Each new fix is paired with buffered fixes at least
    ``min_shot_interval_s`` away from it in time, as the end of a shot from
    an older fix or, when it arrives late, as the start of a shot to a newer
    one. No shot may start before the end of the previous shot. A pair
    qualifies when its displacement beats ``max(min_shot_distance_m,
    accuracy_distance_multiplier × worst accuracy)`` and its average speed
    reaches ``min_shot_speed_mps``. The longest qualifying displacement
    wins.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        bands: Sequence[ClubBand] = DEFAULT_CLUB_BANDS,
    ) -> None:
        self.settings = settings or get_settings()
        self.bands = tuple(bands)

    def distance_threshold_m(self, accuracy_m: float | None) -> float:
        threshold = self.settings.min_shot_distance_m
        if accuracy_m is not None:
            threshold = max(
                threshold, self.settings.accuracy_distance_multiplier * accuracy_m
            )
        return threshold

    def _arrived_at_speed(self, state: RoundState, fix: LocationFix) -> bool:
        """Whether *fix* was itself the end of a shot-like jump.

        Such a fix is mid-flight, not a resting position a shot can start from.
        """

        if fix.speed_mps is not None and fix.speed_mps >= self.settings.min_shot_speed_mps:
            return True
        previous = next(
            (
                f
                for f in state.recent_fixes
                if f.timestamp < fix.timestamp and is_valid_coordinate(f.coordinate)
            ),
            None,
        )
        if previous is None:
            return False
        elapsed = (fix.timestamp - previous.timestamp).total_seconds()
        distance = haversine_m(previous.coordinate, fix.coordinate)
        return (
            distance > self.distance_threshold_m(worst_accuracy(previous, fix))
            and distance / elapsed >= self.settings.min_shot_speed_mps
        )

    def _usable_start(self, state: RoundState, start: LocationFix) -> bool:
        if state.last_shot_end is not None and start.timestamp < state.last_shot_end:
            return False
        return not self._arrived_at_speed(state, start)

    def _candidates(
        self, state: RoundState, new_fix: LocationFix
    ) -> List[Tuple[LocationFix, LocationFix, float, float]]:
        """Buffered (start, end, distance, elapsed) pairs that involve *new_fix*.

        A fix arriving after newer ones is also tried as the start of a shot
        ending at one of them, so detection follows timestamps rather than
        arrival order.
        """

        results = []
        new_is_start = self._usable_start(state, new_fix)
        for other in state.recent_fixes:
            if other is new_fix or not is_valid_coordinate(other.coordinate):
                continue
            if other.timestamp < new_fix.timestamp:
                start, end = other, new_fix
                if not self._usable_start(state, start):
                    continue
            elif other.timestamp > new_fix.timestamp and new_is_start:
                start, end = new_fix, other
            else:
                continue
            elapsed = (end.timestamp - start.timestamp).total_seconds()
            if elapsed < self.settings.min_shot_interval_s:
                continue
            distance = haversine_m(start.coordinate, end.coordinate)
            results.append((start, end, distance, elapsed))
        return results

    def _path(
        self, state: RoundState, start: LocationFix, end: LocationFix
    ) -> List[LocationFix]:
        inside = [
            f
            for f in state.recent_fixes
            if start.timestamp <= f.timestamp <= end.timestamp
            and is_valid_coordinate(f.coordinate)
        ]
        if end not in inside:
            inside.append(end)
        return sorted(inside, key=lambda f: f.timestamp)

    def confidence(
        self, speed_mps: float, accuracy_m: float | None, consistency: float
    ) -> float:
        min_speed = self.settings.min_shot_speed_mps
        speed_margin = min(1.0, max(0.0, (speed_mps - min_speed) / min_speed))
        score = (
            SPEED_WEIGHT * speed_margin
            + ACCURACY_WEIGHT * accuracy_score(accuracy_m)
            + BEARING_WEIGHT * consistency
        )
        return round(min(1.0, max(0.0, score)), 3)

    def evaluate(self, state: RoundState, new_fix: LocationFix) -> MovementAnalysis:
        """Inspect the buffer against *new_fix* without touching the state."""

        if not is_valid_coordinate(new_fix.coordinate):
            return MovementAnalysis(notes=["Fix has unusable coordinates"])

        candidates = self._candidates(state, new_fix)
        if not candidates:
            return MovementAnalysis(notes=["Insufficient location history for analysis"])

        best: Optional[Tuple[LocationFix, LocationFix, float, float, float | None]] = None
        for start, end, distance, elapsed in candidates:
            accuracy = worst_accuracy(start, end)
            if distance <= self.distance_threshold_m(accuracy):
                continue
            if distance / elapsed < self.settings.min_shot_speed_mps:
                continue
            if best is None or distance > best[2]:
                best = (start, end, distance, elapsed, accuracy)

        if best is None:
            _start, _end, distance, elapsed = min(candidates, key=lambda item: item[3])
            return MovementAnalysis(
                notes=[f"Movement detected: {distance:.1f}m in {elapsed:.1f}s (likely walking)"],
            )

        start, end, distance, elapsed, accuracy = best
        speed = distance / elapsed
        consistency = bearing_consistency(self._path(state, start, end))
        confidence = self.confidence(speed, accuracy, consistency)
        result = distance_and_bearing(start.coordinate, end.coordinate)

        club: Optional[str] = None
        if confidence >= self.settings.club_confidence_floor:
            club = recommend_club(result.yards, bands=self.bands)

        return MovementAnalysis(
            shot_detected=True,
            confidence=confidence,
            estimated_distance=result,
            estimated_club=club,
            speed_mps=round(speed, 2),
            start_fix=start,
            end_fix=end,
            notes=[f"Shot detected: {distance:.0f}m in {elapsed:.1f}s"],
        )

    def build_shot_event(
        self, state: RoundState, analysis: MovementAnalysis
    ) -> Optional[ShotEvent]:
        if (
            not analysis.shot_detected
            or analysis.start_fix is None
            or analysis.end_fix is None
            or analysis.estimated_distance is None
        ):
            return None
        return ShotEvent(
            sequence_number=state.next_sequence,
            hole_number=state.current_hole,
            start_fix=analysis.start_fix,
            end_fix=analysis.end_fix,
            estimated_distance_yards=analysis.estimated_distance.yards,
            estimated_distance_m=analysis.estimated_distance.meters,
            estimated_club=analysis.estimated_club,
            confidence=analysis.confidence,
            timestamp=analysis.end_fix.timestamp,
        )

    def analyze(
        self, state: RoundState, new_fix: LocationFix
    ) -> Tuple[MovementAnalysis, Optional[ShotEvent]]:
        """Buffer *new_fix*, evaluate it and append any detected shot."""

        state.add_fix(new_fix)
        analysis = self.evaluate(state, new_fix)
        event = self.build_shot_event(state, analysis)
        if event is not None:
            state.append_shot(event)
            logger.info(
                "round %s: shot %s on hole %s (%.0f yd, confidence %.2f)",
                state.round_id,
                event.sequence_number,
                event.hole_number,
                event.estimated_distance_yards,
                event.confidence,
            )
        return analysis, event


__all__ = [
    "MovementAnalyzer",
    "accuracy_score",
    "bearing_consistency",
    "worst_accuracy",
]
