"""Classify where on a hole a GPS fix sits."""

from __future__ import annotations

import logging
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from roundtrack.config import EngineSettings, get_settings
from roundtrack.geo.distance import (
    along_and_cross_track_m,
    bearing_deg,
    distance_and_bearing,
    haversine_m,
    is_valid_coordinate,
    move_point,
)
from roundtrack.geo.schemas import Coordinate, DistanceResult, LocationFix

from .geometry import point_in_polygon
from .schemas import HazardKind, HoleGeometry

PositionLabel = Literal[
    "on_tee",
    "fairway",
    "rough",
    "green",
    "hazard",
    "out_of_bounds",
    "unknown",
]

MIN_HOLE_LENGTH_M = 1.0

logger = logging.getLogger(__name__)


class GreenDistances(BaseModel):
    front: DistanceResult
    middle: DistanceResult
    back: DistanceResult

    model_config = ConfigDict(frozen=True)


class PositionResult(BaseModel):
    hole_number: int
    classification: PositionLabel
    hazard_kind: Optional[HazardKind] = None
    distance_to_pin: Optional[DistanceResult] = None
    distance_to_tee: Optional[DistanceResult] = None
    within_boundary: bool = True
    approximate: bool = False
    green: Optional[GreenDistances] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_known(self) -> bool:
        return self.classification != "unknown"


def _as_point(fix: Union[LocationFix, Coordinate]) -> Coordinate:
    return fix.coordinate if isinstance(fix, LocationFix) else fix


def green_distances(point: Coordinate, hole: HoleGeometry) -> GreenDistances:
    """Front/middle/back distances, placing the green edges on the line of play."""

    half_depth = hole.green_depth_m / 2.0
    if haversine_m(hole.tee, hole.pin) < MIN_HOLE_LENGTH_M:
        front = back = hole.pin
    else:
        approach = bearing_deg(hole.tee, hole.pin)
        front = move_point(hole.pin, (approach + 180.0) % 360.0, half_depth)
        back = move_point(hole.pin, approach, half_depth)
    return GreenDistances(
        front=distance_and_bearing(point, front),
        middle=distance_and_bearing(point, hole.pin),
        back=distance_and_bearing(point, back),
    )


def _hazard_hit(
    point: Coordinate, hole: HoleGeometry, settings: EngineSettings
) -> Optional[HazardKind]:
    for hazard in hole.hazards:
        if hazard.polygon is not None and point_in_polygon(point, hazard.polygon):
            return hazard.kind
        if hazard.center is not None:
            radius = hazard.radius_m or settings.hazard_radius_m
            if haversine_m(point, hazard.center) <= radius:
                return hazard.kind
    return None


def _corridor_label(
    point: Coordinate, hole: HoleGeometry, settings: EngineSettings
) -> PositionLabel:
    along, cross, length = along_and_cross_track_m(hole.tee, hole.pin, point)
    if length < MIN_HOLE_LENGTH_M:
        return "unknown"
    if along < -settings.tee_radius_m or along > length + settings.green_radius_m:
        return "unknown"
    if abs(cross) <= settings.fairway_width_m / 2.0:
        return "fairway"
    if abs(cross) <= settings.rough_corridor_m:
        return "rough"
    return "unknown"


def resolve_position(
    fix: Union[LocationFix, Coordinate],
    hole: HoleGeometry,
    settings: EngineSettings | None = None,
) -> PositionResult:
    """Resolve distances and a coarse position label for one fix on *hole*.

    Checks run in a fixed order and the first match wins: green, tee,
    hazard, out of bounds, then fairway/rough along the tee→pin corridor.
    A fix with unusable coordinates resolves to ``unknown`` instead of
    raising so a live stream keeps flowing.
    """

    settings = settings or get_settings()
    point = _as_point(fix)
    has_boundary = hole.boundary is not None

    if not is_valid_coordinate(point):
        logger.debug("unusable fix for hole %s: %s", hole.hole_number, point)
        return PositionResult(
            hole_number=hole.hole_number,
            classification="unknown",
            approximate=True,
        )

    to_pin = distance_and_bearing(point, hole.pin)
    to_tee = distance_and_bearing(point, hole.tee)
    within_boundary = (
        point_in_polygon(point, hole.boundary) if hole.boundary is not None else True
    )

    hazard_kind: Optional[HazardKind] = None
    classification: PositionLabel
    if to_pin.meters <= settings.green_radius_m:
        classification = "green"
    elif to_tee.meters <= settings.tee_radius_m:
        classification = "on_tee"
    else:
        hazard_kind = _hazard_hit(point, hole, settings)
        if hazard_kind is not None:
            classification = "hazard"
        elif not within_boundary:
            classification = "out_of_bounds"
        else:
            classification = _corridor_label(point, hole, settings)

    return PositionResult(
        hole_number=hole.hole_number,
        classification=classification,
        hazard_kind=hazard_kind,
        distance_to_pin=to_pin,
        distance_to_tee=to_tee,
        within_boundary=within_boundary,
        approximate=not has_boundary,
        green=green_distances(point, hole),
    )


__all__ = [
    "GreenDistances",
    "PositionLabel",
    "PositionResult",
    "green_distances",
    "resolve_position",
]
