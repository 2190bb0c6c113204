"""Course geometry, position classification and hole detection."""

from .geometry import point_in_polygon
from .hole_detect import (
    DebounceState,
    HoleChangeDetector,
    HoleSuggestion,
    HoleTransition,
    best_match_hole,
    neighbouring_holes,
    suggest_hole,
)
from .position import (
    GreenDistances,
    PositionLabel,
    PositionResult,
    green_distances,
    resolve_position,
)
from .schemas import CourseGeometry, GeoPolygon, Hazard, HazardKind, HoleGeometry

__all__ = [
    "CourseGeometry",
    "DebounceState",
    "GeoPolygon",
    "GreenDistances",
    "Hazard",
    "HazardKind",
    "HoleChangeDetector",
    "HoleGeometry",
    "HoleSuggestion",
    "HoleTransition",
    "PositionLabel",
    "PositionResult",
    "best_match_hole",
    "green_distances",
    "neighbouring_holes",
    "point_in_polygon",
    "resolve_position",
    "suggest_hole",
]
