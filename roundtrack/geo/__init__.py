"""Geodesic distance, bearing and GPS quality helpers."""

from .accuracy import (
    AccuracyGrade,
    GpsAccuracy,
    GpsStability,
    GpsStabilityMonitor,
    gps_accuracy_grade,
)
from .distance import (
    EARTH_RADIUS_M,
    along_and_cross_track_m,
    bearing_deg,
    distance_and_bearing,
    distance_result_from_meters,
    haversine_m,
    is_valid_coordinate,
    move_point,
    validate_coordinate,
)
from .schemas import Coordinate, DistanceResult, LocationFix

__all__ = [
    "AccuracyGrade",
    "Coordinate",
    "DistanceResult",
    "EARTH_RADIUS_M",
    "GpsAccuracy",
    "GpsStability",
    "GpsStabilityMonitor",
    "LocationFix",
    "along_and_cross_track_m",
    "bearing_deg",
    "distance_and_bearing",
    "distance_result_from_meters",
    "gps_accuracy_grade",
    "haversine_m",
    "is_valid_coordinate",
    "move_point",
    "validate_coordinate",
]
