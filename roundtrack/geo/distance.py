from __future__ import annotations

import math
from math import asin, atan2, cos, pi, radians, sin, sqrt
from typing import Tuple

from roundtrack.errors import CoordinateValidationError

from .schemas import Coordinate, DistanceResult

EARTH_RADIUS_M = 6_371_000.0

METERS_TO_YARDS = 1.09361
METERS_TO_FEET = 3.28084
METERS_TO_KILOMETERS = 0.001
METERS_TO_MILES = 0.000621371


def validate_coordinate(point: Coordinate) -> Coordinate:
    """Return *point* unchanged or raise ``CoordinateValidationError``."""

    lat, lon = point.lat, point.lon
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise CoordinateValidationError(lat, lon, "not a finite number")
    if not -90.0 <= lat <= 90.0:
        raise CoordinateValidationError(lat, lon, "latitude out of range")
    if not -180.0 <= lon <= 180.0:
        raise CoordinateValidationError(lat, lon, "longitude out of range")
    return point


def is_valid_coordinate(point: Coordinate) -> bool:
    try:
        validate_coordinate(point)
    except CoordinateValidationError:
        return False
    return True


def haversine_m(p1: Coordinate, p2: Coordinate) -> float:
    """Compute haversine distance between two geographic points in meters."""

    validate_coordinate(p1)
    validate_coordinate(p2)

    lat1 = radians(p1.lat)
    lon1 = radians(p1.lon)
    lat2 = radians(p2.lat)
    lon2 = radians(p2.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def bearing_deg(start: Coordinate, end: Coordinate) -> float:
    """Forward azimuth from *start* to *end*, 0° = north, clockwise, [0, 360)."""

    validate_coordinate(start)
    validate_coordinate(end)

    lat1 = radians(start.lat)
    lat2 = radians(end.lat)
    dlon = radians(end.lon - start.lon)

    x = sin(dlon) * cos(lat2)
    y = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    bearing = (atan2(x, y) + 2 * pi) % (2 * pi) * 180 / pi
    # (tiny negative angle + 2π) % 2π can round up to exactly 360.0
    return 0.0 if bearing >= 360.0 else bearing


def distance_result_from_meters(
    meters: float, bearing: float | None = None
) -> DistanceResult:
    if bearing is not None:
        bearing = round(bearing, 2) % 360.0
    return DistanceResult(
        meters=round(meters, 2),
        yards=round(meters * METERS_TO_YARDS, 2),
        feet=round(meters * METERS_TO_FEET, 2),
        kilometers=round(meters * METERS_TO_KILOMETERS, 3),
        miles=round(meters * METERS_TO_MILES, 5),
        bearing_deg=bearing,
    )


def distance_and_bearing(a: Coordinate, b: Coordinate) -> DistanceResult:
    """Distance in every supported unit plus the bearing from *a* to *b*.

    Identical points have no meaningful direction, so the bearing is omitted.
    """

    meters = haversine_m(a, b)
    bearing = None if meters == 0.0 else bearing_deg(a, b)
    return distance_result_from_meters(meters, bearing)


def move_point(origin: Coordinate, bearing: float, distance_m: float) -> Coordinate:
    """Destination reached travelling *distance_m* from *origin* on *bearing*."""

    validate_coordinate(origin)
    if distance_m == 0:
        return origin

    lat1 = radians(origin.lat)
    lon1 = radians(origin.lon)
    theta = radians(bearing)
    dr = distance_m / EARTH_RADIUS_M

    lat2 = asin(sin(lat1) * cos(dr) + cos(lat1) * sin(dr) * cos(theta))
    lon2 = lon1 + atan2(
        sin(theta) * sin(dr) * cos(lat1), cos(dr) - sin(lat1) * sin(lat2)
    )

    lon_deg = (lon2 * 180 / pi + 540.0) % 360.0 - 180.0
    return Coordinate(lat=lat2 * 180 / pi, lon=lon_deg)


def along_and_cross_track_m(
    start: Coordinate, end: Coordinate, point: Coordinate
) -> Tuple[float, float, float]:
    """Project *point* onto the line start→end in a local flat frame.

    Returns ``(along_m, cross_m, line_length_m)``. ``cross_m`` is signed,
    positive to the right of the direction of travel. A zero-length line
    yields ``(0.0, 0.0, 0.0)``.
    """

    for candidate in (start, end, point):
        validate_coordinate(candidate)

    mean_lat_rad = radians((start.lat + end.lat) / 2)

    dx_line = radians(end.lon - start.lon) * cos(mean_lat_rad) * EARTH_RADIUS_M
    dy_line = radians(end.lat - start.lat) * EARTH_RADIUS_M
    dx_point = radians(point.lon - start.lon) * cos(mean_lat_rad) * EARTH_RADIUS_M
    dy_point = radians(point.lat - start.lat) * EARTH_RADIUS_M

    length = math.hypot(dx_line, dy_line)
    if length == 0:
        return 0.0, 0.0, 0.0

    along = (dx_line * dx_point + dy_line * dy_point) / length
    cross = dx_line * dy_point - dy_line * dx_point
    return along, -(cross / length), length


__all__ = [
    "EARTH_RADIUS_M",
    "METERS_TO_FEET",
    "METERS_TO_KILOMETERS",
    "METERS_TO_MILES",
    "METERS_TO_YARDS",
    "along_and_cross_track_m",
    "bearing_deg",
    "distance_and_bearing",
    "distance_result_from_meters",
    "haversine_m",
    "is_valid_coordinate",
    "move_point",
    "validate_coordinate",
]
