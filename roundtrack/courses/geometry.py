from __future__ import annotations

import numpy as np

from roundtrack.geo.distance import validate_coordinate
from roundtrack.geo.schemas import Coordinate

from .schemas import GeoPolygon


def point_in_polygon(point: Coordinate, polygon: GeoPolygon) -> bool:
    """Even-odd ray casting test in lon/lat space.

    Golf-course polygons are small enough that treating degrees as a flat
    plane does not change the answer. Points on an edge count as inside.
    """

    validate_coordinate(point)
    ring = np.array([(p.lon, p.lat) for p in polygon.points], dtype=float)
    x, y = point.lon, point.lat
    xi, yi = ring[:, 0], ring[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    # Edge hits: collinear with a segment and within its bounding box.
    cross = (xj - xi) * (y - yi) - (yj - yi) * (x - xi)
    on_edge = (
        np.isclose(cross, 0.0, atol=1e-12)
        & (np.minimum(xi, xj) <= x)
        & (x <= np.maximum(xi, xj))
        & (np.minimum(yi, yj) <= y)
        & (y <= np.maximum(yi, yj))
    )
    if bool(on_edge.any()):
        return True

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
    crossings = straddles & (x < x_cross)
    return bool(np.count_nonzero(crossings) % 2 == 1)


__all__ = ["point_in_polygon"]
