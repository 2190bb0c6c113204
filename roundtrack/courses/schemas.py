from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from roundtrack.geo.distance import validate_coordinate
from roundtrack.geo.schemas import Coordinate

HazardKind = Literal["bunker", "water", "trees", "out_of_play", "other"]

DEFAULT_GREEN_DEPTH_M = 16.0


class GeoPolygon(BaseModel):
    """Simple polygon ring in WGS84 coordinates (closing point optional)."""

    points: List[Coordinate]

    model_config = ConfigDict(frozen=True)

    @field_validator("points")
    @classmethod
    def _at_least_a_triangle(cls, points: List[Coordinate]) -> List[Coordinate]:
        for point in points:
            validate_coordinate(point)
        distinct = {(p.lat, p.lon) for p in points}
        if len(distinct) < 3:
            raise ValueError("polygon needs at least 3 distinct points")
        return points


class Hazard(BaseModel):
    kind: HazardKind
    id: Optional[str] = None
    name: Optional[str] = None
    polygon: Optional[GeoPolygon] = None
    center: Optional[Coordinate] = None
    radius_m: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _needs_shape(self) -> "Hazard":
        if self.polygon is None and self.center is None:
            raise ValueError("hazard needs a polygon or a center point")
        if self.center is not None:
            validate_coordinate(self.center)
        return self


class HoleGeometry(BaseModel):
    hole_number: int = Field(ge=1, alias="holeNumber")
    par: int = Field(ge=3, le=6)
    tee: Coordinate
    pin: Coordinate
    boundary: Optional[GeoPolygon] = None
    hazards: List[Hazard] = Field(default_factory=list)
    green_depth_m: float = Field(default=DEFAULT_GREEN_DEPTH_M, gt=0, alias="greenDepthM")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _valid_points(self) -> "HoleGeometry":
        validate_coordinate(self.tee)
        validate_coordinate(self.pin)
        return self


class CourseGeometry(BaseModel):
    course_id: str = Field(alias="courseId")
    name: Optional[str] = None
    holes: List[HoleGeometry]

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("holes")
    @classmethod
    def _unique_numbers(cls, holes: List[HoleGeometry]) -> List[HoleGeometry]:
        numbers = [hole.hole_number for hole in holes]
        if len(numbers) != len(set(numbers)):
            raise ValueError("hole numbers must be unique")
        return sorted(holes, key=lambda hole: hole.hole_number)

    def hole(self, number: int) -> Optional[HoleGeometry]:
        return next((h for h in self.holes if h.hole_number == number), None)


__all__ = [
    "CourseGeometry",
    "DEFAULT_GREEN_DEPTH_M",
    "GeoPolygon",
    "Hazard",
    "HazardKind",
    "HoleGeometry",
]
