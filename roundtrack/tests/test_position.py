import math

import pytest
from pydantic import ValidationError

from roundtrack.config import EngineSettings
from roundtrack.courses import (
    GeoPolygon,
    Hazard,
    HoleGeometry,
    green_distances,
    point_in_polygon,
    resolve_position,
)
from roundtrack.geo import Coordinate, haversine_m

from .factories import PIN_1, TEE_1, box_around, fix_at, hole_one, north_of


def test_fix_at_pin_is_green_with_zero_distance() -> None:
    result = resolve_position(fix_at(PIN_1, 0), hole_one())

    assert result.classification == "green"
    assert result.distance_to_pin.meters == pytest.approx(0.0, abs=0.01)
    assert result.is_known


def test_fix_at_tee_is_on_tee() -> None:
    result = resolve_position(fix_at(north_of(TEE_1, 5.0), 0), hole_one())

    assert result.classification == "on_tee"
    assert result.distance_to_pin.meters == pytest.approx(345.0, abs=0.5)


def test_fairway_and_rough_follow_the_line_of_play() -> None:
    hole = hole_one()

    fairway = resolve_position(north_of(TEE_1, 180.0, east=10.0), hole)
    rough = resolve_position(north_of(TEE_1, 180.0, east=-40.0), hole)
    lost = resolve_position(north_of(TEE_1, 180.0, east=150.0), hole)

    assert fairway.classification == "fairway"
    assert rough.classification == "rough"
    assert lost.classification == "unknown"
    assert fairway.approximate is True


def test_behind_the_tee_is_unknown_without_boundary() -> None:
    result = resolve_position(north_of(TEE_1, -80.0), hole_one())

    assert result.classification == "unknown"
    assert result.distance_to_tee.meters == pytest.approx(80.0, abs=0.5)


def test_outside_boundary_is_out_of_bounds() -> None:
    boundary = box_around(north_of(TEE_1, 175.0), 200.0)
    hole = hole_one(boundary=boundary)

    inside = resolve_position(north_of(TEE_1, 175.0, east=5.0), hole)
    outside = resolve_position(north_of(TEE_1, 175.0, east=260.0), hole)

    assert inside.classification == "fairway"
    assert inside.approximate is False
    assert outside.classification == "out_of_bounds"
    assert outside.within_boundary is False


def test_hazards_by_radius_and_polygon() -> None:
    bunker_center = north_of(TEE_1, 230.0, east=25.0)
    pond = box_around(north_of(TEE_1, 120.0, east=-30.0), 10.0)
    hole = hole_one(
        hazards=[
            Hazard(kind="bunker", center=bunker_center, radius_m=6.0),
            Hazard(kind="water", polygon=pond),
        ]
    )

    in_bunker = resolve_position(north_of(TEE_1, 232.0, east=25.0), hole)
    in_water = resolve_position(north_of(TEE_1, 120.0, east=-30.0), hole)

    assert in_bunker.classification == "hazard"
    assert in_bunker.hazard_kind == "bunker"
    assert in_water.classification == "hazard"
    assert in_water.hazard_kind == "water"


def test_green_wins_over_hazard_near_pin() -> None:
    hole = hole_one(hazards=[Hazard(kind="bunker", center=PIN_1, radius_m=15.0)])

    assert resolve_position(north_of(PIN_1, -3.0), hole).classification == "green"


def test_invalid_fix_degrades_to_unknown() -> None:
    bad = Coordinate(lat=math.nan, lon=-75.0)

    result = resolve_position(fix_at(bad, 0), hole_one())

    assert result.classification == "unknown"
    assert result.distance_to_pin is None
    assert result.approximate is True


def test_green_front_and_back_straddle_the_pin() -> None:
    approach = north_of(TEE_1, 200.0)

    green = green_distances(approach, hole_one(green_depth_m=20.0))

    assert green.middle.meters == pytest.approx(150.0, abs=0.5)
    assert green.front.meters == pytest.approx(140.0, abs=0.5)
    assert green.back.meters == pytest.approx(160.0, abs=0.5)


def test_settings_drive_radii() -> None:
    settings = EngineSettings(green_radius_m=40.0)

    result = resolve_position(north_of(PIN_1, -30.0), hole_one(), settings)

    assert result.classification == "green"


def test_point_in_polygon_edges_and_outside() -> None:
    square = GeoPolygon(
        points=[
            Coordinate(lat=0.0, lon=0.0),
            Coordinate(lat=0.0, lon=1.0),
            Coordinate(lat=1.0, lon=1.0),
            Coordinate(lat=1.0, lon=0.0),
        ]
    )

    assert point_in_polygon(Coordinate(lat=0.5, lon=0.5), square)
    assert point_in_polygon(Coordinate(lat=0.0, lon=0.5), square)
    assert not point_in_polygon(Coordinate(lat=1.5, lon=0.5), square)


def test_malformed_geometry_is_rejected() -> None:
    with pytest.raises(ValidationError):
        GeoPolygon(points=[Coordinate(lat=0.0, lon=0.0), Coordinate(lat=0.0, lon=1.0)])
    with pytest.raises(ValidationError):
        HoleGeometry(hole_number=1, par=4, tee=Coordinate(lat=95.0, lon=0.0), pin=PIN_1)
    with pytest.raises(ValidationError):
        Hazard(kind="water")
    with pytest.raises(ValidationError):
        hole_one(par=2)


def test_course_rejects_duplicate_holes_and_sorts() -> None:
    from roundtrack.courses import CourseGeometry

    second = HoleGeometry(hole_number=2, par=3, tee=PIN_1, pin=north_of(PIN_1, 150.0))
    course = CourseGeometry(course_id="c", holes=[second, hole_one()])

    assert [h.hole_number for h in course.holes] == [1, 2]
    assert course.hole(3) is None
    assert haversine_m(course.hole(2).tee, PIN_1) == 0.0
    with pytest.raises(ValidationError):
        CourseGeometry(course_id="c", holes=[hole_one(), hole_one()])
