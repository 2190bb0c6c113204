import math

import pytest

from roundtrack.clubs import (
    DEFAULT_CLUB_BANDS,
    ClubBand,
    ClubConditions,
    adjusted_distance,
    club_options,
    recommend_club,
    wind_condition,
)


def test_default_table_recommends_seven_iron_for_150() -> None:
    assert recommend_club(150) == "7-Iron"


def test_headwind_plays_longer() -> None:
    conditions = ClubConditions(wind="headwind")

    assert adjusted_distance(150, conditions) == pytest.approx(165.0)
    assert recommend_club(150, conditions) in {"5-Iron", "6-Iron"}
    assert recommend_club(150, conditions) == "6-Iron"


def test_condition_factors_multiply() -> None:
    conditions = ClubConditions(wind="tailwind", elevation="uphill", strategy="normal")

    assert adjusted_distance(200, conditions) == pytest.approx(200 * 0.9 * 1.1)


def test_recommendation_is_idempotent() -> None:
    conditions = ClubConditions(pin="back", strategy="conservative")

    first = recommend_club(137.5, conditions)
    second = recommend_club(137.5, conditions)

    assert first == second


def test_out_of_table_distances_fall_back_to_table_ends() -> None:
    assert recommend_club(360) == "Driver"
    assert recommend_club(0) == "Putter"


@pytest.mark.parametrize("bad", [-1.0, math.nan, math.inf])
def test_invalid_distance_raises(bad: float) -> None:
    with pytest.raises(ValueError):
        recommend_club(bad)


def test_custom_table_and_empty_table() -> None:
    bands = [
        ClubBand(club="Hybrid", min_yards=170, max_yards=200, avg_yards=185),
        ClubBand(club="Wedge", min_yards=60, max_yards=110, avg_yards=90),
    ]

    assert recommend_club(145, bands=bands) == "Hybrid"
    assert recommend_club(300, bands=bands) == "Hybrid"
    with pytest.raises(ValueError):
        recommend_club(150, bands=[])


def test_club_band_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        ClubBand(club="Broken", min_yards=150, max_yards=120, avg_yards=130)


def test_default_bands_are_ordered_longest_first() -> None:
    averages = [band.avg_yards for band in DEFAULT_CLUB_BANDS]

    assert averages == sorted(averages, reverse=True)


def test_club_options_rank_by_confidence() -> None:
    options = club_options(150)

    assert [option.club for option in options] == ["7-Iron", "6-Iron", "8-Iron"]
    assert options[0].confidence == pytest.approx(1.0)
    assert options[0].difficulty == "full"
    assert all(0.5 <= option.confidence <= 1.0 for option in options)


def test_club_options_limit() -> None:
    assert len(club_options(150, limit=1)) == 1
    assert club_options(150, limit=0) == []


@pytest.mark.parametrize(
    "wind_from,expected",
    [(0.0, "headwind"), (180.0, "tailwind"), (90.0, "crosswind"), (270.0, "crosswind")],
)
def test_wind_relative_to_line_of_play(wind_from: float, expected: str) -> None:
    assert wind_condition(6.0, wind_from, 0.0) == expected


def test_light_wind_is_calm() -> None:
    assert wind_condition(1.0, 0.0, 0.0) == "calm"
