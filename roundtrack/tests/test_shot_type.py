import pytest

from roundtrack.context import shot_distance_range, shot_type


@pytest.mark.parametrize(
    "position,yards,par,hazard,expected",
    [
        ("green", 4.0, 4, None, "putt"),
        ("green", 18.0, 4, None, "putt"),
        ("green", 24.0, 4, None, "chip"),
        ("fairway", 25.0, 4, None, "chip"),
        ("rough", 60.0, 4, None, "pitch"),
        ("hazard", 40.0, 4, "bunker", "bunker"),
        ("on_tee", 160.0, 3, None, "tee_shot_par3"),
        ("on_tee", 380.0, 4, None, "drive"),
        ("fairway", 150.0, 5, None, "approach"),
        ("hazard", 120.0, 4, "trees", "recovery"),
        ("hazard", 180.0, 4, "trees", "layup"),
        ("rough", 230.0, 5, None, "layup"),
        ("fairway", 260.0, 5, None, "general"),
        ("unknown", 260.0, None, None, "general"),
    ],
)
def test_shot_type_follows_lie_then_distance(position, yards, par, hazard, expected) -> None:
    assert shot_type(position, yards, par=par, hazard_kind=hazard).shot_type == expected


def test_clear_short_game_lies_are_most_confident() -> None:
    assert shot_type("green", 4.0).confidence == 1.0
    assert shot_type("hazard", 40.0, hazard_kind="bunker").confidence == 1.0
    assert shot_type("fairway", 25.0).confidence == pytest.approx(0.9)
    assert shot_type("on_tee", 380.0, par=4).confidence == pytest.approx(0.9)
    assert shot_type("fairway", 150.0).confidence == pytest.approx(0.7)
    assert shot_type("unknown", 260.0).confidence == pytest.approx(0.5)


def test_result_carries_range_and_reasoning() -> None:
    result = shot_type("on_tee", 160.0, par=3)

    assert result.distance_range.min_yards == 100
    assert result.distance_range.max_yards == 250
    assert result.reasoning == ["160 yards to the pin", "Position: on_tee", "Par 3"]


def test_distance_ranges() -> None:
    assert (shot_distance_range("putt").min_yards, shot_distance_range("putt").max_yards) == (0, 20)
    assert shot_distance_range("drive").max_yards == 400
    assert shot_distance_range("general").description == "General golf shot"


def test_negative_distance_is_rejected() -> None:
    with pytest.raises(ValueError):
        shot_type("fairway", -1.0)
