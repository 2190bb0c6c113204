import math

import pytest

from roundtrack.config import EngineSettings
from roundtrack.geo import Coordinate
from roundtrack.tracking import (
    MovementAnalyzer,
    RoundState,
    accuracy_score,
    bearing_consistency,
)

from .factories import TEE_1, fix_at, north_of


def _state(settings: EngineSettings) -> RoundState:
    return RoundState(round_id="r", user_id="u", course_id="c", settings=settings)


def _run(analyzer: MovementAnalyzer, state: RoundState, fixes):
    results = []
    for fix in fixes:
        results.append(analyzer.analyze(state, fix))
    return results


def test_fast_200m_jump_is_a_shot(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    (_, first), (analysis, event) = _run(
        analyzer,
        state,
        [fix_at(TEE_1, 0, accuracy=5.0), fix_at(north_of(TEE_1, 200.0), 4, accuracy=5.0)],
    )

    assert first is None
    assert analysis.shot_detected is True
    assert analysis.confidence > 0.8
    assert analysis.speed_mps == pytest.approx(50.0, abs=0.1)
    assert analysis.estimated_distance.meters == pytest.approx(200.0, abs=0.01)
    assert analysis.estimated_club == "3-Wood"
    assert event.sequence_number == 1
    assert event.hole_number == 1
    assert state.shot_events == (event,)


def test_walking_is_not_a_shot(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    _, (analysis, event) = _run(
        analyzer, state, [fix_at(TEE_1, 0), fix_at(north_of(TEE_1, 5.0), 10)]
    )

    assert analysis.shot_detected is False
    assert event is None
    assert "likely walking" in analysis.notes[0]


def test_first_fix_has_no_history(settings: EngineSettings) -> None:
    analysis, _ = MovementAnalyzer(settings).analyze(_state(settings), fix_at(TEE_1, 0))

    assert analysis.shot_detected is False
    assert analysis.notes == ["Insufficient location history for analysis"]


def test_confidence_never_rises_as_accuracy_degrades(settings: EngineSettings) -> None:
    confidences = []
    for accuracy in (2.0, 3.0, 5.0, 8.0, 12.0, 20.0, 40.0, 66.0, 80.0):
        analyzer = MovementAnalyzer(settings)
        state = _state(settings)
        _, (analysis, _) = _run(
            analyzer,
            state,
            [
                fix_at(TEE_1, 0, accuracy=accuracy),
                fix_at(north_of(TEE_1, 200.0), 4, accuracy=accuracy),
            ],
        )
        confidences.append(analysis.confidence)

    assert confidences == sorted(confidences, reverse=True)
    assert confidences[0] > confidences[-2] > 0.0
    assert confidences[-1] == 0.0


def test_poor_accuracy_raises_the_distance_threshold(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)

    assert analyzer.distance_threshold_m(None) == 30.0
    assert analyzer.distance_threshold_m(5.0) == 30.0
    assert analyzer.distance_threshold_m(20.0) == 60.0


def test_mid_flight_fix_does_not_start_a_second_shot(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    _run(
        analyzer,
        state,
        [
            fix_at(TEE_1, 0),
            fix_at(north_of(TEE_1, 100.0), 2),
            fix_at(north_of(TEE_1, 200.0), 4),
        ],
    )

    assert len(state.shot_events) == 1


def test_moving_start_fix_is_not_a_shot_origin(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    _, (analysis, _) = _run(
        analyzer,
        state,
        [fix_at(TEE_1, 0, speed=12.0), fix_at(north_of(TEE_1, 200.0), 4)],
    )

    assert analysis.shot_detected is False


def test_shots_do_not_reuse_fixes_before_previous_shot(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    _run(
        analyzer,
        state,
        [
            fix_at(TEE_1, 0),
            fix_at(north_of(TEE_1, 200.0), 4),
            fix_at(north_of(TEE_1, 200.0), 8),
            fix_at(north_of(TEE_1, 330.0), 12),
        ],
    )

    shots = state.shot_events
    assert [s.sequence_number for s in shots] == [1, 2]
    assert shots[1].estimated_distance_m == pytest.approx(130.0, abs=0.01)


def test_low_confidence_shot_has_no_club(settings: EngineSettings) -> None:
    strict = EngineSettings(club_confidence_floor=0.99)
    analyzer = MovementAnalyzer(strict)

    _, (analysis, event) = _run(
        analyzer,
        _state(strict),
        [fix_at(TEE_1, 0, accuracy=8.0), fix_at(north_of(TEE_1, 200.0), 4, accuracy=8.0)],
    )

    assert analysis.shot_detected is True
    assert analysis.estimated_club is None
    assert event.estimated_club is None


def test_unusable_fix_is_reported_not_raised(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)
    analyzer.analyze(state, fix_at(TEE_1, 0))

    analysis, event = analyzer.analyze(state, fix_at(Coordinate(lat=math.nan, lon=0.0), 4))

    assert analysis.notes == ["Fix has unusable coordinates"]
    assert event is None


@pytest.mark.parametrize(
    "accuracy,expected",
    [(None, 0.5), (1.0, 1.0), (3.0, 1.0), (14.0, 0.5), (25.0, 0.0), (60.0, 0.0)],
)
def test_accuracy_score(accuracy, expected) -> None:
    assert accuracy_score(accuracy) == pytest.approx(expected)


def test_bearing_consistency_straight_and_doubling_back() -> None:
    straight = [fix_at(north_of(TEE_1, d), t) for t, d in enumerate((0.0, 50.0, 100.0))]
    back_and_forth = [fix_at(north_of(TEE_1, d), t) for t, d in enumerate((0.0, 50.0, 0.0))]

    assert bearing_consistency(straight) == pytest.approx(1.0)
    assert bearing_consistency(back_and_forth) == pytest.approx(0.0, abs=1e-6)
    assert bearing_consistency(straight[:2]) == 1.0


def test_late_start_fix_still_yields_the_shot(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)
    tee, landing = fix_at(TEE_1, 0), fix_at(north_of(TEE_1, 200.0), 4)

    (_, first), (analysis, event) = _run(analyzer, state, [landing, tee])

    assert first is None
    assert analysis.shot_detected is True
    assert analysis.start_fix == tee
    assert analysis.end_fix == landing
    assert event.timestamp == landing.timestamp
    assert state.shot_events == (event,)


def test_arrival_order_does_not_change_the_shot_count(settings: EngineSettings) -> None:
    fixes = [
        fix_at(TEE_1, 0),
        fix_at(north_of(TEE_1, 200.0), 4),
        fix_at(north_of(TEE_1, 200.0), 6),
    ]
    in_order, shuffled = _state(settings), _state(settings)

    _run(MovementAnalyzer(settings), in_order, fixes)
    _run(MovementAnalyzer(settings), shuffled, [fixes[2], fixes[0], fixes[1]])

    assert len(in_order.shot_events) == len(shuffled.shot_events) == 1


def test_late_fix_inside_a_shot_is_not_counted_again(settings: EngineSettings) -> None:
    analyzer = MovementAnalyzer(settings)
    state = _state(settings)

    _run(
        analyzer,
        state,
        [
            fix_at(TEE_1, 0),
            fix_at(north_of(TEE_1, 200.0), 4),
            fix_at(north_of(TEE_1, 100.0), 2),
        ],
    )

    assert len(state.shot_events) == 1
