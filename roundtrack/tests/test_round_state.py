import pytest

from roundtrack.config import EngineSettings
from roundtrack.scoring import ScoreSuggestion
from roundtrack.tracking import RoundState, ShotEvent

from .factories import BASE_TIME, TEE_1, fix_at, north_of


def _state(**settings) -> RoundState:
    return RoundState(
        round_id="r-1",
        user_id="u-1",
        course_id="c-1",
        settings=EngineSettings(**settings),
    )


def _shot(sequence: int, hole: int = 1, end_s: float = 10.0) -> ShotEvent:
    start = fix_at(TEE_1, end_s - 4)
    end = fix_at(north_of(TEE_1, 200.0), end_s)
    return ShotEvent(
        sequence_number=sequence,
        hole_number=hole,
        start_fix=start,
        end_fix=end,
        estimated_distance_yards=218.72,
        estimated_distance_m=200.0,
        confidence=0.9,
        timestamp=end.timestamp,
    )


def _suggestion(hole: int, score: int) -> ScoreSuggestion:
    return ScoreSuggestion(
        hole_number=hole,
        par=4,
        suggested_score=score,
        confidence=0.8,
        detected_shot_count=score - 1,
        requires_confirmation=False,
    )


def test_buffer_is_most_recent_first_and_time_windowed() -> None:
    state = _state()

    for t in (0, 5, 11):
        state.add_fix(fix_at(north_of(TEE_1, t), t))

    timestamps = [(f.timestamp - BASE_TIME).total_seconds() for f in state.recent_fixes]
    assert timestamps == [11.0, 5.0]
    assert state.newest_fix.timestamp == state.recent_fixes[0].timestamp


def test_fix_exactly_at_window_edge_is_kept() -> None:
    state = _state()

    state.add_fix(fix_at(TEE_1, 0))
    state.add_fix(fix_at(TEE_1, 10))

    assert len(state.recent_fixes) == 2


def test_out_of_order_fix_is_inserted_by_timestamp() -> None:
    state = _state()

    state.add_fix(fix_at(north_of(TEE_1, 10.0), 10))
    assert state.add_fix(fix_at(north_of(TEE_1, 5.0), 5)) is True

    timestamps = [(f.timestamp - BASE_TIME).total_seconds() for f in state.recent_fixes]
    assert timestamps == [10.0, 5.0]


def test_stale_and_duplicate_fixes_are_dropped() -> None:
    state = _state()
    fix = fix_at(TEE_1, 20)

    assert state.add_fix(fix) is True
    assert state.add_fix(fix) is False
    assert state.add_fix(fix_at(TEE_1, 5)) is False
    assert len(state.recent_fixes) == 1


def test_capacity_keeps_newest() -> None:
    state = _state(fix_buffer_capacity=3)

    for t in range(5):
        state.add_fix(fix_at(north_of(TEE_1, t), t))

    assert len(state.recent_fixes) == 3
    assert (state.recent_fixes[-1].timestamp - BASE_TIME).total_seconds() == 2.0


def test_long_silence_counts_as_gap_on_current_hole() -> None:
    state = _state()

    state.add_fix(fix_at(TEE_1, 0))
    state.add_fix(fix_at(TEE_1, 45))

    assert state.gap_count() == 1
    state.begin_hole(2)
    assert state.gap_count() == 0
    assert state.gap_count(1) == 1


def test_shots_are_append_only_in_sequence() -> None:
    state = _state()

    state.append_shot(_shot(1))
    with pytest.raises(ValueError):
        state.append_shot(_shot(3))

    assert state.next_sequence == 2
    assert state.last_shot_end == state.shot_events[0].end_fix.timestamp


def test_shots_for_hole_restart_when_hole_is_replayed() -> None:
    state = _state()
    state.append_shot(_shot(1, hole=1, end_s=10))
    state.begin_hole(2)
    state.append_shot(_shot(2, hole=2, end_s=40))

    assert [s.sequence_number for s in state.shots_for_hole(1)] == [1]
    assert [s.sequence_number for s in state.shots_for_hole(2)] == [2]

    state.begin_hole(1)
    assert state.shots_for_hole(1) == []


def test_suggestion_per_hole_is_replaced() -> None:
    state = _state()

    state.record_suggestion(_suggestion(1, 5))
    state.record_suggestion(_suggestion(2, 3))
    state.record_suggestion(_suggestion(1, 4))

    assert [(s.hole_number, s.suggested_score) for s in state.score_suggestions] == [
        (2, 3),
        (1, 4),
    ]
