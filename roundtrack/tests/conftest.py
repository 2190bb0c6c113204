"""Shared pytest fixtures for engine and API tests."""

from __future__ import annotations

from typing import Iterator, List, Mapping, Tuple

import pytest
from fastapi.testclient import TestClient

from roundtrack.api.deps import get_round_tracker
from roundtrack.app import app
from roundtrack.config import EngineSettings, reset_settings_cache
from roundtrack.courses import CourseGeometry, HoleTransition
from roundtrack.scoring import ScoreSuggestion
from roundtrack.telemetry import RoundTelemetry
from roundtrack.tracking import ShotEvent
from roundtrack.tracking.tracker import RoundTracker

from .factories import build_course


class RecordingSink:
    def __init__(self) -> None:
        self.shots: List[Tuple[str, ShotEvent]] = []
        self.transitions: List[Tuple[str, HoleTransition]] = []
        self.suggestions: List[Tuple[str, ScoreSuggestion]] = []

    def shot_detected(self, round_id: str, event: ShotEvent) -> None:
        self.shots.append((round_id, event))

    def hole_changed(self, round_id: str, transition: HoleTransition) -> None:
        self.transitions.append((round_id, transition))

    def score_suggested(self, round_id: str, suggestion: ScoreSuggestion) -> None:
        self.suggestions.append((round_id, suggestion))


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def course() -> CourseGeometry:
    return build_course()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def telemetry_events() -> List[Tuple[str, Mapping[str, object]]]:
    return []


@pytest.fixture
def tracker(
    settings: EngineSettings,
    sink: RecordingSink,
    telemetry_events: List[Tuple[str, Mapping[str, object]]],
) -> RoundTracker:
    telemetry = RoundTelemetry(
        emitter=lambda event, payload: telemetry_events.append((event, payload))
    )
    return RoundTracker(settings=settings, sink=sink, telemetry=telemetry)


@pytest.fixture
def client(tracker: RoundTracker, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.delenv("REQUIRE_API_KEY", raising=False)
    app.dependency_overrides[get_round_tracker] = lambda: tracker
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_round_tracker, None)
