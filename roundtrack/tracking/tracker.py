"""Round orchestration: one lock per round, pure analysis, guarded commit."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from roundtrack import metrics
from roundtrack.config import EngineSettings, get_settings
from roundtrack.context.assembler import build_context as assemble_context
from roundtrack.context.schemas import GolfContext, UserProfile, WeatherConditions
from roundtrack.courses.hole_detect import (
    HoleChangeDetector,
    HoleTransition,
    suggest_hole,
)
from roundtrack.courses.position import PositionResult, resolve_position
from roundtrack.courses.schemas import CourseGeometry, HoleGeometry
from roundtrack.errors import (
    HoleNotFoundError,
    RoundAlreadyExistsError,
    RoundClosedError,
    RoundNotFoundError,
)
from roundtrack.geo.accuracy import GpsStability, GpsStabilityMonitor
from roundtrack.geo.schemas import LocationFix
from roundtrack.scoring.completion import HoleCompletionDetector, analyze_completion
from roundtrack.scoring.engine import ScoreEngine
from roundtrack.scoring.models import HoleCompletion, ScoreSuggestion
from roundtrack.telemetry import RoundTelemetry

from .models import MovementAnalysis, ShotEvent
from .movement import MovementAnalyzer
from .sinks import RoundEventSink
from .state import RoundState

FixStatus = Literal["committed", "discarded", "cancelled"]

MAX_REMEMBERED_ENDED_ROUNDS = 1024

logger = logging.getLogger(__name__)


class FixOutcome(BaseModel):
    """Everything one fix produced. ``status`` says whether it was applied."""

    round_id: str
    status: FixStatus
    hole_number: int
    position: Optional[PositionResult] = None
    analysis: MovementAnalysis = Field(default_factory=MovementAnalysis)
    shot: Optional[ShotEvent] = None
    transition: Optional[HoleTransition] = None
    completion: Optional[HoleCompletion] = None
    score_suggestion: Optional[ScoreSuggestion] = None
    gps: Optional[GpsStability] = None

    model_config = ConfigDict(frozen=True)


class RoundSnapshot(BaseModel):
    round_id: str
    user_id: str
    course_id: str
    current_hole: int
    shots: List[ShotEvent]
    score_suggestions: List[ScoreSuggestion]
    last_position: Optional[PositionResult] = None
    buffered_fixes: int = 0
    closed: bool = False

    model_config = ConfigDict(frozen=True)


class RoundSummary(BaseModel):
    round_id: str
    holes_scored: int
    total_shots: int
    total_suggested_score: int
    score_suggestions: List[ScoreSuggestion]

    model_config = ConfigDict(frozen=True)


@dataclass
class _ActiveRound:
    state: RoundState
    course: CourseGeometry
    gps: GpsStabilityMonitor
    lock: threading.Lock = field(default_factory=threading.Lock)


class RoundTracker:
    """Drive every active round from incoming GPS fixes.

    Fixes for the same round are serialised by that round's lock; different
    rounds never contend. Analysis results are only applied while the round
    is still open, so a round ended mid-analysis drops the in-flight result.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        sink: RoundEventSink | None = None,
        telemetry: RoundTelemetry | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.sink = sink
        self.telemetry = telemetry or RoundTelemetry()
        self.analyzer = MovementAnalyzer(self.settings)
        self.hole_detector = HoleChangeDetector(self.settings)
        self.completion_detector = HoleCompletionDetector(self.settings)
        self.score_engine = ScoreEngine(self.settings)
        self._rounds: Dict[str, _ActiveRound] = {}
        # ended round ids, oldest first
        self._ended: "OrderedDict[str, None]" = OrderedDict()
        self._registry_lock = threading.Lock()

    # Registry
    def _entry(self, round_id: str) -> _ActiveRound:
        with self._registry_lock:
            entry = self._rounds.get(round_id)
            ended = round_id in self._ended
        if entry is None:
            if ended:
                raise RoundClosedError(f"round {round_id} has ended")
            raise RoundNotFoundError(round_id)
        return entry

    def _hole(self, entry: _ActiveRound, number: int) -> HoleGeometry:
        hole = entry.course.hole(number)
        if hole is None:
            raise HoleNotFoundError(f"course {entry.course.course_id} has no hole {number}")
        return hole

    @property
    def active_round_ids(self) -> List[str]:
        with self._registry_lock:
            return sorted(self._rounds)

    def start_round(
        self,
        *,
        user_id: str,
        course: CourseGeometry,
        round_id: str | None = None,
        starting_hole: int | None = None,
        first_fix: LocationFix | None = None,
    ) -> RoundState:
        """Register a new round.

        Without ``starting_hole`` the first fix (if any) picks the hole via
        :func:`suggest_hole`; otherwise play starts on the course's first hole.
        """

        if not course.holes:
            raise HoleNotFoundError(f"course {course.course_id} has no holes")
        round_id = round_id or uuid.uuid4().hex

        if starting_hole is None:
            suggestion = (
                suggest_hole(course, first_fix.coordinate, settings=self.settings)
                if first_fix is not None
                else None
            )
            starting_hole = (
                suggestion.hole if suggestion is not None else course.holes[0].hole_number
            )
        if course.hole(starting_hole) is None:
            raise HoleNotFoundError(f"course {course.course_id} has no hole {starting_hole}")

        state = RoundState(
            round_id=round_id,
            user_id=user_id,
            course_id=course.course_id,
            current_hole=starting_hole,
            settings=self.settings,
        )
        entry = _ActiveRound(state=state, course=course, gps=GpsStabilityMonitor())
        with self._registry_lock:
            if round_id in self._rounds or round_id in self._ended:
                raise RoundAlreadyExistsError(round_id)
            self._rounds[round_id] = entry

        logger.info(
            "round %s started on %s, hole %s", round_id, course.course_id, starting_hole
        )
        self.telemetry.record_round_started(round_id, course.course_id, starting_hole)
        return state

    def get_state(self, round_id: str) -> RoundState:
        """Live state of an open round; read it only while no fix is in flight."""

        return self._entry(round_id).state

    def snapshot(self, round_id: str) -> RoundSnapshot:
        entry = self._entry(round_id)
        with entry.lock:
            state = entry.state
            return RoundSnapshot(
                round_id=state.round_id,
                user_id=state.user_id,
                course_id=state.course_id,
                current_hole=state.current_hole,
                shots=list(state.shot_events),
                score_suggestions=list(state.score_suggestions),
                last_position=state.last_known_position,
                buffered_fixes=len(state.recent_fixes),
                closed=state.closed,
            )

    # Fix pipeline
    def process_fix(self, round_id: str, fix: LocationFix) -> FixOutcome:
        entry = self._entry(round_id)
        started = time.perf_counter()
        with entry.lock:
            outcome = self._process_locked(entry, fix)
        metrics.observe_fix(outcome.status, (time.perf_counter() - started) * 1000.0)
        return outcome

    def _process_locked(self, entry: _ActiveRound, fix: LocationFix) -> FixOutcome:
        state = entry.state
        if state.closed:
            raise RoundClosedError(f"round {state.round_id} has ended")

        hole_number = state.current_hole
        gps = entry.gps.observe(fix)
        if not state.add_fix(fix):
            return FixOutcome(
                round_id=state.round_id, status="discarded", hole_number=hole_number, gps=gps
            )

        hole = entry.course.hole(hole_number)
        position = resolve_position(fix, hole, self.settings) if hole else None
        analysis = self.analyzer.evaluate(state, fix)
        shot = self.analyzer.build_shot_event(state, analysis)

        transition: Optional[HoleTransition] = None
        if self.settings.auto_advance_holes:
            transition = self.hole_detector.observe(
                state.debounce, entry.course, hole_number, fix, position
            )
        completion = self.completion_detector.observe(state, fix, position)

        if state.closed:
            logger.info(
                "round %s ended during analysis, fix at %s dropped",
                state.round_id,
                fix.timestamp,
            )
            return FixOutcome(
                round_id=state.round_id,
                status="cancelled",
                hole_number=hole_number,
                position=position,
                analysis=analysis,
                completion=completion,
                gps=gps,
            )

        # commit
        if position is not None and state.newest_fix is fix:
            state.last_known_position = position
        if shot is not None:
            self._commit_shot(state, shot)

        suggestion: Optional[ScoreSuggestion] = None
        if transition is not None:
            if hole is not None and not self._has_suggestion(state, hole_number):
                suggestion = self._commit_suggestion(state, hole, completion)
            self._commit_transition(state, transition, automatic=True)
        elif (
            completion.completed
            and hole is not None
            and not self._has_suggestion(state, hole_number, completed_only=True)
        ):
            suggestion = self._commit_suggestion(state, hole, completion)

        return FixOutcome(
            round_id=state.round_id,
            status="committed",
            hole_number=hole_number,
            position=position,
            analysis=analysis,
            shot=shot,
            transition=transition,
            completion=completion,
            score_suggestion=suggestion,
            gps=gps,
        )

    @staticmethod
    def _has_suggestion(
        state: RoundState, hole_number: int, completed_only: bool = False
    ) -> bool:
        return any(
            s.hole_number == hole_number and (s.completed or not completed_only)
            for s in state.score_suggestions
        )

    def _commit_shot(self, state: RoundState, shot: ShotEvent) -> None:
        state.append_shot(shot)
        metrics.SHOTS_DETECTED.inc()
        logger.info(
            "round %s: shot %s on hole %s (%.0f yd, confidence %.2f)",
            state.round_id,
            shot.sequence_number,
            shot.hole_number,
            shot.estimated_distance_yards,
            shot.confidence,
        )
        self.telemetry.record_shot(
            state.round_id,
            shot.hole_number,
            shot.sequence_number,
            shot.estimated_distance_yards,
            shot.confidence,
            shot.estimated_club,
        )
        if self.sink is not None:
            self.sink.shot_detected(state.round_id, shot)

    def _commit_transition(
        self, state: RoundState, transition: HoleTransition, *, automatic: bool
    ) -> None:
        state.begin_hole(transition.to_hole)
        source = "auto" if automatic else "manual"
        metrics.HOLE_TRANSITIONS.labels(source=source).inc()
        logger.info(
            "round %s: hole %s -> %s (%s)",
            state.round_id,
            transition.from_hole,
            transition.to_hole,
            source,
        )
        self.telemetry.record_hole_change(
            state.round_id, transition.from_hole, transition.to_hole, automatic=automatic
        )
        if self.sink is not None:
            self.sink.hole_changed(state.round_id, transition)

    def _commit_suggestion(
        self,
        state: RoundState,
        hole: HoleGeometry,
        completion: Optional[HoleCompletion],
    ) -> ScoreSuggestion:
        suggestion = self.score_engine.suggest_score(state, hole, completion)
        state.record_suggestion(suggestion)
        metrics.observe_score_suggestion(suggestion.requires_confirmation)
        self.telemetry.record_score_suggestion(
            state.round_id,
            suggestion.hole_number,
            suggestion.suggested_score,
            suggestion.confidence,
            suggestion.requires_confirmation,
        )
        if self.sink is not None:
            self.sink.score_suggested(state.round_id, suggestion)
        return suggestion

    # Explicit signals
    def advance_hole(self, round_id: str, hole_number: int) -> HoleTransition:
        """Golfer-initiated hole change; scores the hole being left if unscored."""

        entry = self._entry(round_id)
        with entry.lock:
            state = entry.state
            if state.closed:
                raise RoundClosedError(f"round {round_id} has ended")
            target = self._hole(entry, hole_number)
            current = entry.course.hole(state.current_hole)
            if current is not None and not self._has_suggestion(state, current.hole_number):
                self._commit_suggestion(state, current, self._completion_snapshot(state))
            transition = HoleTransition(
                from_hole=state.current_hole,
                to_hole=target.hole_number,
                timestamp=(
                    state.newest_fix.timestamp
                    if state.newest_fix is not None
                    else datetime.now(timezone.utc)
                ),
                consecutive_fixes=0,
                reason="manual",
            )
            self._commit_transition(state, transition, automatic=False)
            return transition

    def _completion_snapshot(self, state: RoundState) -> Optional[HoleCompletion]:
        position = state.last_known_position
        if position is None or position.hole_number != state.current_hole:
            return None
        return analyze_completion(position, self.settings)

    def complete_hole(self, round_id: str, hole_number: int | None = None) -> ScoreSuggestion:
        """Explicit completion signal: the golfer says the hole is finished."""

        entry = self._entry(round_id)
        with entry.lock:
            state = entry.state
            if state.closed:
                raise RoundClosedError(f"round {round_id} has ended")
            hole = self._hole(entry, state.current_hole if hole_number is None else hole_number)
            snapshot = None
            if hole.hole_number == state.current_hole:
                snapshot = self._completion_snapshot(state)
            if snapshot is None:
                snapshot = HoleCompletion(hole_number=hole.hole_number)
            completion = snapshot.model_copy(
                update={"completed": True, "recommended_action": "Completed by golfer"}
            )
            return self._commit_suggestion(state, hole, completion)

    def build_context(
        self,
        round_id: str,
        weather: WeatherConditions | None = None,
        user_profile: UserProfile | None = None,
    ) -> GolfContext:
        entry = self._entry(round_id)
        with entry.lock:
            state = entry.state
            suggestion = next(
                (
                    s
                    for s in state.score_suggestions
                    if s.hole_number == state.current_hole
                ),
                None,
            )
            return assemble_context(
                state,
                state.last_known_position,
                score_suggestion=suggestion,
                weather=weather,
                user_profile=user_profile,
                hole=entry.course.hole(state.current_hole),
            )

    def end_round(self, round_id: str) -> RoundSummary:
        """Close the round; any fix still being analysed is discarded."""

        with self._registry_lock:
            entry = self._rounds.pop(round_id, None)
            if entry is None:
                if round_id in self._ended:
                    raise RoundClosedError(f"round {round_id} has ended")
                raise RoundNotFoundError(round_id)
            # flag before taking the round lock so in-flight analysis sees it
            entry.state.closed = True
            if len(self._ended) >= MAX_REMEMBERED_ENDED_ROUNDS:
                self._ended.popitem(last=False)
            self._ended[round_id] = None

        with entry.lock:
            state = entry.state
            suggestions = list(state.score_suggestions)
            summary = RoundSummary(
                round_id=round_id,
                holes_scored=len(suggestions),
                total_shots=len(state.shot_events),
                total_suggested_score=sum(s.suggested_score for s in suggestions),
                score_suggestions=suggestions,
            )
        logger.info("round %s ended with %s shots", round_id, summary.total_shots)
        self.telemetry.record_round_ended(round_id, summary.total_shots)
        return summary


__all__ = ["FixOutcome", "RoundSnapshot", "RoundSummary", "RoundTracker"]
