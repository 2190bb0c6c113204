from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from roundtrack.api.deps import get_round_tracker, raise_http
from roundtrack.api.security import require_api_key
from roundtrack.context import GolfContext, SkillLevel, UserProfile, WeatherConditions
from roundtrack.courses import CourseGeometry, HoleTransition
from roundtrack.errors import RoundTrackError
from roundtrack.geo import LocationFix
from roundtrack.scoring import ScoreSuggestion, ScoreValidation, validate_confirmed_score
from roundtrack.tracking.tracker import (
    FixOutcome,
    RoundSnapshot,
    RoundSummary,
    RoundTracker,
)

router = APIRouter(
    prefix="/api/rounds", tags=["rounds"], dependencies=[Depends(require_api_key)]
)


class StartRoundRequest(BaseModel):
    user_id: str = Field(validation_alias=AliasChoices("user_id", "userId"))
    course: CourseGeometry
    round_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("round_id", "roundId")
    )
    starting_hole: Optional[int] = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("starting_hole", "startingHole"),
    )
    first_fix: Optional[LocationFix] = Field(
        default=None, validation_alias=AliasChoices("first_fix", "firstFix")
    )

    model_config = ConfigDict(populate_by_name=True)


class AdvanceHoleRequest(BaseModel):
    hole_number: int = Field(
        ge=1, validation_alias=AliasChoices("hole_number", "holeNumber")
    )


class ScoreSuggestionRequest(BaseModel):
    hole_number: Optional[int] = Field(
        default=None, ge=1, validation_alias=AliasChoices("hole_number", "holeNumber")
    )


class ScoreConfirmationRequest(BaseModel):
    detected_score: int = Field(
        validation_alias=AliasChoices("detected_score", "detectedScore")
    )
    confirmed_score: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("confirmed_score", "confirmedScore")
    )


@router.post("", response_model=RoundSnapshot, status_code=status.HTTP_201_CREATED)
def start_round(
    body: StartRoundRequest,
    tracker: RoundTracker = Depends(get_round_tracker),
) -> RoundSnapshot:
    try:
        state = tracker.start_round(
            user_id=body.user_id,
            course=body.course,
            round_id=body.round_id,
            starting_hole=body.starting_hole,
            first_fix=body.first_fix,
        )
        return tracker.snapshot(state.round_id)
    except RoundTrackError as exc:
        raise_http(exc)


@router.get("/{round_id}", response_model=RoundSnapshot)
def get_round(
    round_id: str, tracker: RoundTracker = Depends(get_round_tracker)
) -> RoundSnapshot:
    try:
        return tracker.snapshot(round_id)
    except RoundTrackError as exc:
        raise_http(exc)


@router.post("/{round_id}/fixes", response_model=FixOutcome)
def post_fix(
    round_id: str,
    fix: LocationFix,
    tracker: RoundTracker = Depends(get_round_tracker),
) -> FixOutcome:
    try:
        return tracker.process_fix(round_id, fix)
    except RoundTrackError as exc:
        raise_http(exc)


@router.post("/{round_id}/hole", response_model=HoleTransition)
def advance_hole(
    round_id: str,
    body: AdvanceHoleRequest,
    tracker: RoundTracker = Depends(get_round_tracker),
) -> HoleTransition:
    try:
        return tracker.advance_hole(round_id, body.hole_number)
    except RoundTrackError as exc:
        raise_http(exc)


@router.post("/{round_id}/score-suggestion", response_model=ScoreSuggestion)
def score_suggestion(
    round_id: str,
    body: ScoreSuggestionRequest,
    tracker: RoundTracker = Depends(get_round_tracker),
) -> ScoreSuggestion:
    try:
        return tracker.complete_hole(round_id, body.hole_number)
    except RoundTrackError as exc:
        raise_http(exc)


@router.post("/{round_id}/score-confirmation", response_model=ScoreValidation)
def score_confirmation(
    round_id: str,
    body: ScoreConfirmationRequest,
    tracker: RoundTracker = Depends(get_round_tracker),
) -> ScoreValidation:
    try:
        tracker.snapshot(round_id)
    except RoundTrackError as exc:
        raise_http(exc)
    try:
        return validate_confirmed_score(body.detected_score, body.confirmed_score)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


@router.get("/{round_id}/context", response_model=GolfContext)
def get_context(
    round_id: str,
    wind_speed_mps: Optional[float] = Query(default=None, alias="windSpeedMps", ge=0),
    wind_from_deg: Optional[float] = Query(
        default=None, alias="windFromDeg", ge=0, lt=360
    ),
    temperature_c: Optional[float] = Query(default=None, alias="temperatureC"),
    skill_level: Optional[SkillLevel] = Query(default=None, alias="skillLevel"),
    handicap: Optional[float] = Query(default=None, ge=-10.0, le=54.0),
    tracker: RoundTracker = Depends(get_round_tracker),
) -> GolfContext:
    weather = None
    if wind_speed_mps is not None or temperature_c is not None:
        weather = WeatherConditions(
            wind_speed_mps=wind_speed_mps,
            wind_from_deg=wind_from_deg,
            temperature_c=temperature_c,
        )
    try:
        state = tracker.get_state(round_id)
        profile = None
        if skill_level is not None or handicap is not None:
            profile = UserProfile(
                user_id=state.user_id, skill_level=skill_level, handicap=handicap
            )
        return tracker.build_context(round_id, weather=weather, user_profile=profile)
    except RoundTrackError as exc:
        raise_http(exc)


@router.delete("/{round_id}", response_model=RoundSummary)
def end_round(
    round_id: str, tracker: RoundTracker = Depends(get_round_tracker)
) -> RoundSummary:
    try:
        return tracker.end_round(round_id)
    except RoundTrackError as exc:
        raise_http(exc)


__all__ = ["router"]
