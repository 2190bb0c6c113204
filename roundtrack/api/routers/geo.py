from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from roundtrack.api.deps import raise_http
from roundtrack.api.security import require_api_key
from roundtrack.clubs import (
    ClubConditions,
    ClubOption,
    adjusted_distance,
    club_options,
    recommend_club,
)
from roundtrack.config import get_settings
from roundtrack.courses import HoleGeometry, PositionResult, resolve_position
from roundtrack.errors import CoordinateValidationError
from roundtrack.geo import Coordinate, DistanceResult, LocationFix, distance_and_bearing

router = APIRouter(
    prefix="/api", tags=["geo"], dependencies=[Depends(require_api_key)]
)


class DistanceRequest(BaseModel):
    start: Coordinate = Field(validation_alias=AliasChoices("start", "from"))
    end: Coordinate = Field(validation_alias=AliasChoices("end", "to"))

    model_config = ConfigDict(populate_by_name=True)


class ClubRequest(BaseModel):
    distance_yards: float = Field(
        validation_alias=AliasChoices("distance_yards", "distanceYards")
    )
    conditions: Optional[ClubConditions] = None
    limit: int = Field(default=3, ge=0, le=13)

    model_config = ConfigDict(populate_by_name=True)


class ClubResponse(BaseModel):
    club: str
    adjusted_distance_yards: float
    options: List[ClubOption]


class PositionRequest(BaseModel):
    fix: LocationFix
    hole: HoleGeometry


@router.post("/distance", response_model=DistanceResult)
def distance(body: DistanceRequest) -> DistanceResult:
    try:
        return distance_and_bearing(body.start, body.end)
    except CoordinateValidationError as exc:
        raise_http(exc)


@router.post("/clubs/recommend", response_model=ClubResponse)
def clubs_recommend(body: ClubRequest) -> ClubResponse:
    try:
        return ClubResponse(
            club=recommend_club(body.distance_yards, body.conditions),
            adjusted_distance_yards=round(
                adjusted_distance(body.distance_yards, body.conditions), 2
            ),
            options=club_options(body.distance_yards, body.conditions, limit=body.limit),
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


@router.post("/position", response_model=PositionResult)
def position(body: PositionRequest) -> PositionResult:
    return resolve_position(body.fix, body.hole, get_settings())


__all__ = ["router"]
