from __future__ import annotations

from functools import lru_cache
from typing import NoReturn

from fastapi import HTTPException, status

from roundtrack.errors import (
    CoordinateValidationError,
    HoleNotFoundError,
    RoundAlreadyExistsError,
    RoundClosedError,
    RoundNotFoundError,
    RoundTrackError,
)
from roundtrack.tracking.tracker import RoundTracker


@lru_cache(maxsize=1)
def get_round_tracker() -> RoundTracker:
    return RoundTracker()


def raise_http(exc: RoundTrackError) -> NoReturn:
    """Translate an engine error into the matching HTTP error."""

    if isinstance(exc, RoundNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="round_not_found"
        ) from exc
    if isinstance(exc, HoleNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="hole_not_found"
        ) from exc
    if isinstance(exc, RoundClosedError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="round_closed"
        ) from exc
    if isinstance(exc, RoundAlreadyExistsError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="round_exists"
        ) from exc
    if isinstance(exc, CoordinateValidationError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


__all__ = ["get_round_tracker", "raise_http"]
