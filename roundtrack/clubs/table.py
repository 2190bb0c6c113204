from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class ClubBand(BaseModel):
    """Typical full-swing yardage band for one club."""

    club: str
    min_yards: float
    max_yards: float
    avg_yards: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "ClubBand":
        if not self.min_yards <= self.avg_yards <= self.max_yards:
            raise ValueError(
                f"{self.club}: expected min <= avg <= max yards, got "
                f"{self.min_yards}/{self.avg_yards}/{self.max_yards}"
            )
        return self

    @property
    def width(self) -> float:
        return self.max_yards - self.min_yards


def _band(club: str, low: float, high: float, avg: float) -> ClubBand:
    return ClubBand(club=club, min_yards=low, max_yards=high, avg_yards=avg)


# Longest first; ties in recommend_club resolve to the earlier (longer) club.
DEFAULT_CLUB_BANDS: Tuple[ClubBand, ...] = (
    _band("Driver", 200, 280, 230),
    _band("3-Wood", 190, 235, 210),
    _band("5-Wood", 175, 215, 195),
    _band("4-Iron", 165, 195, 182),
    _band("5-Iron", 155, 185, 172),
    _band("6-Iron", 145, 175, 161),
    _band("7-Iron", 135, 165, 150),
    _band("8-Iron", 125, 150, 140),
    _band("9-Iron", 115, 140, 130),
    _band("PW", 100, 130, 120),
    _band("SW", 75, 110, 95),
    _band("LW", 50, 85, 70),
    _band("Putter", 0, 40, 15),
)

__all__ = ["ClubBand", "DEFAULT_CLUB_BANDS"]
