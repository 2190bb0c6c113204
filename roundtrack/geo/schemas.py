from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """WGS-84 point in decimal degrees."""

    lat: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    lon: float = Field(
        validation_alias=AliasChoices("lon", "lng", "longitude"),
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class LocationFix(BaseModel):
    coordinate: Coordinate
    timestamp: datetime
    accuracy_m: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("accuracy_m", "accuracyMeters", "accuracy"),
    )
    altitude_m: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("altitude_m", "altitudeMeters", "altitude"),
    )
    heading_deg: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("heading_deg", "headingDegrees", "heading"),
    )
    speed_mps: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "speed_mps", "speedMetersPerSecond", "speed"
        ),
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DistanceResult(BaseModel):
    meters: float
    yards: float
    feet: float
    kilometers: float
    miles: float
    bearing_deg: Optional[float] = Field(default=None, serialization_alias="bearingDeg")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


__all__ = ["Coordinate", "DistanceResult", "LocationFix"]
