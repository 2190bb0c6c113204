"""Error types raised by the round tracking engine."""

from __future__ import annotations


class RoundTrackError(Exception):
    pass


class CoordinateValidationError(RoundTrackError, ValueError):
    """Raised when a latitude/longitude pair is not a usable WGS-84 point."""

    def __init__(self, lat: float, lon: float, reason: str) -> None:
        super().__init__(f"invalid coordinate ({lat!r}, {lon!r}): {reason}")
        self.lat = lat
        self.lon = lon
        self.reason = reason


class RoundNotFoundError(RoundTrackError, KeyError):
    pass


class RoundClosedError(RoundTrackError):
    pass


class RoundAlreadyExistsError(RoundTrackError):
    pass


class HoleNotFoundError(RoundTrackError, KeyError):
    pass


__all__ = [
    "CoordinateValidationError",
    "HoleNotFoundError",
    "RoundAlreadyExistsError",
    "RoundClosedError",
    "RoundNotFoundError",
    "RoundTrackError",
]
