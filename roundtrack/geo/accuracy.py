"""GPS accuracy grading and fix stability tracking."""

from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Deque, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .schemas import LocationFix

AccuracyGrade = Literal["excellent", "good", "fair", "poor", "unknown"]

EXCELLENT_MAX_M = 3.0
GOOD_MAX_M = 5.0
FAIR_MAX_M = 10.0

_RECOMMENDATIONS = {
    "excellent": "Perfect for precise distance measurements",
    "good": "Suitable for golf distance calculations",
    "fair": "Adequate for general golf guidance",
    "poor": "Distances are approximate; wait for a better signal",
    "unknown": "Searching for GPS signal",
}


class GpsAccuracy(BaseModel):
    grade: AccuracyGrade
    is_usable: bool
    accuracy_m: Optional[float] = None
    recommendation: str

    model_config = ConfigDict(frozen=True)


def gps_accuracy_grade(accuracy_m: float | None) -> GpsAccuracy:
    """Bucket a reported horizontal accuracy into a quality grade.

    Missing or non-positive accuracy means the receiver is still searching;
    that is reported as ``unknown`` and never raises.
    """

    grade: AccuracyGrade
    if accuracy_m is None or not accuracy_m > 0:
        grade = "unknown"
        accuracy_m = None
    elif accuracy_m <= EXCELLENT_MAX_M:
        grade = "excellent"
    elif accuracy_m <= GOOD_MAX_M:
        grade = "good"
    elif accuracy_m <= FAIR_MAX_M:
        grade = "fair"
    else:
        grade = "poor"

    return GpsAccuracy(
        grade=grade,
        is_usable=grade in ("excellent", "good", "fair"),
        accuracy_m=accuracy_m,
        recommendation=_RECOMMENDATIONS[grade],
    )


class GpsStability(BaseModel):
    grade: AccuracyGrade
    average_accuracy_m: Optional[float] = None
    stable_for_s: float = 0.0
    progress: float = 0.0
    stable: bool = False

    model_config = ConfigDict(frozen=True)


class GpsStabilityMonitor:
    """Decide when a fix stream has settled enough for precise distances.

    The stream counts as stable once every fix for ``required_duration_s``
    (by fix timestamp) reported accuracy within ``required_accuracy_m`` and
    the rolling average of the latest readings stays within it too. One
    worse or missing reading restarts the run.
    """

    history_size = 10
    average_window = 5

    def __init__(
        self, required_accuracy_m: float = 10.0, required_duration_s: float = 3.0
    ) -> None:
        self.required_accuracy_m = required_accuracy_m
        self.required_duration_s = required_duration_s
        self._history: Deque[Tuple[datetime, float]] = deque(maxlen=self.history_size)
        self._run_started: datetime | None = None

    def reset(self) -> None:
        self._history.clear()
        self._run_started = None

    def _average(self) -> float | None:
        if not self._history:
            return None
        recent = list(self._history)[-self.average_window :]
        return sum(acc for _, acc in recent) / len(recent)

    def observe(self, fix: LocationFix) -> GpsStability:
        grade = gps_accuracy_grade(fix.accuracy_m).grade
        accuracy = fix.accuracy_m
        if accuracy is None or grade == "unknown" or accuracy > self.required_accuracy_m:
            self.reset()
            return GpsStability(grade=grade)

        if self._run_started is None or fix.timestamp < self._run_started:
            self._run_started = fix.timestamp
        self._history.append((fix.timestamp, accuracy))

        stable_for = max(0.0, (fix.timestamp - self._run_started).total_seconds())
        average = self._average()
        if self.required_duration_s > 0:
            progress = min(stable_for / self.required_duration_s, 1.0)
        else:
            progress = 1.0
        stable = (
            stable_for >= self.required_duration_s
            and average is not None
            and average <= self.required_accuracy_m
        )
        return GpsStability(
            grade=grade,
            average_accuracy_m=average,
            stable_for_s=stable_for,
            progress=round(progress, 3),
            stable=stable,
        )


__all__ = [
    "AccuracyGrade",
    "GpsAccuracy",
    "GpsStability",
    "GpsStabilityMonitor",
    "gps_accuracy_grade",
]
