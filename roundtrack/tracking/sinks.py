from __future__ import annotations

from typing import Protocol, runtime_checkable

from roundtrack.courses.hole_detect import HoleTransition
from roundtrack.scoring.models import ScoreSuggestion

from .models import ShotEvent


@runtime_checkable
class RoundEventSink(Protocol):
    """Receives committed tracking results, e.g. to persist them.

    Called while the round lock is held; implementations should return
    quickly and must not call back into the tracker for the same round.
    """

    def shot_detected(self, round_id: str, event: ShotEvent) -> None: ...

    def hole_changed(self, round_id: str, transition: HoleTransition) -> None: ...

    def score_suggested(self, round_id: str, suggestion: ScoreSuggestion) -> None: ...


__all__ = ["RoundEventSink"]
