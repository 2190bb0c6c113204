"""Telemetry hooks for round tracking events."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, MutableMapping, Optional

RoundTelemetryEmitter = Callable[[str, Mapping[str, object]], None]

_logger = logging.getLogger("roundtrack.telemetry")


def _now_ms() -> int:
    return int(time.time() * 1000)


class RoundTelemetry:
    """Forward tracking events to an optional emitter callback.

    Emitter failures are logged and never reach the tracking pipeline.
    """

    def __init__(self, emitter: RoundTelemetryEmitter | None = None) -> None:
        self._emitter: Optional[RoundTelemetryEmitter] = (
            emitter if callable(emitter) else None
        )

    @property
    def enabled(self) -> bool:
        return self._emitter is not None

    def set_emitter(self, candidate: RoundTelemetryEmitter | None) -> None:
        self._emitter = candidate if callable(candidate) else None

    def _safe_emit(self, event: str, payload: MutableMapping[str, object]) -> None:
        if not self._emitter:
            _logger.debug("telemetry emitter not configured for event %s", event)
            return
        try:
            self._emitter(event, dict(payload))
        except Exception:  # pragma: no cover - defensive logging only
            _logger.exception("failed to emit telemetry event %s", event)

    def record_round_started(self, round_id: str, course_id: str, hole: int) -> None:
        self._safe_emit(
            "round.start",
            {"roundId": round_id, "courseId": course_id, "hole": hole, "ts": _now_ms()},
        )

    def record_shot(
        self,
        round_id: str,
        hole: int,
        sequence: int,
        distance_yards: float,
        confidence: float,
        club: str | None = None,
    ) -> None:
        payload: Dict[str, object] = {
            "roundId": round_id,
            "hole": hole,
            "seq": sequence,
            "distanceYd": round(distance_yards, 1),
            "confidence": confidence,
            "ts": _now_ms(),
        }
        if club:
            payload["club"] = club
        self._safe_emit("round.shot", payload)

    def record_hole_change(
        self, round_id: str, from_hole: int, to_hole: int, *, automatic: bool
    ) -> None:
        self._safe_emit(
            "round.hole_change",
            {
                "roundId": round_id,
                "from": from_hole,
                "to": to_hole,
                "automatic": automatic,
                "ts": _now_ms(),
            },
        )

    def record_score_suggestion(
        self,
        round_id: str,
        hole: int,
        score: int,
        confidence: float,
        requires_confirmation: bool,
    ) -> None:
        self._safe_emit(
            "round.score_suggestion",
            {
                "roundId": round_id,
                "hole": hole,
                "score": score,
                "confidence": confidence,
                "requiresConfirmation": requires_confirmation,
                "ts": _now_ms(),
            },
        )

    def record_round_ended(self, round_id: str, shots: int) -> None:
        self._safe_emit(
            "round.end", {"roundId": round_id, "shots": shots, "ts": _now_ms()}
        )


__all__ = ["RoundTelemetry", "RoundTelemetryEmitter"]
