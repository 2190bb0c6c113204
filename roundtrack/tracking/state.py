"""Per-round mutable state owned by the tracking pipeline."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from roundtrack.config import EngineSettings, get_settings
from roundtrack.courses.hole_detect import DebounceState
from roundtrack.courses.position import PositionResult
from roundtrack.geo.schemas import LocationFix

from .models import ShotEvent

if TYPE_CHECKING:
    from roundtrack.scoring.models import ScoreSuggestion

logger = logging.getLogger(__name__)


class RoundState:
    """Everything the engine remembers about one active round.

    ``recent_fixes`` is ordered most-recent-first by fix timestamp, not by
    arrival, and never holds a fix older than ``fix_window_s`` relative to
    the newest one. Shot events are append-only with consecutive sequence
    numbers starting at 1.
    """

    def __init__(
        self,
        *,
        round_id: str,
        user_id: str,
        course_id: str,
        current_hole: int = 1,
        settings: EngineSettings | None = None,
    ) -> None:
        self.round_id = round_id
        self.user_id = user_id
        self.course_id = course_id
        self.settings = settings or get_settings()

        self.current_hole = current_hole
        self.last_known_position: Optional[PositionResult] = None
        self.last_shot_end: Optional[datetime] = None
        self.completion_since: Optional[datetime] = None
        self.debounce = DebounceState()
        self.closed = False

        self._fixes: List[LocationFix] = []
        self._newest: Optional[datetime] = None
        self._shots: List[ShotEvent] = []
        self._suggestions: List["ScoreSuggestion"] = []
        self._hole_start_sequence: Dict[int, int] = {current_hole: 1}
        self._gap_counts: Dict[int, int] = {current_hole: 0}

    # Fix buffer
    @property
    def recent_fixes(self) -> Tuple[LocationFix, ...]:
        return tuple(self._fixes)

    @property
    def newest_fix(self) -> Optional[LocationFix]:
        return self._fixes[0] if self._fixes else None

    def add_fix(self, fix: LocationFix) -> bool:
        """Insert *fix* by timestamp; return ``False`` when it was discarded.

        Exact duplicates and fixes already outside the window are dropped.
        A jump of more than ``gap_threshold_s`` past the newest fix counts
        as a GPS gap against the current hole.
        """

        window = timedelta(seconds=self.settings.fix_window_s)
        if any(
            existing.timestamp == fix.timestamp
            and existing.coordinate == fix.coordinate
            for existing in self._fixes
        ):
            logger.debug("round %s: duplicate fix at %s", self.round_id, fix.timestamp)
            return False
        if self._newest is not None and fix.timestamp < self._newest - window:
            logger.debug("round %s: stale fix at %s dropped", self.round_id, fix.timestamp)
            return False

        if self._newest is not None:
            gap = (fix.timestamp - self._newest).total_seconds()
            if gap > self.settings.gap_threshold_s:
                self._gap_counts[self.current_hole] = (
                    self._gap_counts.get(self.current_hole, 0) + 1
                )
                logger.info(
                    "round %s: %.0fs GPS gap on hole %s",
                    self.round_id,
                    gap,
                    self.current_hole,
                )

        index = 0
        while index < len(self._fixes) and self._fixes[index].timestamp >= fix.timestamp:
            index += 1
        self._fixes.insert(index, fix)
        if self._newest is None or fix.timestamp > self._newest:
            self._newest = fix.timestamp
        self._prune()
        return True

    def _prune(self) -> None:
        if self._newest is None:
            return
        cutoff = self._newest - timedelta(seconds=self.settings.fix_window_s)
        self._fixes = [f for f in self._fixes if f.timestamp >= cutoff][
            : self.settings.fix_buffer_capacity
        ]

    # Shots
    @property
    def shot_events(self) -> Tuple[ShotEvent, ...]:
        return tuple(self._shots)

    @property
    def next_sequence(self) -> int:
        return len(self._shots) + 1

    def append_shot(self, event: ShotEvent) -> None:
        if event.sequence_number != self.next_sequence:
            raise ValueError(
                f"shot sequence {event.sequence_number} out of order, "
                f"expected {self.next_sequence}"
            )
        self._shots.append(event)
        if self.last_shot_end is None or event.end_fix.timestamp > self.last_shot_end:
            self.last_shot_end = event.end_fix.timestamp

    def shots_for_hole(self, hole_number: int) -> List[ShotEvent]:
        """Shots attributed to *hole_number* since it was last teed off."""

        first = self._hole_start_sequence.get(hole_number, 1)
        return [
            shot
            for shot in self._shots
            if shot.hole_number == hole_number and shot.sequence_number >= first
        ]

    # Holes
    def begin_hole(self, hole_number: int) -> None:
        """Explicit hole transition; restarts per-hole bookkeeping."""

        self.current_hole = hole_number
        self._hole_start_sequence[hole_number] = self.next_sequence
        self._gap_counts[hole_number] = 0
        self.completion_since = None
        self.debounce.clear()

    def gap_count(self, hole_number: int | None = None) -> int:
        hole = self.current_hole if hole_number is None else hole_number
        return self._gap_counts.get(hole, 0)

    # Score suggestions
    @property
    def score_suggestions(self) -> Tuple["ScoreSuggestion", ...]:
        return tuple(self._suggestions)

    def record_suggestion(self, suggestion: "ScoreSuggestion") -> None:
        self._suggestions = [
            s for s in self._suggestions if s.hole_number != suggestion.hole_number
        ]
        self._suggestions.append(suggestion)


__all__ = ["RoundState"]
