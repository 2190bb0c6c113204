"""Round state, shot detection and the per-round tracking pipeline.

The orchestrator lives in :mod:`roundtrack.tracking.tracker`.
"""

from .models import MovementAnalysis, ShotEvent
from .movement import MovementAnalyzer, accuracy_score, bearing_consistency
from .state import RoundState

__all__ = [
    "MovementAnalysis",
    "MovementAnalyzer",
    "RoundState",
    "ShotEvent",
    "accuracy_score",
    "bearing_consistency",
]
