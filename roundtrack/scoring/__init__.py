"""Hole completion detection and automatic score suggestions."""

from .completion import HoleCompletionDetector, analyze_completion
from .engine import ScoreEngine
from .models import HoleCompletion, ScoreSuggestion, ScoreValidation
from .validation import validate_confirmed_score

__all__ = [
    "HoleCompletion",
    "HoleCompletionDetector",
    "ScoreEngine",
    "ScoreSuggestion",
    "ScoreValidation",
    "analyze_completion",
    "validate_confirmed_score",
]
