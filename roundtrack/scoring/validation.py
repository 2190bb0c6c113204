from __future__ import annotations

from typing import List, Optional

from .models import ScoreValidation

MIN_SCORE_PER_HOLE = 1
MAX_SCORE_PER_HOLE = 15
MAX_REASONABLE_SCORE = 12


def _correction_confidence(detected: int, final: int, corrected: bool) -> float:
    if not corrected:
        return 0.9
    difference = abs(detected - final)
    if difference == 0:
        return 0.9
    if difference == 1:
        return 0.7
    if difference == 2:
        return 0.5
    return 0.3


def validate_confirmed_score(
    detected_score: int, confirmed_score: Optional[int] = None
) -> ScoreValidation:
    """Reconcile a suggested score with what the golfer confirmed.

    Scores outside 1..15 are rejected with ``ValueError``; the caller owns
    persisting the returned final score.
    """

    final = detected_score if confirmed_score is None else confirmed_score
    if not MIN_SCORE_PER_HOLE <= final <= MAX_SCORE_PER_HOLE:
        raise ValueError(
            f"score must be between {MIN_SCORE_PER_HOLE} and {MAX_SCORE_PER_HOLE}, got {final}"
        )

    corrected = confirmed_score is not None and confirmed_score != detected_score
    notes: List[str] = []
    if final > MAX_REASONABLE_SCORE:
        notes.append(f"Score unusually high (>{MAX_REASONABLE_SCORE})")
    else:
        notes.append("Score within reasonable range")
    if corrected:
        notes.append(f"User corrected detected score {detected_score} to {final}")

    return ScoreValidation(
        final_score=final,
        detected_score=detected_score,
        user_corrected=corrected,
        confidence=_correction_confidence(detected_score, final, corrected),
        notes=notes,
    )


__all__ = ["MAX_SCORE_PER_HOLE", "MIN_SCORE_PER_HOLE", "validate_confirmed_score"]
