from .reconciliation import (
    DISAGREEMENT_REASON,
    Outcome,
    Reconciliation,
    ScoreSubmission,
    Side,
    reconcile,
    submissions_agree,
    validate_score,
    validate_submission,
)
from .scoring import record_submission, side_of, submission_slot

__all__ = [
    "DISAGREEMENT_REASON",
    "Outcome",
    "Reconciliation",
    "ScoreSubmission",
    "Side",
    "reconcile",
    "record_submission",
    "side_of",
    "submission_slot",
    "submissions_agree",
    "validate_score",
    "validate_submission",
]
