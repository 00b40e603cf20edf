"""Score validation and dual-submission reconciliation.

Both participants report the final score from their own perspective. A match
is only decided when both reports are present:

1. **Disagreement**: the two reports are not mirror images of each other,
   so the match is disputed.
2. **Agreement on an illegal score**: the reports mirror each other but the
   score breaks the race rules (no winner, both winners, loser at or above
   the race target), so the match is disputed as well.
3. **Agreement on a legal score**: the match completes and the side that
   reached the race target wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

import structlog

from challenge_ladder.core.errors import (
    BothWonError,
    InvalidScoreError,
    LadderValidationError,
    NoWinnerError,
)

logger = structlog.get_logger()

DISAGREEMENT_REASON = "Submitted scores do not match"


class Side(StrEnum):
    CHALLENGER = "challenger"
    CHALLENGED = "challenged"


class Outcome(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    DISPUTED = "disputed"


@dataclass(frozen=True)
class ScoreSubmission:
    """One side's report of the final score.

    Attributes:
        my_games: Games won by the submitting side.
        opponent_games: Games won by the other side.
    """

    my_games: int
    opponent_games: int


@dataclass(frozen=True)
class Reconciliation:
    """Decision reached from the two submission slots.

    Attributes:
        outcome: Whether the match stays open, completes, or is disputed.
        winner: Winning side when completed.
        challenger_games: Agreed challenger games when completed.
        challenged_games: Agreed challenged games when completed.
        dispute_reason: Human-readable reason when disputed.
    """

    outcome: Outcome
    winner: Side | None = None
    challenger_games: int | None = None
    challenged_games: int | None = None
    dispute_reason: str | None = None


def _check_games(value: object, label: str) -> int:
    # bool is an int subclass but never a game count
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{label} games must be a non-negative integer"
        raise InvalidScoreError(msg)
    return value


def validate_submission(my_games: object, opponent_games: object) -> ScoreSubmission:
    """Check the shape of a single report before it occupies a slot.

    Raises:
        InvalidScoreError: If either count is not a non-negative integer.
    """
    return ScoreSubmission(
        my_games=_check_games(my_games, "My"),
        opponent_games=_check_games(opponent_games, "Opponent"),
    )


def validate_score(challenger_games: object, challenged_games: object, race_to: int) -> Side:
    """Validate a final score against the race target.

    Exactly one side must have reached ``race_to`` and the other side must
    have between 0 and ``race_to - 1`` games.

    Args:
        challenger_games: Games won by the challenger.
        challenged_games: Games won by the challenged party.
        race_to: Games needed to win the match.

    Returns:
        The winning side.

    Raises:
        InvalidScoreError: If a count is not a non-negative integer, or the
            loser's count is out of range.
        BothWonError: If both sides reached ``race_to``.
        NoWinnerError: If neither side reached ``race_to``.
    """
    challenger = _check_games(challenger_games, "Challenger")
    challenged = _check_games(challenged_games, "Challenged")

    challenger_won = challenger == race_to
    challenged_won = challenged == race_to

    if challenger_won and challenged_won:
        raise BothWonError()
    if not challenger_won and not challenged_won:
        raise NoWinnerError(race_to)

    loser_games = challenged if challenger_won else challenger
    if not 0 <= loser_games < race_to:
        msg = f"Loser games must be between 0 and {race_to - 1}"
        raise InvalidScoreError(msg)

    return Side.CHALLENGER if challenger_won else Side.CHALLENGED


def submissions_agree(
    challenger_submission: ScoreSubmission,
    challenged_submission: ScoreSubmission,
) -> bool:
    """Check whether two perspective-relative reports describe the same score.

    Challenger says "I got X, opponent got Y"; challenged says "I got A,
    opponent got B". They agree iff X == B and Y == A.
    """
    return (
        challenger_submission.my_games == challenged_submission.opponent_games
        and challenger_submission.opponent_games == challenged_submission.my_games
    )


def reconcile(
    race_to: int,
    challenger_submission: ScoreSubmission | None,
    challenged_submission: ScoreSubmission | None,
) -> Reconciliation:
    """Decide a match from its two submission slots.

    Args:
        race_to: Games needed to win the match.
        challenger_submission: Challenger's report, if submitted.
        challenged_submission: Challenged party's report, if submitted.

    Returns:
        Reconciliation with outcome PENDING while a slot is empty.
    """
    if challenger_submission is None or challenged_submission is None:
        return Reconciliation(outcome=Outcome.PENDING)

    if not submissions_agree(challenger_submission, challenged_submission):
        logger.debug(
            "submissions_disagree",
            challenger=challenger_submission,
            challenged=challenged_submission,
        )
        return Reconciliation(outcome=Outcome.DISPUTED, dispute_reason=DISAGREEMENT_REASON)

    challenger_games = challenger_submission.my_games
    challenged_games = challenger_submission.opponent_games
    try:
        winner = validate_score(challenger_games, challenged_games, race_to)
    except LadderValidationError as e:
        return Reconciliation(
            outcome=Outcome.DISPUTED,
            challenger_games=challenger_games,
            challenged_games=challenged_games,
            dispute_reason=e.message,
        )

    return Reconciliation(
        outcome=Outcome.COMPLETED,
        winner=winner,
        challenger_games=challenger_games,
        challenged_games=challenged_games,
    )
