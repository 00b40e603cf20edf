"""Apply score submissions to match records."""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from challenge_ladder.core.errors import ActorNotAllowedError, MatchNotOpenError
from challenge_ladder.models import Match, MatchStatus

from .reconciliation import (
    Outcome,
    Reconciliation,
    ScoreSubmission,
    Side,
    reconcile,
    validate_submission,
)

logger = structlog.get_logger()


def side_of(match: Match, actor_id: str) -> Side:
    """Resolve which side of the match the actor plays.

    Raises:
        ActorNotAllowedError: If the actor is not a participant.
    """
    if actor_id == match.challenger_id:
        return Side.CHALLENGER
    if actor_id == match.challenged_id:
        return Side.CHALLENGED
    msg = f"'{actor_id}' is not a participant in match {match.id}"
    raise ActorNotAllowedError(msg)


def submission_slot(match: Match, side: Side) -> ScoreSubmission | None:
    """Read one side's stored submission, if any."""
    if side is Side.CHALLENGER:
        my_games, opponent_games = match.challenger_my_games, match.challenger_opponent_games
    else:
        my_games, opponent_games = match.challenged_my_games, match.challenged_opponent_games
    if my_games is None or opponent_games is None:
        return None
    return ScoreSubmission(my_games, opponent_games)


def record_submission(
    match: Match,
    actor_id: str,
    my_games: object,
    opponent_games: object,
    livestream_url: str | None = None,
    now: datetime | None = None,
) -> Reconciliation:
    """Write the actor's submission slot and reconcile the match in place.

    A repeat submission from the same side overwrites that side's slot. Once
    both slots are filled the match leaves ``scheduled`` for good.

    Args:
        match: Match record to update.
        actor_id: Submitting competitor.
        my_games: Games the actor reports winning.
        opponent_games: Games the actor reports for the opponent.
        livestream_url: Optional stream link, kept from the latest submission.
        now: Submission time (defaults to current UTC time).

    Returns:
        The reconciliation reached after this submission.

    Raises:
        MatchNotOpenError: If the match is no longer scheduled.
        ActorNotAllowedError: If the actor is not a participant.
        InvalidScoreError: If either count is not a non-negative integer.
    """
    status = MatchStatus(match.status)
    if status is not MatchStatus.SCHEDULED:
        raise MatchNotOpenError(match.id, status)

    side = side_of(match, actor_id)
    submission = validate_submission(my_games, opponent_games)
    now = now or datetime.now(UTC)

    if side is Side.CHALLENGER:
        match.challenger_my_games = submission.my_games
        match.challenger_opponent_games = submission.opponent_games
        match.challenger_submitted_at = now
    else:
        match.challenged_my_games = submission.my_games
        match.challenged_opponent_games = submission.opponent_games
        match.challenged_submitted_at = now
    if livestream_url:
        match.livestream_url = livestream_url
    match.updated_at = now
    match.version += 1

    result = reconcile(
        match.race_to,
        submission_slot(match, Side.CHALLENGER),
        submission_slot(match, Side.CHALLENGED),
    )

    match result.outcome:
        case Outcome.PENDING:
            pass
        case Outcome.DISPUTED:
            match.status = MatchStatus.DISPUTED
            match.dispute_reason = result.dispute_reason
            match.finalized_at = now
        case Outcome.COMPLETED:
            match.status = MatchStatus.COMPLETED
            match.challenger_games = result.challenger_games
            match.challenged_games = result.challenged_games
            match.winner_id = (
                match.challenger_id if result.winner is Side.CHALLENGER else match.challenged_id
            )
            match.finalized_at = now

    logger.debug("score_recorded", match_id=match.id, side=side, outcome=result.outcome)
    return result
