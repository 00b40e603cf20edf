"""Closed status types for challenges, matches and activity events."""

from enum import StrEnum


class ChallengeStatus(StrEnum):
    PENDING = "pending"
    VENUE_PROPOSED = "venue_proposed"
    COUNTERED = "countered"
    LOCKED = "locked"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_CHALLENGE_STATUSES


TERMINAL_CHALLENGE_STATUSES = frozenset(
    {
        ChallengeStatus.LOCKED,
        ChallengeStatus.DECLINED,
        ChallengeStatus.CANCELLED,
        ChallengeStatus.EXPIRED,
    }
)


class MatchStatus(StrEnum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"


class ActivityType(StrEnum):
    """Events emitted for notification sinks."""

    CHALLENGE_SENT = "challenge_sent"
    CHALLENGE_DECLINED = "challenge_declined"
    CHALLENGE_CANCELLED = "challenge_cancelled"
    CHALLENGE_EXPIRED = "challenge_expired"
    VENUE_PROPOSED = "venue_proposed"
    VENUE_COUNTERED = "venue_countered"
    MATCH_CONFIRMED = "match_confirmed"
    SCORE_SUBMITTED = "score_submitted"
    MATCH_COMPLETED = "match_completed"
    SCORE_DISPUTED = "score_disputed"
    RANKING_CHANGED = "ranking_changed"
    COMPETITOR_JOINED = "competitor_joined"
