"""Exception taxonomy for the challenge ladder.

Validation errors are raised before any state is touched and are never
retried. State-conflict errors mean the action does not fit the state that was
actually read. Not-found errors are fatal to the operation.
"""

from __future__ import annotations


class LadderError(Exception):
    """Base exception for ladder errors with optional suggestions."""

    label = "Ladder Error"

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[{self.label}] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


# ==================== Configuration ====================


class ConfigurationError(LadderError):
    """Base exception for configuration errors."""

    label = "Configuration Error"


class ValidationError(ConfigurationError):
    """A configuration or command-line value is invalid."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid value for '{field}'", reason)


# ==================== Validation ====================


class LadderValidationError(LadderError):
    """A request was malformed or violates an eligibility rule."""

    label = "Validation Error"


class InvalidScoreError(LadderValidationError):
    """A game count is not a legal value for the race."""


class NoWinnerError(LadderValidationError):
    """Neither side reached the race target."""

    def __init__(self, race_to: int) -> None:
        super().__init__(f"One player must reach {race_to} games to win")


class BothWonError(LadderValidationError):
    """Both sides claim to have reached the race target."""

    def __init__(self) -> None:
        super().__init__("Both players cannot win")


class SelfChallengeError(LadderValidationError):
    def __init__(self) -> None:
        super().__init__("Cannot challenge yourself")


class UnrankedError(LadderValidationError):
    """A party to the challenge has no ladder entry."""

    def __init__(self, competitor_id: str, *, challenger: bool) -> None:
        self.competitor_id = competitor_id
        if challenger:
            message = "You must be ranked to create a challenge"
        else:
            message = "Opponent must be ranked to be challenged"
        super().__init__(message, f"Add '{competitor_id}' to the ladder first.")


class RankDistanceExceededError(LadderValidationError):
    def __init__(self, distance: int, max_diff: int) -> None:
        self.distance = distance
        self.max_diff = max_diff
        super().__init__(
            f"Rank difference too large. Maximum allowed: {max_diff}, actual: {distance}"
        )


class RaceTooShortError(LadderValidationError):
    def __init__(self, race_to: int, min_race: int) -> None:
        super().__init__(
            f"Race must be at least {min_race}, got {race_to}",
            f"Choose a race of {min_race} or more.",
        )


class UnknownDisciplineError(LadderValidationError):
    def __init__(self, discipline: str, allowed: list[str]) -> None:
        super().__init__(
            f"Unknown discipline '{discipline}'",
            f"Use one of: {', '.join(allowed)}.",
        )


class UnknownVenueError(LadderValidationError):
    def __init__(self, venue: str, allowed: list[str]) -> None:
        super().__init__(
            f"Unknown venue '{venue}'",
            f"Use one of: {', '.join(allowed)}.",
        )


class MissingDetailsError(LadderValidationError):
    """A proposal or counter arrived without a venue or a time."""

    def __init__(self, action: str) -> None:
        super().__init__(
            f"'{action}' requires both a venue and a scheduled time",
            "Pass --venue and --at.",
        )


class DuplicateCompetitorError(LadderValidationError):
    def __init__(self, competitor_id: str) -> None:
        super().__init__(f"Competitor '{competitor_id}' is already on the ladder")


# ==================== State conflicts ====================


class StateConflictError(LadderError):
    """The action is not allowed in the state that was read."""

    label = "State Conflict"


class InvalidTransitionError(StateConflictError):
    def __init__(self, status: str, action: str) -> None:
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} a challenge that is {status}")


class ActorNotAllowedError(StateConflictError):
    """The acting competitor may not perform this action right now."""


class MatchNotOpenError(StateConflictError):
    def __init__(self, match_id: str, status: str) -> None:
        super().__init__(
            f"Match {match_id} is {status}; scores can only be submitted while scheduled"
        )


class ConcurrentUpdateError(StateConflictError):
    """Another writer committed a transition after this one read its state."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(
            f"{kind} {record_id} was modified concurrently",
            "Reload and try again.",
        )


# ==================== Not found ====================


class NotFoundError(LadderError):
    """A referenced competitor, challenge or match does not exist."""

    label = "Not Found"

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")
