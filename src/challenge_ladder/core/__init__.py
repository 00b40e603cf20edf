"""Core configuration and utilities for the challenge ladder."""

from challenge_ladder.core.config import (
    MAX_RANK_DIFF,
    MIN_RACE,
    LadderConfig,
    load_config,
)
from challenge_ladder.core.errors import (
    ActorNotAllowedError,
    BothWonError,
    ConcurrentUpdateError,
    ConfigurationError,
    DuplicateCompetitorError,
    InvalidScoreError,
    InvalidTransitionError,
    LadderError,
    LadderValidationError,
    MatchNotOpenError,
    MissingDetailsError,
    NoWinnerError,
    NotFoundError,
    RaceTooShortError,
    RankDistanceExceededError,
    SelfChallengeError,
    StateConflictError,
    UnknownDisciplineError,
    UnknownVenueError,
    UnrankedError,
    ValidationError,
)

__all__ = [
    "MAX_RANK_DIFF",
    "MIN_RACE",
    "LadderConfig",
    "load_config",
    "ActorNotAllowedError",
    "BothWonError",
    "ConcurrentUpdateError",
    "ConfigurationError",
    "DuplicateCompetitorError",
    "InvalidScoreError",
    "InvalidTransitionError",
    "LadderError",
    "LadderValidationError",
    "MatchNotOpenError",
    "MissingDetailsError",
    "NoWinnerError",
    "NotFoundError",
    "RaceTooShortError",
    "RankDistanceExceededError",
    "SelfChallengeError",
    "StateConflictError",
    "UnknownDisciplineError",
    "UnknownVenueError",
    "UnrankedError",
    "ValidationError",
]
