from .activity import ActivityEvent
from .challenge import Challenge
from .ladder import LadderEntry, RankShift
from .match import Match
from .status import ActivityType, ChallengeStatus, MatchStatus

__all__ = [
    "ActivityEvent",
    "ActivityType",
    "Challenge",
    "ChallengeStatus",
    "LadderEntry",
    "Match",
    "MatchStatus",
    "RankShift",
]
