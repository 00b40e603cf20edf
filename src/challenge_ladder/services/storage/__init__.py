from .activity_repository import ActivityRepository, record_event
from .challenge_repository import ChallengeRepository, fetch_challenge
from .ladder_repository import (
    LadderRepository,
    fetch_ladder,
    fetch_rank_shift,
    to_rank_entries,
    write_positions,
)
from .match_repository import MatchRepository, fetch_match
from .store import LadderStore

__all__ = [
    "ActivityRepository",
    "ChallengeRepository",
    "LadderRepository",
    "LadderStore",
    "MatchRepository",
    "fetch_challenge",
    "fetch_ladder",
    "fetch_match",
    "fetch_rank_shift",
    "record_event",
    "to_rank_entries",
    "write_positions",
]
