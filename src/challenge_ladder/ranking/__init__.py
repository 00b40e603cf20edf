"""Ranking module for the challenge ladder.

Provides the ladder invariant, the challenge distance rule and the rank shift
applied after an upset.
"""

from challenge_ladder.ranking.ladder import (
    RankEntry,
    append_entry,
    find_entry,
    is_eligible_challenge_distance,
    shift_on_result,
    validate_ladder,
)

__all__ = [
    "RankEntry",
    "append_entry",
    "find_entry",
    "is_eligible_challenge_distance",
    "shift_on_result",
    "validate_ladder",
]
