"""Ladder invariant and rank-shift calculations.

Core invariant: rank positions are unique and contiguous (1, 2, ..., N) and
every competitor appears at most once. The empty ladder is valid.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from challenge_ladder.core.errors import DuplicateCompetitorError, NotFoundError


@dataclass(frozen=True)
class RankEntry:
    """One competitor's place on the ladder.

    Attributes:
        competitor_id: Unique competitor identifier.
        rank_position: 1-based position; 1 is the top of the ladder.
        score: Points carried alongside the position. Shifts never change it.
    """

    competitor_id: str
    rank_position: int
    score: int = 0


def validate_ladder(entries: Iterable[RankEntry]) -> bool:
    """Check that positions are exactly 1..N and competitor ids are unique.

    Args:
        entries: Ladder entries in any order.

    Returns:
        True if the ladder satisfies the invariant, False otherwise.
    """
    entries = list(entries)
    positions = sorted(e.rank_position for e in entries)
    if positions != list(range(1, len(entries) + 1)):
        return False
    return len({e.competitor_id for e in entries}) == len(entries)


def is_eligible_challenge_distance(rank_a: int, rank_b: int, max_diff: int) -> bool:
    """Check the numeric distance rule for a challenge.

    Identity (self-challenge) is checked separately by the caller; this only
    encodes ``0 < |rank_a - rank_b| <= max_diff``.
    """
    diff = abs(rank_a - rank_b)
    return 0 < diff <= max_diff


def find_entry(entries: Iterable[RankEntry], competitor_id: str) -> RankEntry | None:
    for entry in entries:
        if entry.competitor_id == competitor_id:
            return entry
    return None


def shift_on_result(
    entries: Sequence[RankEntry],
    winner_id: str,
    loser_id: str,
    winner_won: bool,
) -> list[RankEntry]:
    """Calculate ladder positions after a challenge match.

    On an upset the winner takes the loser's position and everyone from the
    loser's old position down to just above the winner's old position moves
    down by one. Entries outside that window are returned as the same objects.

    Args:
        entries: Current ladder.
        winner_id: Competitor who won the match.
        loser_id: Competitor who lost the match.
        winner_won: False when the better-ranked incumbent defended, in which
            case nothing moves.

    Returns:
        The new ladder, in the same order as ``entries``.

    Raises:
        NotFoundError: If either competitor is not on the ladder.
    """
    if not winner_won:
        return list(entries)

    winner = find_entry(entries, winner_id)
    if winner is None:
        raise NotFoundError("Competitor", winner_id)
    loser = find_entry(entries, loser_id)
    if loser is None:
        raise NotFoundError("Competitor", loser_id)

    w = winner.rank_position
    l = loser.rank_position  # noqa: E741
    if w <= l:
        # Winner was already ranked at or above the loser
        return list(entries)

    shifted: list[RankEntry] = []
    for entry in entries:
        if entry.competitor_id == winner_id:
            shifted.append(replace(entry, rank_position=l))
        elif l <= entry.rank_position < w:
            shifted.append(replace(entry, rank_position=entry.rank_position + 1))
        else:
            shifted.append(entry)
    return shifted


def append_entry(
    entries: Sequence[RankEntry], competitor_id: str, score: int = 0
) -> list[RankEntry]:
    """Place a newly joined competitor at the bottom of the ladder.

    Raises:
        DuplicateCompetitorError: If the competitor is already ranked.
    """
    if find_entry(entries, competitor_id) is not None:
        raise DuplicateCompetitorError(competitor_id)
    return [*entries, RankEntry(competitor_id, len(entries) + 1, score)]
