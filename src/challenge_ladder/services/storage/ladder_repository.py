"""Database persistence for ladder entries and the processed-match ledger."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from sqlmodel import Session, col, select

from challenge_ladder.core.errors import NotFoundError
from challenge_ladder.models import LadderEntry, RankShift
from challenge_ladder.ranking import RankEntry, validate_ladder

from .repository import AsyncRepository


def fetch_ladder(session: Session) -> list[LadderEntry]:
    """Load all ladder rows ordered by rank position."""
    statement = select(LadderEntry).order_by(col(LadderEntry.rank_position))
    return list(session.exec(statement).all())


def to_rank_entries(rows: Sequence[LadderEntry]) -> list[RankEntry]:
    return [RankEntry(r.competitor_id, r.rank_position, r.score) for r in rows]


def write_positions(
    session: Session,
    rows: Sequence[LadderEntry],
    entries: Sequence[RankEntry],
    now: datetime | None = None,
) -> int:
    """Persist new rank positions onto existing rows.

    Returns:
        Number of rows whose position changed.

    Raises:
        ValueError: If ``entries`` do not form a valid ladder.
    """
    if not validate_ladder(entries):
        msg = "Refusing to persist a ladder that breaks the rank invariant"
        raise ValueError(msg)

    now = now or datetime.now(UTC)
    positions = {e.competitor_id: e.rank_position for e in entries}
    changed = 0
    for row in rows:
        new_position = positions[row.competitor_id]
        if row.rank_position != new_position:
            row.rank_position = new_position
            row.updated_at = now
            session.add(row)
            changed += 1
    return changed


def fetch_rank_shift(session: Session, match_id: str) -> RankShift | None:
    return session.get(RankShift, match_id)


class LadderRepository(AsyncRepository):
    """Query ladder standings."""

    async def get_ladder(self) -> list[LadderEntry]:
        """Get the ladder sorted by rank position."""
        return await self._run_session(fetch_ladder)

    async def get_entry(self, competitor_id: str) -> LadderEntry:
        """Get a single competitor's entry.

        Raises:
            NotFoundError: If the competitor is not ranked.
        """

        def _get(session: Session) -> LadderEntry:
            entry = session.get(LadderEntry, competitor_id)
            if entry is None:
                raise NotFoundError("Competitor", competitor_id)
            return entry

        return await self._run_session(_get)

    async def get_rank_shift(self, match_id: str) -> RankShift | None:
        return await self._run_session(lambda session: fetch_rank_shift(session, match_id))
