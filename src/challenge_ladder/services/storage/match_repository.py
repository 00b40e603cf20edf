"""Database persistence for match records."""

from __future__ import annotations

from sqlmodel import Session, col, select

from challenge_ladder.core.errors import ConcurrentUpdateError, NotFoundError
from challenge_ladder.models import Match, MatchStatus

from .repository import AsyncRepository


def fetch_match(session: Session, match_id: str, expected_version: int | None = None) -> Match:
    """Read a match for a read-validate-write cycle.

    Raises:
        NotFoundError: If no match has this id.
        ConcurrentUpdateError: If the stored version differs from the one the
            caller last saw.
    """
    match = session.get(Match, match_id)
    if match is None:
        raise NotFoundError("Match", match_id)
    if expected_version is not None and match.version != expected_version:
        raise ConcurrentUpdateError("Match", match_id)
    return match


class MatchRepository(AsyncRepository):
    """Query match records."""

    async def get(self, match_id: str) -> Match:
        return await self._run_session(lambda session: fetch_match(session, match_id))

    async def get_for_challenge(self, challenge_id: str) -> Match | None:
        def _get(session: Session) -> Match | None:
            statement = select(Match).where(Match.challenge_id == challenge_id)
            return session.exec(statement).first()

        return await self._run_session(_get)

    async def list_for(self, competitor_id: str) -> list[Match]:
        """Get all matches involving a competitor, most recently scheduled first."""
        statement = (
            select(Match)
            .where((Match.challenger_id == competitor_id) | (Match.challenged_id == competitor_id))
            .order_by(col(Match.scheduled_time).desc())
        )
        return await self._all(statement)

    async def list_all(self, status: MatchStatus | None = None) -> list[Match]:
        """Get all matches, optionally filtered by status."""
        statement = select(Match)
        if status is not None:
            statement = statement.where(Match.status == status)
        return await self._all(statement)
