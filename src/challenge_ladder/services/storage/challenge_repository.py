"""Database persistence for challenge records."""

from __future__ import annotations

from sqlmodel import Session, col, select

from challenge_ladder.core.errors import ConcurrentUpdateError, NotFoundError
from challenge_ladder.models import Challenge

from .repository import AsyncRepository


def fetch_challenge(
    session: Session, challenge_id: str, expected_version: int | None = None
) -> Challenge:
    """Read a challenge for a read-validate-write cycle.

    Raises:
        NotFoundError: If no challenge has this id.
        ConcurrentUpdateError: If the stored version differs from the one the
            caller last saw.
    """
    challenge = session.get(Challenge, challenge_id)
    if challenge is None:
        raise NotFoundError("Challenge", challenge_id)
    if expected_version is not None and challenge.version != expected_version:
        raise ConcurrentUpdateError("Challenge", challenge_id)
    return challenge


class ChallengeRepository(AsyncRepository):
    """Query challenge records."""

    async def get(self, challenge_id: str) -> Challenge:
        return await self._run_session(lambda session: fetch_challenge(session, challenge_id))

    async def list_for(self, competitor_id: str) -> list[Challenge]:
        """Get all challenges a competitor issued or received, newest first."""
        statement = (
            select(Challenge)
            .where(
                (Challenge.challenger_id == competitor_id)
                | (Challenge.challenged_id == competitor_id)
            )
            .order_by(col(Challenge.created_at).desc())
        )
        return await self._all(statement)
