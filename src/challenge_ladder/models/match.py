import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from .status import MatchStatus


class Match(SQLModel, table=True):
    """A scheduled match spawned by a locked challenge.

    Each side owns one submission slot holding its own perspective
    (``*_my_games``/``*_opponent_games``). ``challenger_games`` and
    ``challenged_games`` hold the agreed final score once completed.
    """

    __tablename__ = "matches"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    challenge_id: str = Field(index=True)
    challenger_id: str = Field(index=True)
    challenged_id: str = Field(index=True)
    discipline: str
    race_to: int
    venue: str
    scheduled_time: datetime
    status: MatchStatus = Field(
        default=MatchStatus.SCHEDULED, sa_column=Column(String, nullable=False)
    )
    challenger_my_games: int | None = None
    challenger_opponent_games: int | None = None
    challenger_submitted_at: datetime | None = None
    challenged_my_games: int | None = None
    challenged_opponent_games: int | None = None
    challenged_submitted_at: datetime | None = None
    challenger_games: int | None = None
    challenged_games: int | None = None
    winner_id: str | None = None
    dispute_reason: str | None = None
    livestream_url: str | None = None
    finalized_at: datetime | None = None
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def involves(self, competitor_id: str) -> bool:
        return competitor_id in (self.challenger_id, self.challenged_id)

    @property
    def loser_id(self) -> str | None:
        if self.winner_id is None:
            return None
        if self.winner_id == self.challenger_id:
            return self.challenged_id
        return self.challenger_id
