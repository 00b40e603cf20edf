import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from .status import ChallengeStatus


class Challenge(SQLModel, table=True):
    """A challenge between two ranked competitors, negotiated up to a locked match."""

    __tablename__ = "challenges"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    challenger_id: str = Field(index=True)
    challenged_id: str = Field(index=True)
    discipline: str
    race_to: int
    status: ChallengeStatus = Field(
        default=ChallengeStatus.PENDING, sa_column=Column(String, nullable=False)
    )
    venue: str | None = None
    scheduled_time: datetime | None = None
    proposer_id: str | None = None
    locked_at: datetime | None = None
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def involves(self, competitor_id: str) -> bool:
        return competitor_id in (self.challenger_id, self.challenged_id)

    def opponent_of(self, competitor_id: str) -> str:
        if competitor_id == self.challenger_id:
            return self.challenged_id
        return self.challenger_id
