from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class LadderEntry(SQLModel, table=True):
    """A competitor's position on the ladder."""

    __tablename__ = "ladder_entries"

    competitor_id: str = Field(primary_key=True)
    rank_position: int
    score: int = 0
    joined_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class RankShift(SQLModel, table=True):
    """Ledger of matches whose result has already been applied to the ladder."""

    __tablename__ = "rank_shifts"

    match_id: str = Field(primary_key=True)
    winner_id: str
    loser_id: str
    winner_old_position: int
    loser_old_position: int
    moved: bool = False
    applied_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
