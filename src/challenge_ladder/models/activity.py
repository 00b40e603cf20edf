"""Activity log consumed by notification sinks."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from .status import ActivityType


class ActivityEvent(SQLModel, table=True):
    __tablename__ = "activity_events"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    type: ActivityType = Field(sa_column=Column(String, nullable=False))
    actor_id: str | None = None
    target_id: str | None = None
    challenge_id: str | None = None
    match_id: str | None = None
    description: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
