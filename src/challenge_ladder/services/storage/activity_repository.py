"""Activity log persistence."""

from __future__ import annotations

from sqlmodel import Session, col, select

from challenge_ladder.models import ActivityEvent, ActivityType

from .repository import AsyncRepository


def record_event(
    session: Session,
    event_type: ActivityType,
    description: str,
    *,
    actor_id: str | None = None,
    target_id: str | None = None,
    challenge_id: str | None = None,
    match_id: str | None = None,
) -> ActivityEvent:
    """Add an activity event to the current transaction."""
    event = ActivityEvent(
        type=event_type,
        actor_id=actor_id,
        target_id=target_id,
        challenge_id=challenge_id,
        match_id=match_id,
        description=description,
    )
    session.add(event)
    return event


class ActivityRepository(AsyncRepository):
    """Query the activity log."""

    async def recent(
        self, limit: int = 50, competitor_id: str | None = None
    ) -> list[ActivityEvent]:
        """Get the newest events, optionally only those touching a competitor."""
        statement = select(ActivityEvent)
        if competitor_id is not None:
            statement = statement.where(
                (ActivityEvent.actor_id == competitor_id)
                | (ActivityEvent.target_id == competitor_id)
            )
        statement = statement.order_by(col(ActivityEvent.created_at).desc()).limit(limit)
        return await self._all(statement)
