"""Challenge lifecycle state machine.

States: pending → {venue_proposed, declined, cancelled};
venue_proposed ⇄ countered; venue_proposed/countered → locked.
pending, venue_proposed and countered may also → expired on an external
timeout signal. locked, declined, cancelled and expired are terminal; locking
spawns a scheduled Match.

The proposer alternates strictly: whoever last proposed or countered can
neither counter again nor confirm.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import assert_never

import structlog

from challenge_ladder.core.config import LadderConfig
from challenge_ladder.core.errors import (
    ActorNotAllowedError,
    InvalidTransitionError,
    MissingDetailsError,
    RaceTooShortError,
    RankDistanceExceededError,
    SelfChallengeError,
    UnknownDisciplineError,
    UnknownVenueError,
    UnrankedError,
)
from challenge_ladder.models import Challenge, ChallengeStatus, Match, MatchStatus
from challenge_ladder.ranking import RankEntry, find_entry, is_eligible_challenge_distance

logger = structlog.get_logger()


class ChallengeAction(StrEnum):
    PROPOSE = "propose"
    COUNTER = "counter"
    CONFIRM = "confirm"
    DECLINE = "decline"
    CANCEL = "cancel"


DETAIL_ACTIONS = frozenset({ChallengeAction.PROPOSE, ChallengeAction.COUNTER})


@dataclass(frozen=True)
class Transition:
    """A validated change to a challenge, not yet applied.

    Attributes:
        action: Action that caused the transition.
        actor_id: Competitor performing the action.
        previous: Status the decision was made against.
        status: Status after the transition.
        venue: Venue after the transition.
        scheduled_time: Scheduled time after the transition.
        proposer_id: Competitor whose proposal is now on the table.
    """

    action: ChallengeAction
    actor_id: str
    previous: ChallengeStatus
    status: ChallengeStatus
    venue: str | None
    scheduled_time: datetime | None
    proposer_id: str | None

    @property
    def locks(self) -> bool:
        return self.status is ChallengeStatus.LOCKED


def next_status(status: ChallengeStatus, action: ChallengeAction) -> ChallengeStatus | None:
    """Look up the transition table. None means the pair is rejected."""
    match status:
        case ChallengeStatus.PENDING:
            match action:
                case ChallengeAction.PROPOSE:
                    return ChallengeStatus.VENUE_PROPOSED
                case ChallengeAction.DECLINE:
                    return ChallengeStatus.DECLINED
                case ChallengeAction.CANCEL:
                    return ChallengeStatus.CANCELLED
                case _:
                    return None
        case ChallengeStatus.VENUE_PROPOSED:
            match action:
                case ChallengeAction.COUNTER:
                    return ChallengeStatus.COUNTERED
                case ChallengeAction.CONFIRM:
                    return ChallengeStatus.LOCKED
                case _:
                    return None
        case ChallengeStatus.COUNTERED:
            match action:
                case ChallengeAction.COUNTER:
                    return ChallengeStatus.VENUE_PROPOSED
                case ChallengeAction.CONFIRM:
                    return ChallengeStatus.LOCKED
                case _:
                    return None
        case (
            ChallengeStatus.LOCKED
            | ChallengeStatus.DECLINED
            | ChallengeStatus.CANCELLED
            | ChallengeStatus.EXPIRED
        ):
            return None
        case _:
            assert_never(status)


def actor_violation(challenge: Challenge, actor_id: str, action: ChallengeAction) -> str | None:
    """Explain why the actor may not take the action, or None if they may."""
    if not challenge.involves(actor_id):
        return f"'{actor_id}' is not a party to this challenge"

    match action:
        case ChallengeAction.PROPOSE:
            if actor_id != challenge.challenged_id:
                return "Only the challenged player can propose a venue and time"
        case ChallengeAction.DECLINE:
            if actor_id != challenge.challenged_id:
                return "Only the challenged player can decline"
        case ChallengeAction.CANCEL:
            if actor_id != challenge.challenger_id:
                return "Only the challenger can cancel"
        case ChallengeAction.COUNTER:
            if actor_id == challenge.proposer_id:
                return "You cannot counter your own proposal"
        case ChallengeAction.CONFIRM:
            if actor_id == challenge.proposer_id:
                return "You cannot confirm your own proposal"
        case _:
            assert_never(action)
    return None


def decide_transition(
    challenge: Challenge,
    actor_id: str,
    action: ChallengeAction,
    venue: str | None = None,
    scheduled_time: datetime | None = None,
    venues: Collection[str] = (),
) -> Transition:
    """Validate an action against the challenge state that was read.

    Args:
        challenge: Challenge as read from the store.
        actor_id: Competitor performing the action.
        action: Requested action.
        venue: Venue for propose/counter.
        scheduled_time: Time for propose/counter.
        venues: Allowed venue ids. Empty accepts any venue.

    Returns:
        The transition to apply.

    Raises:
        InvalidTransitionError: If the (status, action) pair is not in the table.
        ActorNotAllowedError: If the actor may not take this action.
        MissingDetailsError: If propose/counter lacks a venue or time.
        UnknownVenueError: If the venue is not in the catalogue.
    """
    status = ChallengeStatus(challenge.status)
    target = next_status(status, action)
    if target is None:
        raise InvalidTransitionError(status, action)

    violation = actor_violation(challenge, actor_id, action)
    if violation is not None:
        raise ActorNotAllowedError(violation)

    if action in DETAIL_ACTIONS:
        if not venue or scheduled_time is None:
            raise MissingDetailsError(action)
        if venues and venue not in venues:
            raise UnknownVenueError(venue, sorted(venues))
        return Transition(
            action=action,
            actor_id=actor_id,
            previous=status,
            status=target,
            venue=venue,
            scheduled_time=scheduled_time,
            proposer_id=actor_id,
        )

    return Transition(
        action=action,
        actor_id=actor_id,
        previous=status,
        status=target,
        venue=challenge.venue,
        scheduled_time=challenge.scheduled_time,
        proposer_id=challenge.proposer_id,
    )


def build_match(challenge: Challenge, now: datetime | None = None) -> Match:
    """Materialize the scheduled match for a locked challenge."""
    if challenge.venue is None or challenge.scheduled_time is None:
        raise MissingDetailsError(ChallengeAction.CONFIRM)
    now = now or datetime.now(UTC)
    return Match(
        challenge_id=challenge.id,
        challenger_id=challenge.challenger_id,
        challenged_id=challenge.challenged_id,
        discipline=challenge.discipline,
        race_to=challenge.race_to,
        venue=challenge.venue,
        scheduled_time=challenge.scheduled_time,
        status=MatchStatus.SCHEDULED,
        created_at=now,
        updated_at=now,
    )


def apply_transition(
    challenge: Challenge, transition: Transition, now: datetime | None = None
) -> Match | None:
    """Write a decided transition onto the challenge record.

    Returns:
        The new scheduled match when the transition locks the challenge.
    """
    now = now or datetime.now(UTC)
    challenge.status = transition.status
    challenge.venue = transition.venue
    challenge.scheduled_time = transition.scheduled_time
    challenge.proposer_id = transition.proposer_id
    challenge.updated_at = now
    challenge.version += 1

    logger.info(
        "challenge_transition",
        challenge_id=challenge.id,
        action=transition.action,
        actor=transition.actor_id,
        previous=transition.previous,
        status=transition.status,
    )

    if not transition.locks:
        return None
    challenge.locked_at = now
    return build_match(challenge, now)


def expire(challenge: Challenge, now: datetime | None = None) -> None:
    """Apply the external timeout signal to an open challenge.

    Raises:
        InvalidTransitionError: If the challenge is already terminal.
    """
    status = ChallengeStatus(challenge.status)
    if status.is_terminal:
        raise InvalidTransitionError(status, "expire")
    challenge.status = ChallengeStatus.EXPIRED
    challenge.updated_at = now or datetime.now(UTC)
    challenge.version += 1
    logger.info("challenge_expired", challenge_id=challenge.id, previous=status)


def allowed_actions(challenge: Challenge, actor_id: str) -> list[ChallengeAction]:
    """List the actions the actor could take on the challenge right now."""
    status = ChallengeStatus(challenge.status)
    return [
        action
        for action in ChallengeAction
        if next_status(status, action) is not None
        and actor_violation(challenge, actor_id, action) is None
    ]


def create_challenge(
    ladder: Sequence[RankEntry],
    challenger_id: str,
    challenged_id: str,
    discipline: str,
    race_to: int,
    config: LadderConfig,
    now: datetime | None = None,
) -> Challenge:
    """Check creation eligibility and build a pending challenge.

    Args:
        ladder: Current ladder.
        challenger_id: Competitor issuing the challenge.
        challenged_id: Competitor being challenged.
        discipline: Discipline to play.
        race_to: Games needed to win.
        config: Ladder configuration (MIN_RACE, MAX_RANK_DIFF, disciplines).
        now: Creation time (defaults to current UTC time).

    Returns:
        An unsaved Challenge in ``pending``.

    Raises:
        SelfChallengeError: If both ids are the same.
        UnrankedError: If either party has no ladder entry.
        RankDistanceExceededError: If the rank distance is out of range.
        RaceTooShortError: If ``race_to`` is below the minimum race.
        UnknownDisciplineError: If the discipline is not configured.
    """
    if challenger_id == challenged_id:
        raise SelfChallengeError()

    challenger = find_entry(ladder, challenger_id)
    if challenger is None:
        raise UnrankedError(challenger_id, challenger=True)
    challenged = find_entry(ladder, challenged_id)
    if challenged is None:
        raise UnrankedError(challenged_id, challenger=False)

    if not is_eligible_challenge_distance(
        challenger.rank_position, challenged.rank_position, config.max_rank_diff
    ):
        raise RankDistanceExceededError(
            abs(challenger.rank_position - challenged.rank_position), config.max_rank_diff
        )

    if isinstance(race_to, bool) or not isinstance(race_to, int) or race_to < config.min_race:
        raise RaceTooShortError(race_to, config.min_race)
    if config.disciplines and discipline not in config.disciplines:
        raise UnknownDisciplineError(discipline, config.disciplines)

    now = now or datetime.now(UTC)
    challenge = Challenge(
        challenger_id=challenger_id,
        challenged_id=challenged_id,
        discipline=discipline,
        race_to=race_to,
        status=ChallengeStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
    logger.info(
        "challenge_created",
        challenge_id=challenge.id,
        challenger=challenger_id,
        challenged=challenged_id,
        distance=abs(challenger.rank_position - challenged.rank_position),
    )
    return challenge
