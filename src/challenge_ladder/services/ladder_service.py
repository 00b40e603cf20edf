"""Application service exposing the challenge ladder operations."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import assert_never

import structlog
from sqlmodel import Session

from challenge_ladder.core.config import LadderConfig
from challenge_ladder.core.errors import NotFoundError, StateConflictError
from challenge_ladder.models import (
    ActivityEvent,
    ActivityType,
    Challenge,
    LadderEntry,
    Match,
    MatchStatus,
    RankShift,
)
from challenge_ladder.ranking import append_entry, find_entry, shift_on_result
from challenge_ladder.services.challenge import (
    ChallengeAction,
    apply_transition,
    create_challenge,
    decide_transition,
    expire,
)
from challenge_ladder.services.match import Outcome, record_submission
from challenge_ladder.services.reporting import StandingRow, build_standings
from challenge_ladder.services.storage import (
    LadderStore,
    fetch_challenge,
    fetch_ladder,
    fetch_match,
    fetch_rank_shift,
    record_event,
    to_rank_entries,
    write_positions,
)

logger = structlog.get_logger()

ACTION_EVENTS: dict[ChallengeAction, ActivityType] = {
    ChallengeAction.PROPOSE: ActivityType.VENUE_PROPOSED,
    ChallengeAction.COUNTER: ActivityType.VENUE_COUNTERED,
    ChallengeAction.CONFIRM: ActivityType.MATCH_CONFIRMED,
    ChallengeAction.DECLINE: ActivityType.CHALLENGE_DECLINED,
    ChallengeAction.CANCEL: ActivityType.CHALLENGE_CANCELLED,
}


class LadderService:
    """Runs ladder operations against the store.

    Each operation reads the current state inside one transaction, hands it
    to the pure engine (lifecycle, reconciliation, rank shift) and persists
    whatever the engine decided together with the activity events it implies.
    """

    def __init__(self, config: LadderConfig, store: LadderStore) -> None:
        """Initialize ladder service.

        Args:
            config: Ladder configuration.
            store: Storage layer for ladder, challenges and matches.
        """
        self.config = config
        self.store = store

    # ==================== Ladder membership ====================

    async def add_competitor(self, competitor_id: str, score: int = 0) -> LadderEntry:
        """Rank a newly joined competitor at the bottom of the ladder."""

        def _add(session: Session) -> LadderEntry:
            entries = append_entry(to_rank_entries(fetch_ladder(session)), competitor_id, score)
            new = entries[-1]
            row = LadderEntry(
                competitor_id=new.competitor_id,
                rank_position=new.rank_position,
                score=new.score,
            )
            session.add(row)
            record_event(
                session,
                ActivityType.COMPETITOR_JOINED,
                f"{competitor_id} joined the ladder at #{new.rank_position}",
                actor_id=competitor_id,
            )
            return row

        row = await self.store.run_transaction(_add)
        logger.info("competitor_joined", competitor=competitor_id, position=row.rank_position)
        return row

    async def seed_ladder(self, competitor_ids: Sequence[str]) -> list[LadderEntry]:
        """Append competitors in order, top first."""
        return [await self.add_competitor(cid) for cid in competitor_ids]

    # ==================== Challenges ====================

    async def create_challenge(
        self,
        challenger_id: str,
        challenged_id: str,
        discipline: str,
        race_to: int,
    ) -> Challenge:
        """Create a pending challenge after checking eligibility against the ladder."""

        def _create(session: Session) -> Challenge:
            ladder = to_rank_entries(fetch_ladder(session))
            challenge = create_challenge(
                ladder, challenger_id, challenged_id, discipline, race_to, self.config
            )
            session.add(challenge)
            record_event(
                session,
                ActivityType.CHALLENGE_SENT,
                f"{challenger_id} challenged {challenged_id} to a race to {race_to} "
                f"({discipline})",
                actor_id=challenger_id,
                target_id=challenged_id,
                challenge_id=challenge.id,
            )
            return challenge

        return await self.store.run_transaction(_create)

    async def respond_to_challenge(
        self,
        challenge_id: str,
        actor_id: str,
        action: ChallengeAction | str,
        venue: str | None = None,
        scheduled_time: datetime | None = None,
        expected_version: int | None = None,
    ) -> Challenge | Match:
        """Apply a participant's action to a challenge.

        Args:
            challenge_id: Challenge to act on.
            actor_id: Acting competitor.
            action: One of propose, counter, confirm, decline, cancel.
            venue: Venue id for propose/counter.
            scheduled_time: Match time for propose/counter.
            expected_version: Version the caller last saw, if it wants the
                action rejected when someone else acted in between.

        Returns:
            The new Match when the action locks the challenge, otherwise the
            updated Challenge.
        """
        action = ChallengeAction(action)

        def _respond(session: Session) -> Challenge | Match:
            challenge = fetch_challenge(session, challenge_id, expected_version)
            transition = decide_transition(
                challenge,
                actor_id,
                action,
                venue=venue,
                scheduled_time=scheduled_time,
                venues=self.config.venues,
            )
            match = apply_transition(challenge, transition)
            session.add(challenge)
            record_event(
                session,
                ACTION_EVENTS[action],
                self._describe_action(challenge, actor_id, action),
                actor_id=actor_id,
                target_id=challenge.opponent_of(actor_id),
                challenge_id=challenge.id,
                match_id=match.id if match else None,
            )
            if match is None:
                return challenge
            session.add(match)
            logger.info("match_scheduled", match_id=match.id, challenge_id=challenge.id)
            return match

        return await self.store.run_transaction(_respond)

    async def expire_challenge(self, challenge_id: str) -> Challenge:
        """Apply the external timeout signal to an open challenge."""

        def _expire(session: Session) -> Challenge:
            challenge = fetch_challenge(session, challenge_id)
            expire(challenge)
            session.add(challenge)
            record_event(
                session,
                ActivityType.CHALLENGE_EXPIRED,
                f"Challenge from {challenge.challenger_id} to {challenge.challenged_id} expired",
                actor_id=challenge.challenger_id,
                target_id=challenge.challenged_id,
                challenge_id=challenge.id,
            )
            return challenge

        return await self.store.run_transaction(_expire)

    def _describe_action(self, challenge: Challenge, actor_id: str, action: ChallengeAction) -> str:
        opponent = challenge.opponent_of(actor_id)
        match action:
            case ChallengeAction.PROPOSE | ChallengeAction.COUNTER:
                verb = "proposed" if action is ChallengeAction.PROPOSE else "countered with"
                when = challenge.scheduled_time.isoformat() if challenge.scheduled_time else "?"
                return (
                    f"{actor_id} {verb} {self.config.venue_name(challenge.venue or '')} "
                    f"at {when}"
                )
            case ChallengeAction.CONFIRM:
                return f"{actor_id} confirmed the match against {opponent}"
            case ChallengeAction.DECLINE:
                return f"{actor_id} declined the challenge from {opponent}"
            case ChallengeAction.CANCEL:
                return f"{actor_id} cancelled the challenge to {opponent}"
            case _:
                assert_never(action)

    # ==================== Matches ====================

    async def submit_match_score(
        self,
        match_id: str,
        actor_id: str,
        my_games: int,
        opponent_games: int,
        livestream_url: str | None = None,
        expected_version: int | None = None,
    ) -> Match:
        """Record one side's score and reconcile the match.

        When this submission completes the match, the ladder shift is applied
        in the same transaction.
        """

        def _submit(session: Session) -> Match:
            match = fetch_match(session, match_id, expected_version)
            result = record_submission(match, actor_id, my_games, opponent_games, livestream_url)
            session.add(match)
            record_event(
                session,
                ActivityType.SCORE_SUBMITTED,
                f"{actor_id} reported {my_games}-{opponent_games}",
                actor_id=actor_id,
                match_id=match.id,
                challenge_id=match.challenge_id,
            )

            match result.outcome:
                case Outcome.PENDING:
                    logger.info("score_submitted", match_id=match.id, actor=actor_id)
                case Outcome.DISPUTED:
                    logger.warning(
                        "match_disputed", match_id=match.id, reason=match.dispute_reason
                    )
                    record_event(
                        session,
                        ActivityType.SCORE_DISPUTED,
                        f"Match disputed: {match.dispute_reason}",
                        actor_id=match.challenger_id,
                        target_id=match.challenged_id,
                        match_id=match.id,
                        challenge_id=match.challenge_id,
                    )
                case Outcome.COMPLETED:
                    logger.info("match_completed", match_id=match.id, winner=match.winner_id)
                    record_event(
                        session,
                        ActivityType.MATCH_COMPLETED,
                        f"{match.winner_id} beat {match.loser_id} "
                        f"{match.challenger_games}-{match.challenged_games}",
                        actor_id=match.winner_id,
                        target_id=match.loser_id,
                        match_id=match.id,
                        challenge_id=match.challenge_id,
                    )
                    self._apply_shift(session, match)
            return match

        return await self.store.run_transaction(_submit)

    async def apply_rank_shift(self, match_id: str) -> bool:
        """Apply a completed match's result to the ladder at most once.

        Returns:
            True if this call processed the match, False if it had already
            been processed.
        """

        def _apply(session: Session) -> bool:
            match = fetch_match(session, match_id)
            return self._apply_shift(session, match) is not None

        return await self.store.run_transaction(_apply)

    def _apply_shift(self, session: Session, match: Match) -> RankShift | None:
        """Shift the ladder for a completed match unless already processed."""
        if fetch_rank_shift(session, match.id) is not None:
            logger.info("rank_shift_replayed", match_id=match.id)
            return None

        status = MatchStatus(match.status)
        if status is not MatchStatus.COMPLETED or match.winner_id is None:
            msg = f"Match {match.id} is {status}; only completed matches move the ladder"
            raise StateConflictError(msg)

        winner_id, loser_id = match.winner_id, match.loser_id
        rows = fetch_ladder(session)
        entries = to_rank_entries(rows)
        winner = find_entry(entries, winner_id)
        if winner is None:
            raise NotFoundError("Competitor", winner_id)
        loser = find_entry(entries, loser_id)
        if loser is None:
            raise NotFoundError("Competitor", loser_id)

        upset = winner.rank_position > loser.rank_position
        shifted = shift_on_result(entries, winner_id, loser_id, winner_won=upset)
        changed = write_positions(session, rows, shifted)

        shift = RankShift(
            match_id=match.id,
            winner_id=winner_id,
            loser_id=loser_id,
            winner_old_position=winner.rank_position,
            loser_old_position=loser.rank_position,
            moved=upset,
            applied_at=datetime.now(UTC),
        )
        session.add(shift)

        if upset:
            record_event(
                session,
                ActivityType.RANKING_CHANGED,
                f"{winner_id} moved from #{winner.rank_position} to #{loser.rank_position}",
                actor_id=winner_id,
                target_id=loser_id,
                match_id=match.id,
                challenge_id=match.challenge_id,
            )
        logger.info(
            "rank_shift_applied",
            match_id=match.id,
            winner=winner_id,
            moved=upset,
            entries_changed=changed,
        )
        return shift

    # ==================== Reads ====================

    async def get_ladder(self) -> list[LadderEntry]:
        return await self.store.ladder.get_ladder()

    async def get_challenge(self, challenge_id: str) -> Challenge:
        return await self.store.challenges.get(challenge_id)

    async def get_match(self, match_id: str) -> Match:
        return await self.store.matches.get(match_id)

    async def get_challenges_for(self, competitor_id: str) -> list[Challenge]:
        return await self.store.challenges.list_for(competitor_id)

    async def get_matches_for(self, competitor_id: str) -> list[Match]:
        return await self.store.matches.list_for(competitor_id)

    async def get_activity(
        self, limit: int = 50, competitor_id: str | None = None
    ) -> list[ActivityEvent]:
        return await self.store.activity.recent(limit, competitor_id)

    async def get_standings(self) -> list[StandingRow]:
        """Ladder positions with each competitor's completed-match record."""
        entries = await self.store.ladder.get_ladder()
        completed = await self.store.matches.list_all(MatchStatus.COMPLETED)
        return build_standings(entries, completed)
