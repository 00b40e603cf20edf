"""Tests for score validation and dual-submission reconciliation."""

import pytest

from challenge_ladder.core.errors import (
    BothWonError,
    InvalidScoreError,
    LadderValidationError,
    NoWinnerError,
)
from challenge_ladder.services.match import (
    DISAGREEMENT_REASON,
    Outcome,
    ScoreSubmission,
    Side,
    reconcile,
    submissions_agree,
    validate_score,
    validate_submission,
)


class TestValidateScore:
    """Tests for final-score legality."""

    def test_challenger_wins(self):
        assert validate_score(5, 3, 5) is Side.CHALLENGER

    def test_challenged_wins(self):
        assert validate_score(2, 5, 5) is Side.CHALLENGED

    def test_shutout(self):
        """Test the loser may have zero games."""
        assert validate_score(0, 7, 7) is Side.CHALLENGED

    def test_hill_hill(self):
        """Test the loser may be one game short."""
        assert validate_score(5, 4, 5) is Side.CHALLENGER

    def test_both_won(self):
        with pytest.raises(BothWonError, match="Both players cannot win"):
            validate_score(5, 5, 5)

    def test_no_winner(self):
        with pytest.raises(NoWinnerError, match="reach 5 games"):
            validate_score(4, 3, 5)

    def test_over_race_is_no_winner(self):
        """Test a count past the race target is not a win."""
        with pytest.raises(NoWinnerError):
            validate_score(6, 2, 5)

    def test_loser_over_race(self):
        """Test the loser cannot have more than the race target."""
        with pytest.raises(InvalidScoreError, match="between 0 and 4"):
            validate_score(5, 6, 5)

    @pytest.mark.parametrize("bad", [-1, 2.5, "3", None, True])
    def test_non_integer_counts(self, bad):
        """Test counts must be non-negative ints, and bools are refused."""
        with pytest.raises(InvalidScoreError):
            validate_score(bad, 5, 5)

    def test_total_over_small_range(self):
        """Test validate_score either returns a side or raises a validation error."""
        race_to = 3
        for a in range(6):
            for b in range(6):
                legal = (a == race_to) != (b == race_to) and max(a, b) == race_to
                legal = legal and min(a, b) < race_to
                if legal:
                    expected = Side.CHALLENGER if a == race_to else Side.CHALLENGED
                    assert validate_score(a, b, race_to) is expected
                else:
                    with pytest.raises(LadderValidationError):
                        validate_score(a, b, race_to)


class TestValidateSubmission:
    """Tests for single-report shape checks."""

    def test_accepts_any_non_negative_pair(self):
        """Test a report is not checked against the race here."""
        assert validate_submission(9, 9) == ScoreSubmission(9, 9)

    def test_rejects_negative(self):
        with pytest.raises(InvalidScoreError, match="My games"):
            validate_submission(-1, 3)

    def test_rejects_bool(self):
        with pytest.raises(InvalidScoreError, match="Opponent games"):
            validate_submission(3, False)


class TestSubmissionsAgree:
    """Tests for perspective-relative agreement."""

    def test_mirror_images_agree(self):
        assert submissions_agree(ScoreSubmission(5, 3), ScoreSubmission(3, 5))

    def test_identical_reports_disagree(self):
        """Test both sides claiming the same split is a disagreement."""
        assert not submissions_agree(ScoreSubmission(5, 3), ScoreSubmission(5, 3))

    def test_symmetric(self):
        a, b = ScoreSubmission(2, 5), ScoreSubmission(5, 2)
        assert submissions_agree(a, b) == submissions_agree(b, a)


class TestReconcile:
    """Tests for the reconciliation decision."""

    def test_pending_without_both(self):
        """Test a single report keeps the match open."""
        assert reconcile(5, ScoreSubmission(5, 3), None).outcome is Outcome.PENDING
        assert reconcile(5, None, ScoreSubmission(3, 5)).outcome is Outcome.PENDING
        assert reconcile(5, None, None).outcome is Outcome.PENDING

    def test_agreement_completes(self):
        """Test race to 5 with (5,3) and (3,5) completes for the challenger."""
        result = reconcile(5, ScoreSubmission(5, 3), ScoreSubmission(3, 5))

        assert result.outcome is Outcome.COMPLETED
        assert result.winner is Side.CHALLENGER
        assert (result.challenger_games, result.challenged_games) == (5, 3)
        assert result.dispute_reason is None

    def test_challenged_wins(self):
        result = reconcile(7, ScoreSubmission(4, 7), ScoreSubmission(7, 4))

        assert result.outcome is Outcome.COMPLETED
        assert result.winner is Side.CHALLENGED
        assert (result.challenger_games, result.challenged_games) == (4, 7)

    def test_disagreement_disputes(self):
        """Test both sides claiming the win is a dispute."""
        result = reconcile(5, ScoreSubmission(5, 3), ScoreSubmission(5, 3))

        assert result.outcome is Outcome.DISPUTED
        assert result.dispute_reason == DISAGREEMENT_REASON
        assert result.winner is None

    def test_agreed_tie_disputes(self):
        """Test an agreed score without a winner is disputed with the rule message."""
        result = reconcile(5, ScoreSubmission(4, 4), ScoreSubmission(4, 4))

        assert result.outcome is Outcome.DISPUTED
        assert result.dispute_reason == "One player must reach 5 games to win"
        assert result.winner is None

    def test_agreed_double_win_disputes(self):
        result = reconcile(5, ScoreSubmission(5, 5), ScoreSubmission(5, 5))

        assert result.outcome is Outcome.DISPUTED
        assert result.dispute_reason == "Both players cannot win"

    def test_agreed_overshoot_disputes(self):
        result = reconcile(5, ScoreSubmission(6, 2), ScoreSubmission(2, 6))

        assert result.outcome is Outcome.DISPUTED
        assert (result.challenger_games, result.challenged_games) == (6, 2)
