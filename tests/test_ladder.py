"""Tests for the ladder invariant and rank shifts."""

from itertools import permutations

import pytest

from challenge_ladder.core.errors import DuplicateCompetitorError, NotFoundError
from challenge_ladder.ranking import (
    RankEntry,
    append_entry,
    find_entry,
    is_eligible_challenge_distance,
    shift_on_result,
    validate_ladder,
)


def make_ladder(*ids: str) -> list[RankEntry]:
    return [RankEntry(cid, i + 1) for i, cid in enumerate(ids)]


def positions(entries: list[RankEntry]) -> dict[str, int]:
    return {e.competitor_id: e.rank_position for e in entries}


class TestValidateLadder:
    """Tests for the ladder invariant check."""

    def test_empty_ladder_is_valid(self):
        """Test the empty ladder satisfies the invariant."""
        assert validate_ladder([])

    def test_contiguous_ladder_is_valid(self):
        """Test positions 1..N in any order are valid."""
        entries = [RankEntry("c", 3), RankEntry("a", 1), RankEntry("b", 2)]
        assert validate_ladder(entries)

    def test_gap_is_invalid(self):
        """Test a missing position breaks the invariant."""
        assert not validate_ladder([RankEntry("a", 1), RankEntry("b", 3)])

    def test_duplicate_position_is_invalid(self):
        assert not validate_ladder([RankEntry("a", 1), RankEntry("b", 1)])

    def test_not_starting_at_one_is_invalid(self):
        assert not validate_ladder([RankEntry("a", 2), RankEntry("b", 3)])

    def test_duplicate_competitor_is_invalid(self):
        """Test a competitor appearing twice breaks the invariant."""
        assert not validate_ladder([RankEntry("a", 1), RankEntry("a", 2)])


class TestChallengeDistance:
    """Tests for the numeric distance rule."""

    @pytest.mark.parametrize(
        ("rank_a", "rank_b", "expected"),
        [
            (3, 1, True),
            (1, 3, True),
            (6, 1, True),
            (7, 1, False),
            (4, 4, False),
            (2, 1, True),
        ],
    )
    def test_distance(self, rank_a, rank_b, expected):
        """Test 0 < |a - b| <= max_diff with max_diff 5."""
        assert is_eligible_challenge_distance(rank_a, rank_b, 5) is expected


class TestShiftOnResult:
    """Tests for ladder shifts after a result."""

    def test_upset_shifts_window(self):
        """Test E (#5) beating B (#2) takes #2 and pushes B, C, D down one."""
        ladder = make_ladder("A", "B", "C", "D", "E")

        shifted = shift_on_result(ladder, "E", "B", winner_won=True)

        assert sorted(shifted, key=lambda e: e.rank_position) == [
            RankEntry("A", 1),
            RankEntry("E", 2),
            RankEntry("B", 3),
            RankEntry("C", 4),
            RankEntry("D", 5),
        ]

    def test_upset_leaves_lower_entries(self):
        """Test entries below the winner keep their positions."""
        ladder = make_ladder("A", "B", "C", "D", "E", "F")

        shifted = shift_on_result(ladder, "E", "B", winner_won=True)

        assert positions(shifted) == {"A": 1, "E": 2, "B": 3, "C": 4, "D": 5, "F": 6}

    def test_adjacent_upset_swaps(self):
        """Test adjacent competitors simply swap."""
        ladder = make_ladder("A", "B")

        shifted = shift_on_result(ladder, "B", "A", winner_won=True)

        assert positions(shifted) == {"A": 2, "B": 1}

    def test_defense_is_noop(self):
        """Test nothing moves when the incumbent defends."""
        ladder = make_ladder("A", "B", "C")

        shifted = shift_on_result(ladder, "A", "C", winner_won=False)

        assert shifted == ladder

    def test_higher_ranked_winner_is_noop(self):
        """Test a win by the better-ranked side never moves anyone."""
        ladder = make_ladder("A", "B", "C")

        shifted = shift_on_result(ladder, "A", "C", winner_won=True)

        assert positions(shifted) == positions(ladder)

    def test_entries_outside_window_untouched(self):
        """Test entries outside [loser, winner] are the same objects."""
        ladder = make_ladder("A", "B", "C", "D", "E")

        shifted = shift_on_result(ladder, "D", "B", winner_won=True)

        assert shifted[0] is ladder[0]
        assert shifted[4] is ladder[4]

    def test_score_is_preserved(self):
        """Test shifts never touch the score."""
        ladder = [RankEntry("A", 1, 40), RankEntry("B", 2, 15)]

        shifted = shift_on_result(ladder, "B", "A", winner_won=True)

        assert {e.competitor_id: e.score for e in shifted} == {"A": 40, "B": 15}

    def test_preserves_input_order(self):
        """Test the result lists entries in the order they were given."""
        ladder = list(reversed(make_ladder("A", "B", "C")))

        shifted = shift_on_result(ladder, "C", "A", winner_won=True)

        assert [e.competitor_id for e in shifted] == ["C", "B", "A"]
        assert positions(shifted) == {"C": 1, "A": 2, "B": 3}

    def test_does_not_mutate_input(self):
        ladder = make_ladder("A", "B", "C")

        shift_on_result(ladder, "C", "A", winner_won=True)

        assert positions(ladder) == {"A": 1, "B": 2, "C": 3}

    def test_unknown_winner_raises(self):
        """Test an unranked winner is reported as not found."""
        with pytest.raises(NotFoundError, match="ghost"):
            shift_on_result(make_ladder("A", "B"), "ghost", "A", winner_won=True)

    def test_unknown_loser_raises(self):
        with pytest.raises(NotFoundError, match="ghost"):
            shift_on_result(make_ladder("A", "B"), "B", "ghost", winner_won=True)

    @pytest.mark.parametrize("size", range(2, 7))
    def test_every_pair_keeps_invariant(self, size):
        """Test every ordered pair on every ladder size keeps positions 1..N."""
        ids = [f"c{i}" for i in range(1, size + 1)]
        ladder = make_ladder(*ids)

        for winner_id, loser_id in permutations(ids, 2):
            w = find_entry(ladder, winner_id).rank_position
            l = find_entry(ladder, loser_id).rank_position  # noqa: E741
            shifted = shift_on_result(ladder, winner_id, loser_id, winner_won=w > l)
            new = positions(shifted)

            assert validate_ladder(shifted)
            if w > l:
                assert new[winner_id] == l
                assert new[loser_id] == l + 1
                for cid, old in positions(ladder).items():
                    if old < l or old > w:
                        assert new[cid] == old
                    elif cid != winner_id:
                        assert new[cid] == old + 1
            else:
                assert new == positions(ladder)

    def test_repeated_upsets_keep_invariant(self):
        """Test a chain of upsets never breaks the invariant."""
        ladder = make_ladder("A", "B", "C", "D", "E", "F")
        results = [("F", "A"), ("C", "F"), ("E", "B"), ("A", "D")]

        for winner_id, loser_id in results:
            w = find_entry(ladder, winner_id).rank_position
            l = find_entry(ladder, loser_id).rank_position  # noqa: E741
            ladder = shift_on_result(ladder, winner_id, loser_id, winner_won=w > l)
            assert validate_ladder(ladder)


class TestAppendEntry:
    """Tests for placing new competitors."""

    def test_append_to_empty(self):
        entries = append_entry([], "A")
        assert entries == [RankEntry("A", 1)]

    def test_append_goes_to_bottom(self):
        """Test new competitors start at N + 1."""
        entries = append_entry(make_ladder("A", "B"), "C", score=7)

        assert entries[-1] == RankEntry("C", 3, 7)
        assert validate_ladder(entries)

    def test_duplicate_rejected(self):
        with pytest.raises(DuplicateCompetitorError):
            append_entry(make_ladder("A", "B"), "A")
