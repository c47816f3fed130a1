"""Unit tests for reward computation."""

import pytest

from ecolearn.engines.progression.errors import InvalidOutcome
from ecolearn.engines.progression.items import RewardBundle
from ecolearn.engines.progression.reward_calculator import (
    QUIZ_RULES,
    CompletionOutcome,
    QuizOutcome,
    compute_reward,
)
from ecolearn.engines.progression.rounding import percentage


class TestFixedRewards:
    """Lessons, challenges, games and bosses."""

    def test_lesson_grants_configured_points(self, catalog):
        grant = compute_reward(catalog.get_unit("l1"))
        assert grant.points == 50
        assert grant.items.is_empty
        assert grant.percentage is None

    def test_game_grants_configured_bundle(self, catalog):
        grant = compute_reward(catalog.get_unit("g1"), CompletionOutcome())
        assert grant.points == 50
        assert grant.items == RewardBundle.of(seed=1, water=1)

    def test_first_quiz_flag_ignored_for_fixed_units(self, catalog):
        grant = compute_reward(catalog.get_unit("ch-a"), first_quiz=True)
        assert grant.items == RewardBundle.of(water=1)

    def test_false_completion_flag_rejected(self, catalog):
        with pytest.raises(InvalidOutcome, match="completion flag"):
            compute_reward(catalog.get_unit("l1"), CompletionOutcome(completed=False))

    def test_quiz_outcome_on_fixed_unit_rejected(self, catalog):
        with pytest.raises(InvalidOutcome, match="not scored"):
            compute_reward(catalog.get_unit("l1"), QuizOutcome(score_earned=5, max_score=10))


class TestQuizRewards:
    """Threshold rules for scored units."""

    def test_first_quiz_with_streak(self, catalog):
        """95/100 with a streak of 4 on the first quiz fires every rule but 'perfect'."""
        grant = compute_reward(
            catalog.get_unit("q1"),
            QuizOutcome(score_earned=95, max_score=100, streak=4),
            first_quiz=True,
        )
        assert grant.points == 95
        assert grant.percentage == 95
        assert grant.rules == ("first_quiz", "good", "better", "best", "streak_bonus")
        assert grant.items == RewardBundle.of(seed=1, water=1, sunlight=1, nutrients=1, fertilizer=1)

    def test_perfect_score(self, catalog):
        grant = compute_reward(catalog.get_unit("q1"), QuizOutcome(score_earned=100, max_score=100, streak=10))
        assert grant.items == RewardBundle.of(water=1, sunlight=1, nutrients=1, fertilizer=1, love=1)

    def test_thresholds_are_inclusive(self, catalog):
        quiz = catalog.get_unit("q1")
        assert compute_reward(quiz, QuizOutcome(score_earned=60, max_score=100)).items == RewardBundle.of(water=1)
        assert compute_reward(quiz, QuizOutcome(score_earned=80, max_score=100)).items == RewardBundle.of(
            water=1, sunlight=1
        )

    def test_below_all_thresholds(self, catalog):
        grant = compute_reward(catalog.get_unit("q1"), QuizOutcome(score_earned=50, max_score=100))
        assert grant.points == 50
        assert grant.items.is_empty
        assert grant.rules == ()

    def test_streak_bonus_needs_three(self, catalog):
        grant = compute_reward(catalog.get_unit("q1"), QuizOutcome(score_earned=90, max_score=100, streak=2))
        assert grant.items.quantity("fertilizer") == 0
        assert grant.items.quantity("nutrients") == 1

    def test_percentage_from_quiz_total(self, catalog):
        quiz = catalog.get_unit("q2")
        assert compute_reward(quiz, QuizOutcome(score_earned=30, max_score=50)).percentage == 60
        assert compute_reward(quiz, QuizOutcome(score_earned=45, max_score=50)).rules == ("good", "better", "best")

    def test_zero_score_is_valid(self, catalog):
        grant = compute_reward(catalog.get_unit("q2"), QuizOutcome(score_earned=0, max_score=50), first_quiz=True)
        assert grant.points == 0
        assert grant.items == RewardBundle.of(seed=1)

    def test_rules_in_declared_order(self):
        assert [rule.name for rule in QUIZ_RULES] == [
            "first_quiz",
            "good",
            "better",
            "best",
            "streak_bonus",
            "perfect",
        ]


class TestInvalidQuizOutcomes:
    """Malformed outcomes raise and grant nothing."""

    @pytest.mark.parametrize(
        "outcome, message",
        [
            (QuizOutcome(score_earned=101, max_score=100), "exceeds max_score"),
            (QuizOutcome(score_earned=-1, max_score=100), "cannot be negative"),
            (QuizOutcome(score_earned=10, max_score=0), "must be positive"),
            (QuizOutcome(score_earned=10, max_score=100, streak=-1), "streak cannot be negative"),
            (QuizOutcome(score_earned=40, max_score=50), "does not match"),
            (QuizOutcome(score_earned=100, max_score=100, streak=11), "exceeds the 10 questions"),
        ],
    )
    def test_rejected(self, catalog, outcome, message):
        with pytest.raises(InvalidOutcome, match=message):
            compute_reward(catalog.get_unit("q1"), outcome)

    def test_quiz_needs_scores(self, catalog):
        with pytest.raises(InvalidOutcome):
            compute_reward(catalog.get_unit("q1"))
        with pytest.raises(InvalidOutcome):
            compute_reward(catalog.get_unit("q1"), CompletionOutcome())

    def test_invalid_outcome_is_value_error(self, catalog):
        with pytest.raises(ValueError):
            compute_reward(catalog.get_unit("q1"), QuizOutcome(score_earned=200, max_score=100))


class TestPercentage:
    """Half-up rounding."""

    def test_half_rounds_up(self):
        assert percentage(119, 200) == 60
        assert percentage(1, 8) == 13

    def test_below_half_rounds_down(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67

    def test_zero_whole(self):
        assert percentage(0, 0) == 0

    def test_bounds(self):
        assert percentage(0, 7) == 0
        assert percentage(7, 7) == 100
