"""Unit tests for ledger snapshots and complete_unit."""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from ecolearn.engines.progression.catalog import UnitKind
from ecolearn.engines.progression.errors import InvalidOutcome, NotFound, NotUnlocked
from ecolearn.engines.progression.growth_stage import GrowthStage
from ecolearn.engines.progression.items import RewardBundle
from ecolearn.engines.progression.ledger import (
    CompletionStatus,
    ProgressLedger,
    complete_unit,
    next_learning_streak,
)
from ecolearn.engines.progression.reward_calculator import QuizOutcome
from ecolearn.engines.progression.unlock_resolver import BypassMode


class TestCompleteUnit:
    """Applying completions to a ledger."""

    def test_grant_applied_to_new_ledger(self, catalog, empty_ledger):
        result = complete_unit(empty_ledger, "l1", catalog=catalog)
        assert result.status == CompletionStatus.GRANTED
        assert result.grant.points == 50
        assert result.ledger.total_points == 50
        assert result.ledger.completed_of(UnitKind.LESSON) == frozenset({"l1"})
        assert result.ledger.version == 1

    def test_input_ledger_untouched(self, catalog, empty_ledger):
        complete_unit(empty_ledger, "g1", catalog=catalog)
        assert empty_ledger.total_points == 0
        assert empty_ledger.inventory.is_empty
        assert not empty_ledger.is_completed("g1")
        assert empty_ledger.version == 0

    def test_repeat_completion_is_idempotent(self, catalog, empty_ledger):
        """A second completion of the same quiz returns the first grant and changes nothing."""
        ledger = complete_unit(empty_ledger, "l1", catalog=catalog).ledger
        outcome = QuizOutcome(score_earned=95, max_score=100, streak=4)
        first = complete_unit(ledger, "q1", outcome, catalog=catalog)
        second = complete_unit(first.ledger, "q1", outcome, catalog=catalog)

        assert second.status == CompletionStatus.ALREADY_COMPLETED
        assert second.ledger is first.ledger
        assert second.grant == first.grant
        assert second.ledger.inventory == first.ledger.inventory
        assert not second.stage_changed

    def test_repeat_ignores_a_different_outcome(self, catalog, empty_ledger):
        first = complete_unit(empty_ledger, "q2", QuizOutcome(score_earned=10, max_score=50), catalog=catalog)
        second = complete_unit(first.ledger, "q2", QuizOutcome(score_earned=50, max_score=50), catalog=catalog)
        assert second.status == CompletionStatus.ALREADY_COMPLETED
        assert second.ledger.total_points == 10

    def test_already_completed_reported_before_access(self, catalog, empty_ledger):
        ledger = complete_unit(empty_ledger, "l3", catalog=catalog, bypass=BypassMode.ON).ledger
        result = complete_unit(ledger, "l3", catalog=catalog)
        assert result.status == CompletionStatus.ALREADY_COMPLETED

    def test_locked_unit_raises_with_unmet(self, catalog, empty_ledger):
        with pytest.raises(NotUnlocked) as exc_info:
            complete_unit(empty_ledger, "l2", catalog=catalog)
        assert exc_info.value.unmet == ["l1"]

    def test_bypass_completes_locked_unit(self, catalog, empty_ledger):
        result = complete_unit(empty_ledger, "boss1", catalog=catalog, bypass=BypassMode.ON)
        assert result.status == CompletionStatus.GRANTED
        assert result.ledger.total_points == 150

    def test_unknown_unit(self, catalog, empty_ledger):
        with pytest.raises(NotFound):
            complete_unit(empty_ledger, "ghost", catalog=catalog)

    def test_group_is_not_completable(self, catalog, empty_ledger):
        with pytest.raises(NotFound):
            complete_unit(empty_ledger, "climate", catalog=catalog)

    def test_invalid_outcome_grants_nothing(self, catalog, empty_ledger):
        with pytest.raises(InvalidOutcome):
            complete_unit(empty_ledger, "q2", QuizOutcome(score_earned=60, max_score=50), catalog=catalog)
        assert not empty_ledger.is_completed("q2")

    def test_first_quiz_bonus_only_once(self, catalog, empty_ledger):
        first = complete_unit(empty_ledger, "q2", QuizOutcome(score_earned=50, max_score=50), catalog=catalog)
        assert "first_quiz" in first.grant.rules

        ledger = complete_unit(first.ledger, "l1", catalog=catalog).ledger
        second = complete_unit(ledger, "q1", QuizOutcome(score_earned=100, max_score=100), catalog=catalog)
        assert "first_quiz" not in second.grant.rules
        assert second.ledger.inventory.quantity("seed") == 1

    def test_inventory_and_points_never_decrease(self, catalog, empty_ledger):
        ledger = empty_ledger
        for unit_id in ("l1", "g1", "g2", "ch-a", "ch-b", "boss1"):
            updated = complete_unit(ledger, unit_id, catalog=catalog).ledger
            assert updated.inventory.covers(ledger.inventory)
            assert updated.total_points >= ledger.total_points
            assert updated.version == ledger.version + 1
            ledger = updated
        assert ledger.total_points == 50 + 50 + 40 + 30 + 40 + 150

    def test_stage_transition_reported(self, catalog, empty_ledger):
        result = complete_unit(empty_ledger, "g1", catalog=catalog)
        assert result.stage_before == GrowthStage.POT
        assert result.stage_after == GrowthStage.SEED
        assert result.stage_changed


class TestLedgerDerivedValues:
    """Level, stage and snapshots."""

    def test_empty_ledger(self, empty_ledger):
        assert empty_ledger.level == 1
        assert empty_ledger.points_to_next_level == 100
        assert empty_ledger.growth_stage == GrowthStage.POT
        assert set(empty_ledger.completed) == set(UnitKind)

    def test_level_from_points(self):
        ledger = ProgressLedger(total_points=150)
        assert ledger.level == 2
        assert ledger.points_to_next_level == 50
        assert ProgressLedger(total_points=200).level == 3

    def test_completed_ids_union(self, catalog, empty_ledger):
        ledger = empty_ledger
        for unit_id in ("l1", "ch-a", "g1"):
            ledger = complete_unit(ledger, unit_id, catalog=catalog).ledger
        assert ledger.completed_ids == frozenset({"l1", "ch-a", "g1"})
        assert ledger.completed_of(UnitKind.CHALLENGE) == frozenset({"ch-a"})

    def test_snapshot_round_trip(self, catalog, empty_ledger):
        ledger = complete_unit(empty_ledger, "l1", catalog=catalog, today=date(2026, 3, 1)).ledger
        ledger = complete_unit(
            ledger, "q1", QuizOutcome(score_earned=95, max_score=100, streak=4), catalog=catalog
        ).ledger

        snapshot = json.loads(json.dumps(ledger.to_snapshot()))
        restored = ProgressLedger.from_snapshot(snapshot)

        assert restored == ledger
        assert restored.grants["q1"].items == RewardBundle.of(
            seed=1, water=1, sunlight=1, nutrients=1, fertilizer=1
        )
        assert restored.last_active_date == date(2026, 3, 1)

    def test_snapshot_lists_are_sorted(self, catalog, empty_ledger):
        ledger = complete_unit(empty_ledger, "l3", catalog=catalog, bypass=BypassMode.ON).ledger
        ledger = complete_unit(ledger, "l1", catalog=catalog).ledger
        assert ledger.to_snapshot()["completed"]["lesson"] == ["l1", "l3"]

    def test_from_empty_snapshot(self):
        assert ProgressLedger.from_snapshot({}) == ProgressLedger.empty()

    def test_ledger_is_frozen(self, empty_ledger):
        with pytest.raises(ValidationError):
            empty_ledger.total_points = 10


class TestLearningStreak:
    """Daily activity streak."""

    def test_first_activity(self):
        assert next_learning_streak(0, None, date(2026, 5, 2)) == 1

    def test_same_day_unchanged(self):
        assert next_learning_streak(3, date(2026, 5, 2), date(2026, 5, 2)) == 3

    def test_consecutive_day_increments(self):
        assert next_learning_streak(3, date(2026, 5, 1), date(2026, 5, 2)) == 4

    def test_gap_restarts(self):
        assert next_learning_streak(3, date(2026, 4, 28), date(2026, 5, 2)) == 1

    def test_completions_update_streak(self, catalog, empty_ledger):
        ledger = complete_unit(empty_ledger, "l1", catalog=catalog, today=date(2026, 5, 1)).ledger
        ledger = complete_unit(ledger, "l2", catalog=catalog, today=date(2026, 5, 2)).ledger
        ledger = complete_unit(ledger, "l3", catalog=catalog, today=date(2026, 5, 2)).ledger
        assert ledger.learning_streak == 2
        assert ledger.last_active_date == date(2026, 5, 2)

    def test_streak_untouched_without_date(self, catalog, empty_ledger):
        ledger = complete_unit(empty_ledger, "l1", catalog=catalog).ledger
        assert ledger.learning_streak == 0
        assert ledger.last_active_date is None
