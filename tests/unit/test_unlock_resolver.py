"""Unit tests for prerequisite-gated access decisions."""

import pytest

from ecolearn.engines.progression.catalog import UnitKind
from ecolearn.engines.progression.errors import NotFound
from ecolearn.engines.progression.ledger import complete_unit
from ecolearn.engines.progression.reward_calculator import QuizOutcome
from ecolearn.engines.progression.unlock_resolver import BypassMode, UnlockResolver


def _complete(ledger, catalog, *unit_ids):
    for unit_id in unit_ids:
        ledger = complete_unit(ledger, unit_id, catalog=catalog).ledger
    return ledger


class TestUnlockResolver:
    """Access checks against a ledger."""

    def test_unit_without_prerequisites_is_open(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.can_access("l1", empty_ledger)
        assert resolver.can_access("ch-a", empty_ledger)

    def test_chained_lesson_locked_until_previous_done(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert not resolver.can_access("l2", empty_ledger)
        ledger = _complete(empty_ledger, catalog, "l1")
        assert resolver.can_access("l2", ledger)
        assert not resolver.can_access("l3", ledger)

    def test_challenge_chain(self, catalog, empty_ledger):
        """ch-b opens only after ch-a."""
        resolver = UnlockResolver(catalog)
        assert not resolver.can_access("ch-b", empty_ledger)
        ledger = _complete(empty_ledger, catalog, "ch-a")
        assert resolver.can_access("ch-b", ledger)

    def test_prerequisites_resolve_across_kinds(self, catalog, empty_ledger):
        """A quiz gated on a lesson sees the lesson completion."""
        resolver = UnlockResolver(catalog)
        assert not resolver.can_access("q1", empty_ledger)
        ledger = _complete(empty_ledger, catalog, "l1")
        assert resolver.can_access("q1", ledger)

    def test_boss_requires_every_game(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        ledger = _complete(empty_ledger, catalog, "g1")
        assert resolver.unmet_prerequisites("boss1", ledger) == ["g2"]
        ledger = _complete(ledger, catalog, "g2")
        assert resolver.can_access("boss1", ledger)

    def test_group_prerequisite_needs_whole_group(self, catalog, empty_ledger):
        """l6 requires the arena group, boss included."""
        resolver = UnlockResolver(catalog)
        ledger = _complete(empty_ledger, catalog, "g1", "g2")
        assert not resolver.can_access("l6", ledger)
        assert resolver.unmet_prerequisites("l6", ledger) == ["arena"]
        ledger = _complete(ledger, catalog, "boss1")
        assert resolver.can_access("l6", ledger)

    def test_group_access_uses_group_prerequisites(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.can_access("arena-1", empty_ledger)
        assert not resolver.can_access("arena-2", empty_ledger)
        ledger = _complete(empty_ledger, catalog, "g1")
        assert resolver.can_access("arena-2", ledger)

    def test_level_gate(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.unmet_prerequisites("ch-level", empty_ledger) == ["level:2"]
        ledger = _complete(empty_ledger, catalog, "l1", "g1")
        assert ledger.level == 2
        assert resolver.can_access("ch-level", ledger)

    def test_level_or_completed_count_reported_together(self, catalog, empty_ledger):
        """Both alternatives are listed while neither is met."""
        resolver = UnlockResolver(catalog)
        assert resolver.unmet_prerequisites("ch-either", empty_ledger) == ["level:2", "completed:challenge:2"]
        ledger = _complete(empty_ledger, catalog, "ch-a")
        assert resolver.unmet_prerequisites("ch-either", ledger) == ["level:2", "completed:challenge:2"]

    def test_completed_count_opens_below_level(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        ledger = _complete(empty_ledger, catalog, "ch-a", "ch-b")
        assert ledger.level == 1
        assert resolver.unmet_prerequisites("ch-either", ledger) == []
        assert resolver.can_access("ch-either", ledger)

    def test_level_opens_without_completed_count(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        ledger = _complete(empty_ledger, catalog, "l1", "g1")
        assert ledger.level == 2
        assert not ledger.completed_of(UnitKind.CHALLENGE)
        assert resolver.can_access("ch-either", ledger)

    def test_level_only_gate_ignores_completed_counts(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        ledger = _complete(empty_ledger, catalog, "ch-a", "ch-b")
        assert resolver.unmet_prerequisites("ch-level", ledger) == ["level:2"]

    def test_item_gate_reports_required_quantity(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.unmet_prerequisites("ch-items", empty_ledger) == ["item:seed:2"]
        ledger = _complete(empty_ledger, catalog, "g1")
        assert resolver.unmet_prerequisites("ch-items", ledger) == ["item:seed:2"]

    def test_item_gate_met_by_cumulative_inventory(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        ledger = complete_unit(empty_ledger, "q2", QuizOutcome(score_earned=10, max_score=50), catalog=catalog).ledger
        ledger = _complete(ledger, catalog, "g1")
        assert ledger.inventory.quantity("seed") == 2
        assert resolver.can_access("ch-items", ledger)

    def test_bypass_opens_everything(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.can_access("l5", empty_ledger, BypassMode.ON)
        assert resolver.can_access("boss1", empty_ledger, BypassMode.ON)
        assert resolver.can_access("ch-level", empty_ledger, BypassMode.ON)

    def test_unknown_target_raises_even_with_bypass(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        with pytest.raises(NotFound):
            resolver.can_access("ghost", empty_ledger)
        with pytest.raises(NotFound):
            resolver.can_access("ghost", empty_ledger, BypassMode.ON)

    def test_accessible_children_in_display_order(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.accessible_children("climate", empty_ledger) == ["l1"]
        assert resolver.accessible_children("arena", empty_ledger) == ["arena-1"]
        ledger = _complete(empty_ledger, catalog, "g1", "g2")
        assert resolver.accessible_children("arena", ledger) == ["arena-1", "arena-2", "boss1"]

    def test_accessible_children_with_bypass(self, catalog, empty_ledger):
        resolver = UnlockResolver(catalog)
        assert resolver.accessible_children("climate", empty_ledger, BypassMode.ON) == [
            "l1",
            "l2",
            "l3",
            "l4",
            "l5",
        ]

    def test_accessible_children_of_unit_raises(self, catalog, empty_ledger):
        with pytest.raises(NotFound):
            UnlockResolver(catalog).accessible_children("l1", empty_ledger)
