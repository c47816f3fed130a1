"""Unit tests for the single-writer ledger session."""

from concurrent.futures import ThreadPoolExecutor

from ecolearn.engines.progression.ledger import CompletionStatus, LedgerSession
from ecolearn.engines.progression.reward_calculator import QuizOutcome


class TestLedgerSession:
    """Serialized completions on one profile."""

    def test_complete_advances_session(self, catalog):
        session = LedgerSession(catalog)
        assert not session.can_access("l2")
        session.complete("l1")
        assert session.can_access("l2")
        assert session.ledger.version == 1

    def test_concurrent_completions_grant_once(self, catalog):
        session = LedgerSession(catalog)
        outcome = QuizOutcome(score_earned=50, max_score=50, streak=5)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: session.complete("q2", outcome), range(16)))

        statuses = [result.status for result in results]
        assert statuses.count(CompletionStatus.GRANTED) == 1
        assert statuses.count(CompletionStatus.ALREADY_COMPLETED) == 15
        assert session.ledger.version == 1
        assert session.ledger.total_points == 50
        assert session.ledger.inventory.quantity("love") == 1

    def test_concurrent_distinct_units_all_applied(self, catalog):
        session = LedgerSession(catalog)
        units = ["l1", "ch-a", "g1", "q2"]

        def run(unit_id):
            outcome = QuizOutcome(score_earned=0, max_score=50) if unit_id == "q2" else None
            return session.complete(unit_id, outcome)

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(run, units))

        assert session.ledger.completed_ids == frozenset(units)
        assert session.ledger.version == 4
        assert session.ledger.total_points == 50 + 30 + 50
