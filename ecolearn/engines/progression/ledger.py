"""
Progress Ledger - the per-profile record of completions, inventory and points.

Ledgers are immutable snapshots. complete_unit is the only way to advance one:
it returns a new snapshot built in one step (or raises and leaves the input
untouched), so there is never a state with inventory applied but the
completion missing.

Growth stage and level are derived on every read and never stored.
"""

import threading
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ecolearn.engines.progression.catalog import Catalog, UnitKind
from ecolearn.engines.progression.errors import NotUnlocked
from ecolearn.engines.progression.growth_stage import GrowthStage, evaluate_stage
from ecolearn.engines.progression.items import EMPTY_BUNDLE, RewardBundle
from ecolearn.engines.progression.reward_calculator import Outcome, RewardGrant, compute_reward
from ecolearn.engines.progression.unlock_resolver import BypassMode, UnlockResolver
from ecolearn.logging_config import get_logger

logger = get_logger(__name__)

POINTS_PER_LEVEL = 100


class CompletionStatus(str, Enum):
    GRANTED = "granted"
    ALREADY_COMPLETED = "already_completed"


def _empty_completed() -> Dict[UnitKind, FrozenSet[str]]:
    return {kind: frozenset() for kind in UnitKind}


class ProgressLedger(BaseModel):
    """Immutable snapshot of one learner's progress."""

    model_config = ConfigDict(frozen=True)

    completed: Dict[UnitKind, FrozenSet[str]] = Field(default_factory=_empty_completed)
    inventory: RewardBundle = EMPTY_BUNDLE
    total_points: int = Field(default=0, ge=0)
    grants: Dict[str, RewardGrant] = Field(default_factory=dict)
    version: int = Field(default=0, ge=0)
    learning_streak: int = Field(default=0, ge=0)
    last_active_date: Optional[date] = None

    @field_validator("completed")
    @classmethod
    def _fill_kinds(cls, value: Dict[UnitKind, FrozenSet[str]]) -> Dict[UnitKind, FrozenSet[str]]:
        filled = _empty_completed()
        filled.update(value)
        return filled

    @classmethod
    def empty(cls) -> "ProgressLedger":
        return cls()

    @property
    def completed_ids(self) -> FrozenSet[str]:
        """Union of every per-kind completed set."""
        return frozenset().union(*self.completed.values())

    def is_completed(self, unit_id: str) -> bool:
        return any(unit_id in ids for ids in self.completed.values())

    def completed_of(self, kind: UnitKind) -> FrozenSet[str]:
        return self.completed[kind]

    @property
    def growth_stage(self) -> GrowthStage:
        return evaluate_stage(self.inventory)

    @property
    def level(self) -> int:
        return self.total_points // POINTS_PER_LEVEL + 1

    @property
    def points_to_next_level(self) -> int:
        return self.level * POINTS_PER_LEVEL - self.total_points

    def to_snapshot(self) -> Dict[str, Any]:
        """Stable, JSON-friendly key/value form for storage."""
        return {
            "completed": {kind.value: sorted(self.completed[kind]) for kind in UnitKind},
            "inventory": self.inventory.as_dict(),
            "total_points": self.total_points,
            "grants": {
                unit_id: grant.model_dump(mode="json") for unit_id, grant in sorted(self.grants.items())
            },
            "version": self.version,
            "learning_streak": self.learning_streak,
            "last_active_date": self.last_active_date.isoformat() if self.last_active_date else None,
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "ProgressLedger":
        return cls.model_validate(
            {
                "completed": {
                    UnitKind(kind): frozenset(ids) for kind, ids in data.get("completed", {}).items()
                },
                "inventory": data.get("inventory") or {},
                "total_points": data.get("total_points", 0),
                "grants": data.get("grants") or {},
                "version": data.get("version", 0),
                "learning_streak": data.get("learning_streak", 0),
                "last_active_date": data.get("last_active_date"),
            }
        )


class CompletionResult(BaseModel):
    """Outcome of complete_unit: the ledger to keep and what was granted."""

    model_config = ConfigDict(frozen=True)

    ledger: ProgressLedger
    grant: Optional[RewardGrant]
    status: CompletionStatus
    stage_before: GrowthStage
    stage_after: GrowthStage

    @property
    def stage_changed(self) -> bool:
        return self.stage_after != self.stage_before


def next_learning_streak(streak: int, last_active: Optional[date], today: date) -> int:
    """Daily streak: unchanged on the same day, +1 the day after, otherwise restart at 1."""
    if last_active == today:
        return streak
    if last_active is not None and last_active == today - timedelta(days=1):
        return streak + 1
    return 1


def complete_unit(
    ledger: ProgressLedger,
    unit_id: str,
    outcome: Optional[Outcome] = None,
    *,
    catalog: Catalog,
    bypass: BypassMode = BypassMode.OFF,
    today: Optional[date] = None,
) -> CompletionResult:
    """
    Apply one completion to a ledger.

    Args:
        ledger: Current snapshot (never modified)
        unit_id: Unit being completed
        outcome: Quiz outcome for quizzes, None or CompletionOutcome otherwise
        catalog: Content definitions
        bypass: Developer override for the access check
        today: Activity date for the learning streak; the streak is left alone when None

    Returns:
        CompletionResult with status GRANTED and a new ledger, or
        ALREADY_COMPLETED with the same ledger and the previously recorded grant

    Raises:
        NotFound: unknown unit id
        NotUnlocked: prerequisites or gates not met
        InvalidOutcome: malformed outcome
    """
    unit = catalog.get_unit(unit_id)
    stage_before = ledger.growth_stage

    if ledger.is_completed(unit_id):
        logger.info("Unit already completed", extra={"unit_id": unit_id})
        return CompletionResult(
            ledger=ledger,
            grant=ledger.grants.get(unit_id),
            status=CompletionStatus.ALREADY_COMPLETED,
            stage_before=stage_before,
            stage_after=stage_before,
        )

    resolver = UnlockResolver(catalog)
    if not resolver.can_access(unit_id, ledger, bypass):
        unmet = resolver.unmet_prerequisites(unit_id, ledger)
        logger.info("Completion rejected: locked", extra={"unit_id": unit_id, "unmet": unmet})
        raise NotUnlocked(unit_id, unmet)

    first_quiz = unit.kind == UnitKind.QUIZ and not ledger.completed[UnitKind.QUIZ]
    grant = compute_reward(unit, outcome, first_quiz=first_quiz)

    completed = dict(ledger.completed)
    completed[unit.kind] = completed[unit.kind] | {unit_id}
    grants = dict(ledger.grants)
    grants[unit_id] = grant

    streak, last_active = ledger.learning_streak, ledger.last_active_date
    if today is not None:
        streak = next_learning_streak(streak, last_active, today)
        last_active = today

    updated = ProgressLedger(
        completed=completed,
        inventory=ledger.inventory + grant.items,
        total_points=ledger.total_points + grant.points,
        grants=grants,
        version=ledger.version + 1,
        learning_streak=streak,
        last_active_date=last_active,
    )
    stage_after = updated.growth_stage

    logger.info(
        "Unit completed",
        extra={
            "unit_id": unit_id,
            "points": grant.points,
            "items": grant.items.as_dict(),
            "version": updated.version,
        },
    )
    if stage_after != stage_before:
        logger.info(
            "Growth stage advanced",
            extra={"from_stage": stage_before.value, "to_stage": stage_after.value},
        )

    return CompletionResult(
        ledger=updated,
        grant=grant,
        status=CompletionStatus.GRANTED,
        stage_before=stage_before,
        stage_after=stage_after,
    )


class LedgerSession:
    """
    Single-writer holder of one profile's current snapshot.

    complete() runs under a lock so concurrent submissions for the same unit
    serialize: the first one grants, the rest see ALREADY_COMPLETED.
    """

    def __init__(self, catalog: Catalog, ledger: Optional[ProgressLedger] = None):
        self.catalog = catalog
        self._ledger = ledger if ledger is not None else ProgressLedger.empty()
        self._lock = threading.Lock()

    @property
    def ledger(self) -> ProgressLedger:
        return self._ledger

    def can_access(self, target_id: str, bypass: BypassMode = BypassMode.OFF) -> bool:
        return UnlockResolver(self.catalog).can_access(target_id, self._ledger, bypass)

    def complete(
        self,
        unit_id: str,
        outcome: Optional[Outcome] = None,
        *,
        bypass: BypassMode = BypassMode.OFF,
        today: Optional[date] = None,
    ) -> CompletionResult:
        with self._lock:
            result = complete_unit(
                self._ledger, unit_id, outcome, catalog=self.catalog, bypass=bypass, today=today
            )
            self._ledger = result.ledger
            return result
