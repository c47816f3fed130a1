"""
Progression Engine - unlock rules, rewards and growth for EcoLearn.

Components:
- Catalog: validated unit/group definitions
- UnlockResolver: prerequisite-gated access decisions
- compute_reward: points + item bundle for one completion
- ProgressLedger / complete_unit: immutable per-profile progress snapshots
- evaluate_stage: tree growth stage from cumulative inventory
- group_progress: completion rollups per group
"""

from ecolearn.engines.progression.catalog import (
    Catalog,
    ChallengeCadence,
    CompletionGate,
    Group,
    GroupKind,
    RewardMode,
    Unit,
    UnitKind,
    default_catalog,
    load_catalog,
)
from ecolearn.engines.progression.errors import (
    CatalogError,
    InvalidOutcome,
    LedgerConflict,
    NotFound,
    NotUnlocked,
    ProgressionError,
)
from ecolearn.engines.progression.growth_stage import (
    GrowthStage,
    StageProgress,
    evaluate_stage,
    next_stage_shortfall,
    stage_progress,
)
from ecolearn.engines.progression.items import ItemName, RewardBundle
from ecolearn.engines.progression.ledger import (
    CompletionResult,
    CompletionStatus,
    LedgerSession,
    ProgressLedger,
    complete_unit,
)
from ecolearn.engines.progression.reward_calculator import (
    CompletionOutcome,
    QuizOutcome,
    RewardGrant,
    compute_reward,
)
from ecolearn.engines.progression.rollup import GroupProgress, all_group_progress, group_progress
from ecolearn.engines.progression.unlock_resolver import BypassMode, UnlockResolver

__all__ = [
    "Catalog",
    "ChallengeCadence",
    "CompletionGate",
    "Group",
    "GroupKind",
    "RewardMode",
    "Unit",
    "UnitKind",
    "default_catalog",
    "load_catalog",
    "CatalogError",
    "InvalidOutcome",
    "LedgerConflict",
    "NotFound",
    "NotUnlocked",
    "ProgressionError",
    "GrowthStage",
    "StageProgress",
    "evaluate_stage",
    "next_stage_shortfall",
    "stage_progress",
    "ItemName",
    "RewardBundle",
    "CompletionResult",
    "CompletionStatus",
    "LedgerSession",
    "ProgressLedger",
    "complete_unit",
    "CompletionOutcome",
    "QuizOutcome",
    "RewardGrant",
    "compute_reward",
    "GroupProgress",
    "all_group_progress",
    "group_progress",
    "BypassMode",
    "UnlockResolver",
]
