"""
Growth Stage Evaluator - maps cumulative inventory to a tree stage.

Stages are ordered. Each stage carries per-item minimums; the table below is
normalised on import so that every stage also includes the minimums of all
earlier stages. With cumulative thresholds a stage can only be reached through
its predecessors, and since inventory never shrinks the stage never regresses.

Leaving the pot requires at least one seed ever obtained.
"""

from enum import Enum
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ecolearn.engines.progression.items import ItemName, RewardBundle


class GrowthStage(str, Enum):
    """Tree maturity, in order."""

    POT = "pot"
    SEED = "seed"
    SAPLING = "sapling"
    GROWING = "growing"
    MATURE = "mature"
    BLOOMING = "blooming"
    TREE = "tree"
    FOREST = "forest"

    @property
    def rank(self) -> int:
        return STAGE_ORDER.index(self)


STAGE_ORDER: List[GrowthStage] = list(GrowthStage)

# Per-stage minimums as authored. Missing items mean "no requirement".
_AUTHORED_REQUIREMENTS: Dict[GrowthStage, Dict[str, int]] = {
    GrowthStage.POT: {},
    GrowthStage.SEED: {"seed": 1},
    GrowthStage.SAPLING: {"water": 1, "sunlight": 1},
    GrowthStage.GROWING: {"water": 2, "sunlight": 2, "nutrients": 1},
    GrowthStage.MATURE: {"water": 2, "sunlight": 2, "nutrients": 2},
    GrowthStage.BLOOMING: {"water": 3, "sunlight": 3, "nutrients": 2, "fertilizer": 1},
    GrowthStage.TREE: {"water": 3, "sunlight": 3, "nutrients": 3, "fertilizer": 1, "love": 1},
    GrowthStage.FOREST: {"water": 5, "sunlight": 5, "nutrients": 5, "fertilizer": 2, "love": 2},
}


def _cumulative(authored: Mapping[GrowthStage, Mapping[str, int]]) -> Dict[GrowthStage, RewardBundle]:
    """Carry every item minimum forward so thresholds never decrease stage to stage."""
    running: Dict[ItemName, int] = {}
    table: Dict[GrowthStage, RewardBundle] = {}
    for stage in STAGE_ORDER:
        for item, qty in authored.get(stage, {}).items():
            name = ItemName(item)
            running[name] = max(running.get(name, 0), qty)
        table[stage] = RewardBundle(items=dict(running))
    return table


STAGE_REQUIREMENTS: Dict[GrowthStage, RewardBundle] = _cumulative(_AUTHORED_REQUIREMENTS)


class StageProgress(BaseModel):
    """Requirement vs. holdings for one stage."""

    model_config = ConfigDict(frozen=True)

    stage: GrowthStage
    required: Dict[str, int]
    collected: Dict[str, int]
    is_complete: bool


def evaluate_stage(
    inventory: RewardBundle,
    requirements: Optional[Mapping[GrowthStage, RewardBundle]] = None,
) -> GrowthStage:
    """Return the highest stage reached by walking the table until a threshold fails."""
    table = requirements if requirements is not None else STAGE_REQUIREMENTS
    reached = STAGE_ORDER[0]
    for stage in STAGE_ORDER:
        if not inventory.covers(table[stage]):
            break
        reached = stage
    return reached


def next_stage(stage: GrowthStage) -> Optional[GrowthStage]:
    position = stage.rank + 1
    return STAGE_ORDER[position] if position < len(STAGE_ORDER) else None


def next_stage_shortfall(inventory: RewardBundle) -> Optional[RewardBundle]:
    """Items still missing for the stage after the current one. None at the final stage."""
    upcoming = next_stage(evaluate_stage(inventory))
    if upcoming is None:
        return None
    return inventory.missing(STAGE_REQUIREMENTS[upcoming])


def stage_progress(inventory: RewardBundle) -> List[StageProgress]:
    """Per-stage breakdown for the tree view."""
    rows = []
    for stage in STAGE_ORDER:
        required = STAGE_REQUIREMENTS[stage]
        rows.append(
            StageProgress(
                stage=stage,
                required=required.as_dict(),
                collected={name.value: min(inventory.quantity(name), qty) for name, qty in required.sorted_items()},
                is_complete=inventory.covers(required),
            )
        )
    return rows
