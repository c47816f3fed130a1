"""
Rollup Aggregator - completion counts and percentages per group.

A group is completed when every leaf unit under it is completed and, when the
group (or any nested group) closes with a boss, that boss is completed too.
An empty group without a boss is never completed.
"""

from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, Field

from ecolearn.engines.progression.catalog import Catalog
from ecolearn.engines.progression.rounding import percentage

if TYPE_CHECKING:
    from ecolearn.engines.progression.ledger import ProgressLedger


class GroupProgress(BaseModel):
    """Progress summary for one group."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    completed_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    percent: int = Field(ge=0, le=100)
    is_completed: bool
    boss_completed: bool = True


def group_progress(group_id: str, ledger: "ProgressLedger", catalog: Catalog) -> GroupProgress:
    leaves = catalog.leaf_unit_ids(group_id)
    completed = ledger.completed_ids
    done = sum(1 for unit_id in leaves if unit_id in completed)
    bosses = catalog.boss_ids(group_id)
    bosses_done = all(boss_id in completed for boss_id in bosses)

    if leaves:
        is_completed = done == len(leaves) and bosses_done
    else:
        is_completed = bool(bosses) and bosses_done

    return GroupProgress(
        group_id=group_id,
        completed_count=done,
        total_count=len(leaves),
        percent=percentage(done, len(leaves)),
        is_completed=is_completed,
        boss_completed=bosses_done,
    )


def is_group_completed(group_id: str, ledger: "ProgressLedger", catalog: Catalog) -> bool:
    return group_progress(group_id, ledger, catalog).is_completed


def all_group_progress(ledger: "ProgressLedger", catalog: Catalog) -> List[GroupProgress]:
    """Every group, top-level groups first and nested groups after their parent."""
    rows: List[GroupProgress] = []

    def walk(group_id: str) -> None:
        rows.append(group_progress(group_id, ledger, catalog))
        for child_id in catalog.get_group(group_id).children:
            if catalog.is_group(child_id):
                walk(child_id)

    for group in catalog.top_level_groups():
        walk(group.id)
    return rows
