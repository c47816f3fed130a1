"""
Unlock Resolver - decides whether a unit or group is accessible.

A target is accessible when every prerequisite has been completed. Completion
is checked against the union of all per-kind completed sets, so a quiz may
depend on a lesson and a boss on a game. A prerequisite naming a group is met
once that group is completed.

Units may additionally require a minimum learner level or a minimum
cumulative inventory. A unit carrying both a level gate and a completed-count
gate opens when either one is met.

Bypass is an explicit argument; the resolver never consults ambient state.
"""

from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

from ecolearn.engines.progression.catalog import Catalog, Unit
from ecolearn.engines.progression.rollup import is_group_completed
from ecolearn.logging_config import get_logger

if TYPE_CHECKING:
    from ecolearn.engines.progression.ledger import ProgressLedger

logger = get_logger(__name__)


class BypassMode(str, Enum):
    """Developer escape hatch for access checks."""

    OFF = "off"
    ON = "on"


class UnlockResolver:
    """Access decisions over one catalog."""

    LEVEL_REQUIREMENT = "level:{level}"
    ITEM_REQUIREMENT = "item:{item}:{quantity}"
    COMPLETED_REQUIREMENT = "completed:{kind}:{count}"

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def _prerequisite_met(self, prerequisite: str, ledger: "ProgressLedger") -> bool:
        if self.catalog.is_group(prerequisite):
            return is_group_completed(prerequisite, ledger, self.catalog)
        return ledger.is_completed(prerequisite)

    def _unmet_gates(self, unit: Unit, ledger: "ProgressLedger") -> List[str]:
        gates: List[Tuple[bool, str]] = []
        if unit.required_level is not None:
            gates.append(
                (ledger.level >= unit.required_level, self.LEVEL_REQUIREMENT.format(level=unit.required_level))
            )
        if unit.required_completed is not None:
            gate = unit.required_completed
            gates.append(
                (
                    len(ledger.completed_of(gate.kind)) >= gate.count,
                    self.COMPLETED_REQUIREMENT.format(kind=gate.kind.value, count=gate.count),
                )
            )
        if any(met for met, _ in gates):
            return []
        return [requirement for _, requirement in gates]

    def unmet_prerequisites(self, target_id: str, ledger: "ProgressLedger") -> List[str]:
        """
        Ordered list of what still blocks the target.

        Prerequisite ids come first in declared order, followed by
        "level:N", "completed:kind:N" and "item:name:qty" entries for unit
        gates. Level and completed-count gates are alternatives, so both are
        listed only when neither is met.
        """
        node = self.catalog.get(target_id)
        unmet = [p for p in node.prerequisites if not self._prerequisite_met(p, ledger)]

        if isinstance(node, Unit):
            unmet.extend(self._unmet_gates(node, ledger))
            shortfall = ledger.inventory.missing(node.required_items)
            for item, _ in shortfall.sorted_items():
                unmet.append(
                    self.ITEM_REQUIREMENT.format(item=item.value, quantity=node.required_items.quantity(item))
                )
        return unmet

    def can_access(
        self,
        target_id: str,
        ledger: "ProgressLedger",
        bypass: BypassMode = BypassMode.OFF,
    ) -> bool:
        """
        Check whether the target may be started.

        Raises:
            NotFound: unknown target id (also under bypass)
        """
        self.catalog.get(target_id)
        if bypass == BypassMode.ON:
            logger.debug("Access bypassed", extra={"target_id": target_id})
            return True
        unmet = self.unmet_prerequisites(target_id, ledger)
        if unmet:
            logger.debug("Access denied", extra={"target_id": target_id, "unmet": unmet})
            return False
        return True

    def accessible_children(
        self,
        group_id: str,
        ledger: "ProgressLedger",
        bypass: BypassMode = BypassMode.OFF,
    ) -> List[str]:
        """Direct children (and the terminal boss) that are accessible right now, in display order."""
        return [
            child_id
            for child_id in self.catalog.child_ids(group_id)
            if self.can_access(child_id, ledger, bypass)
        ]
