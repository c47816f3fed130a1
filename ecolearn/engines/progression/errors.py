"""
Progression errors.

All of these are local, recoverable conditions. Callers decide how to surface
them; the HTTP layer maps each one to a status code in ecolearn.main.
"""

from typing import List, Optional


class ProgressionError(Exception):
    """Base class for progression engine errors."""

    code = "progression_error"


class NotFound(ProgressionError, KeyError):
    """Unknown unit or group id. A programmer error in most call sites."""

    code = "not_found"

    def __init__(self, target_id: str, what: str = "unit or group"):
        self.target_id = target_id
        self.what = what
        super().__init__(f"Unknown {what}: {target_id!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class NotUnlocked(ProgressionError):
    """Completion attempted on a unit whose prerequisites are not met."""

    code = "not_unlocked"

    def __init__(self, unit_id: str, unmet: Optional[List[str]] = None):
        self.unit_id = unit_id
        self.unmet = list(unmet or [])
        detail = f"Unit {unit_id!r} is locked"
        if self.unmet:
            detail += f" (requires: {', '.join(self.unmet)})"
        super().__init__(detail)


class InvalidOutcome(ProgressionError, ValueError):
    """Malformed completion payload. No grant is produced."""

    code = "invalid_outcome"

    def __init__(self, unit_id: str, reason: str):
        self.unit_id = unit_id
        self.reason = reason
        super().__init__(f"Invalid outcome for {unit_id!r}: {reason}")


class CatalogError(ProgressionError, ValueError):
    """Catalog definitions violate a structural rule (duplicate ids, cycles...)."""

    code = "catalog_error"


class LedgerConflict(ProgressionError):
    """A concurrent writer persisted a newer ledger version first."""

    code = "ledger_conflict"

    def __init__(self, profile_id: str, expected_version: int):
        self.profile_id = profile_id
        self.expected_version = expected_version
        super().__init__(
            f"Ledger for profile {profile_id} changed concurrently (expected version {expected_version})"
        )
