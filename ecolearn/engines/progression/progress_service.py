"""
Progress Service - loads, advances and persists learner ledgers (DB-backed).

The pure engine never saves. This service wraps it for the HTTP layer:
load the snapshot, apply complete_unit, then write the new snapshot with a
compare-and-swap on the stored version. Within one process a per-profile
asyncio.Lock serializes writers and is dropped once idle; across processes
the version check turns a lost race into LedgerConflict.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ecolearn.engines.progression.catalog import Catalog
from ecolearn.engines.progression.errors import LedgerConflict
from ecolearn.engines.progression.ledger import (
    CompletionResult,
    CompletionStatus,
    ProgressLedger,
    complete_unit,
)
from ecolearn.engines.progression.reward_calculator import Outcome
from ecolearn.engines.progression.unlock_resolver import BypassMode
from ecolearn.kernel.models.ledger import CompletionRecord, LearnerLedger
from ecolearn.logging_config import get_logger

logger = get_logger(__name__)


class ProgressService:
    """Ledger persistence around the pure progression engine."""

    _profile_locks: Dict[str, asyncio.Lock] = {}
    _lock_holders: Dict[str, int] = {}

    def __init__(self, session: AsyncSession, catalog: Catalog):
        self.session = session
        self.catalog = catalog

    @classmethod
    @asynccontextmanager
    async def _profile_lock(cls, profile_id: str) -> AsyncIterator[None]:
        """Per-profile writer lock, dropped once nothing holds or awaits it."""
        lock = cls._profile_locks.setdefault(profile_id, asyncio.Lock())
        cls._lock_holders[profile_id] = cls._lock_holders.get(profile_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            cls._lock_holders[profile_id] -= 1
            if not cls._lock_holders[profile_id]:
                del cls._lock_holders[profile_id]
                del cls._profile_locks[profile_id]

    async def _load_row(self, profile_id: str) -> Optional[LearnerLedger]:
        q = select(LearnerLedger).where(LearnerLedger.profile_id == profile_id)
        result = await self.session.execute(q)
        return result.scalar_one_or_none()

    async def _get_or_create_row(self, profile_id: str) -> LearnerLedger:
        row = await self._load_row(profile_id)
        if row:
            return row
        empty = ProgressLedger.empty()
        row = LearnerLedger(
            profile_id=profile_id,
            snapshot=empty.to_snapshot(),
            version=empty.version,
            total_points=empty.total_points,
        )
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError:
            # Another writer created the row first
            await self.session.rollback()
            row = await self._load_row(profile_id)
            if row is None:
                raise
            return row
        logger.info("Ledger created")
        return row

    async def get_ledger(self, profile_id: str) -> ProgressLedger:
        """Get the profile's ledger, creating an empty one on first use."""
        row = await self._get_or_create_row(profile_id)
        return ProgressLedger.from_snapshot(row.snapshot)

    async def complete_unit(
        self,
        profile_id: str,
        unit_id: str,
        outcome: Optional[Outcome] = None,
        bypass: BypassMode = BypassMode.OFF,
        today: Optional[date] = None,
    ) -> CompletionResult:
        """
        Apply one completion and persist the new snapshot.

        Raises:
            NotFound, NotUnlocked, InvalidOutcome: from the engine; nothing is written
            LedgerConflict: the stored version moved on while this completion was applied
        """
        async with self._profile_lock(profile_id):
            row = await self._get_or_create_row(profile_id)
            ledger = ProgressLedger.from_snapshot(row.snapshot)
            result = complete_unit(
                ledger,
                unit_id,
                outcome,
                catalog=self.catalog,
                bypass=bypass,
                today=today or date.today(),
            )
            if result.status == CompletionStatus.GRANTED:
                await self._save(profile_id, expected_version=ledger.version, result=result)
            return result

    async def _save(self, profile_id: str, expected_version: int, result: CompletionResult) -> None:
        updated = result.ledger
        stmt = (
            update(LearnerLedger)
            .where(
                LearnerLedger.profile_id == profile_id,
                LearnerLedger.version == expected_version,
            )
            .values(
                snapshot=updated.to_snapshot(),
                version=updated.version,
                total_points=updated.total_points,
            )
            .execution_options(synchronize_session="fetch")
        )
        outcome = await self.session.execute(stmt)
        if outcome.rowcount != 1:
            logger.warning(
                "Ledger write lost a race",
                extra={"expected_version": expected_version},
            )
            raise LedgerConflict(profile_id, expected_version)

        grant = result.grant
        self.session.add(
            CompletionRecord(
                profile_id=profile_id,
                unit_id=grant.unit_id,
                unit_kind=grant.kind.value,
                points=grant.points,
                items=grant.items.as_dict(),
                percentage=grant.percentage,
                ledger_version=updated.version,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise LedgerConflict(profile_id, expected_version) from exc

    async def history(self, profile_id: str) -> List[CompletionRecord]:
        """Completion records for a profile, oldest first."""
        q = (
            select(CompletionRecord)
            .where(CompletionRecord.profile_id == profile_id)
            .order_by(CompletionRecord.ledger_version)
        )
        result = await self.session.execute(q)
        return list(result.scalars().all())
