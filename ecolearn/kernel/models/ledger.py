"""
Ledger models - persisted progress snapshots and the completion audit trail.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ecolearn.kernel.models.base import Base, TimestampMixin, generate_uuid


class LearnerLedger(Base, TimestampMixin):
    """
    Current progress snapshot for one profile.

    snapshot holds ProgressLedger.to_snapshot(). version mirrors the snapshot
    version and is the compare-and-swap token for writers.
    """

    __tablename__ = "learner_ledgers"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    profile_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)

    snapshot: Mapped[Dict[str, Any]] = mapped_column(nullable=False, default=dict)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class CompletionRecord(Base):
    """Append-only record of one granted completion."""

    __tablename__ = "completion_records"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    profile_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    unit_id: Mapped[str] = mapped_column(String(128), nullable=False)
    unit_kind: Mapped[str] = mapped_column(String(50), nullable=False)

    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    items: Mapped[Dict[str, Any]] = mapped_column(nullable=False, default=dict)
    percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ledger_version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("profile_id", "unit_id", name="uq_completion_records_profile_unit"),
        Index("ix_completion_records_profile_kind", "profile_id", "unit_kind"),
    )
