"""
Kernel Data Models

SQLAlchemy models for persisted learner progress.
"""

from ecolearn.kernel.models.base import Base, TimestampMixin, generate_uuid
from ecolearn.kernel.models.ledger import CompletionRecord, LearnerLedger

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # Ledger
    "LearnerLedger",
    "CompletionRecord",
]
