"""
Kernel Layer

Persistence foundations for the progression service:
- Learner ledgers (one current snapshot per profile, versioned)
- Completion records (append-only audit of every grant)

Invariants:
- Snapshots are replaced whole, guarded by a version compare-and-swap
- Completion records are never updated or deleted
"""

from ecolearn.kernel.models import CompletionRecord, LearnerLedger

__all__ = [
    "LearnerLedger",
    "CompletionRecord",
]
