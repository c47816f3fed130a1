"""
Pydantic schemas for API request/response validation.
"""

from ecolearn.schemas.catalog import (
    GroupDetailResponse,
    GroupResponse,
    UnitResponse,
)
from ecolearn.schemas.common import (
    ErrorResponse,
    HealthResponse,
)
from ecolearn.schemas.progression import (
    AccessibleChildrenResponse,
    AccessResponse,
    CompleteUnitRequest,
    CompletionHistoryItem,
    CompletionResponse,
    GrantResponse,
    GroupProgressResponse,
    LedgerResponse,
    StageResponse,
    StageRow,
)

__all__ = [
    # Catalog
    "UnitResponse",
    "GroupResponse",
    "GroupDetailResponse",
    # Progression
    "CompleteUnitRequest",
    "GrantResponse",
    "LedgerResponse",
    "CompletionResponse",
    "AccessResponse",
    "AccessibleChildrenResponse",
    "GroupProgressResponse",
    "StageRow",
    "StageResponse",
    "CompletionHistoryItem",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
