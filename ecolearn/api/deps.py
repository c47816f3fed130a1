"""
FastAPI dependencies for database sessions, content and progression access.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecolearn.config import get_settings
from ecolearn.database import async_session_maker
from ecolearn.engines.progression.catalog import Catalog, default_catalog, load_catalog
from ecolearn.engines.progression.progress_service import ProgressService
from ecolearn.engines.progression.unlock_resolver import BypassMode
from ecolearn.logging_config import get_logger, profile_id_var

logger = get_logger(__name__)


async def get_db() -> AsyncSession:
    """Dependency that yields database sessions."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db)]


@lru_cache
def _catalog_from_file(path: str) -> Catalog:
    return load_catalog(path)


def get_catalog() -> Catalog:
    """Content catalog: the configured JSON file, or the bundled content."""
    path = get_settings().catalog_path
    if path:
        return _catalog_from_file(path)
    return default_catalog()


CatalogDep = Annotated[Catalog, Depends(get_catalog)]


async def get_bypass(
    bypass: Annotated[bool, Query(description="Skip unlock checks (developer mode only)")] = False,
) -> BypassMode:
    """Translate ?bypass=true into BypassMode, refusing it outside developer mode."""
    if not bypass:
        return BypassMode.OFF
    if not get_settings().developer_mode_enabled:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Developer mode is disabled",
        )
    logger.warning("Developer bypass requested")
    return BypassMode.ON


Bypass = Annotated[BypassMode, Depends(get_bypass)]


async def bind_profile(
    profile_id: Annotated[str, Path(min_length=1, max_length=128)],
) -> str:
    """Validate the path profile id and attach it to log records for this request."""
    profile_id_var.set(profile_id)
    return profile_id


ProfileId = Annotated[str, Depends(bind_profile)]


async def get_progress_service(db: DbSession, catalog: CatalogDep) -> ProgressService:
    return ProgressService(db, catalog)


ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]


def get_request_id(request: Request) -> Optional[str]:
    """Get request correlation ID (set by RequestIdMiddleware)."""
    return getattr(request.state, "request_id", None)
