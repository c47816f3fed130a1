"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.

Ledger snapshots are small JSON documents; SQLite is the default store and
PostgreSQL (asyncpg) is supported for multi-process deployments.
"""

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from ecolearn.config import get_settings
from ecolearn.logging_config import get_logger

logger = get_logger(__name__)

settings = get_settings()

# Determine engine options based on database type
is_sqlite = settings.database_url.startswith("sqlite")

if is_sqlite:
    # SQLite with NullPool: every session gets its own connection, avoiding
    # "cannot commit transaction – SQL statements in progress" from StaticPool.
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        """Enable WAL mode + foreign keys on every new SQLite connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()
else:
    # PostgreSQL settings with connection pooling
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Initialize database tables."""
    # Import Base from kernel models to ensure all models are registered
    from ecolearn.kernel.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.debug("Tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()


async def check_db() -> bool:
    """Round-trip a trivial query. False when the database cannot be reached."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Database health check failed")
        return False
    return True
