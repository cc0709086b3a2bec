"""Store Access: async engine, per-request sessions and the readiness ping.

Invariants:
    - A session that sees an exception is rolled back before it is closed
    - SQLAlchemy errors escaping a request become DatabaseError; RunXError
      (including order StageFailure) passes through untouched
    - Sessions never expire loaded rows on commit (async code cannot lazy-load)

Design Decisions:
    - Pool sizing only applies to server databases; SQLite keeps its own pool
    - The manager is a module global set by the lifespan so the readiness probe
      and get_db see the same engine
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from runx.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Error de integridad en base de datos", "commit"),
    (OperationalError, "Error de conexión a base de datos", "execute"),
    (DBAPIError, "Error del driver de base de datos", "query"),
    (SQLAlchemyError, "Error de base de datos", "unknown"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    raise TypeError(f"not a SQLAlchemy error: {exc!r}")


class DatabaseSessionManager:

    def __init__(
        self, database_url: str, pool_size: int = 10, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options |= {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": 1800,
            }
        self.engine = create_async_engine(database_url, **options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                error = to_database_error(e)
                logger.error(
                    f"Store error during {error.operation}: {e}",
                    extra={"error_code": error.code},
                )
                raise error from e
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """True when the store answers SELECT 1."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except DatabaseError:
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **pool_options) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **pool_options)
    logger.info(f"Store engine ready ({db_manager.engine.dialect.name})")
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
