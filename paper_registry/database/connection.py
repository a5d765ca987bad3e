"""Database connection management."""
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from paper_registry.utils.config import settings
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseConnection:
    """
    Engine and session factory for the paper store and ranking table.

    Built once by the application entry point and passed to the repositories'
    callers; there is no module-level instance.

    Args:
        database_url: SQLAlchemy URL. Defaults to settings.database_url_resolved.
        engine: Pre-built engine (takes precedence over database_url).
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            database_url = database_url or settings.database_url_resolved
            engine = self._create_engine(database_url)
        self.engine = engine
        self._SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @staticmethod
    def _create_engine(database_url: str) -> Engine:
        """Create engine; pool sizing only applies to server databases."""
        logger.debug("Initializing DatabaseConnection: %s", database_url.split("@")[-1])

        if database_url.startswith("sqlite"):
            return create_engine(database_url)

        return create_engine(
            database_url,
            pool_size=settings.postgres_pool_size,
            max_overflow=settings.postgres_max_overflow,
            pool_pre_ping=True,
        )

    @contextmanager
    def get_session(self):
        """Get database session with automatic commit/rollback."""
        session = self._SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
