import logging
from collections.abc import Generator

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from weekplanner_api.config import settings

logger = logging.getLogger(__name__)

POOL_RECYCLE_DEFAULT = 1800


class Database:
    """Database connection manager"""

    def __init__(self, database_url: str | None = None):
        self._database_url = database_url
        self._engine: Engine | None = None

    @property
    def database_url(self) -> str:
        return self._database_url or settings.database_url

    def get_engine(self) -> Engine:
        """Get SQLModel engine for database operations"""
        if self._engine is None:
            database_url = self.database_url

            if database_url.startswith("sqlite"):
                # SQLite connections are shared with the threadpool FastAPI
                # runs sync dependencies on
                self._engine = create_engine(
                    database_url,
                    echo=settings.debug,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    database_url,
                    echo=settings.debug,
                    pool_pre_ping=True,
                    pool_recycle=POOL_RECYCLE_DEFAULT,
                    pool_reset_on_return="commit",
                )

            logger.info("✅ SQLModel engine initialized")
        return self._engine

    def create_db_and_tables(self) -> None:
        """Create all tables known to SQLModel metadata"""
        # Imported for its side effect of registering the table models
        from weekplanner_api import models  # noqa: F401

        SQLModel.metadata.create_all(self.get_engine())
        logger.info("✅ Database tables ready")

    def get_session(self) -> Generator[Session, None, None]:
        """Get database session"""
        engine = self.get_engine()
        with Session(engine) as session:
            yield session

    def health_check(self) -> bool:
        """Check database connection health"""
        try:
            with self.get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"❌ Database health check failed: {e}")
            return False


# Global database instance
db = Database()


# Dependency for FastAPI
def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency to get database session"""
    yield from db.get_session()
