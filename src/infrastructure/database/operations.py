"""
Database engine, session and schema management
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.infrastructure.configuration.config import get_config
from src.infrastructure.database.models import Base
from src.infrastructure.logging.logging_config import PerformanceLogger
from src.infrastructure.utilities.constants import (
    DatabaseSettings,
    PerformanceSettings,
    RetrySettings,
)
from src.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Database manager with slow-query monitoring"""

    def __init__(self, config: Optional[Any] = None, database_url: Optional[str] = None):
        """Initialize database manager with configuration"""
        self.config = config or get_config()
        self.database_url = database_url or self.config.database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        database_url = self.database_url

        if database_url.startswith("sqlite"):
            self._ensure_sqlite_directory(database_url)
            # A single shared connection keeps in-memory databases alive across sessions
            engine_kwargs: Dict[str, Any] = {
                "poolclass": StaticPool,
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": RetrySettings.CONNECTION_TIMEOUT_SECONDS,
                },
            }
        else:
            if self.config.environment == "production":
                pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
                max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
            else:
                pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
                max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": DatabaseSettings.POOL_RECYCLE_SECONDS,
                "pool_pre_ping": True,
            }

        engine = create_engine(database_url, **engine_kwargs)
        self._setup_engine_events(engine)
        return engine

    @staticmethod
    def _ensure_sqlite_directory(database_url: str) -> None:
        path = database_url.split(":///", 1)[-1]
        if path and path != ":memory:" and not database_url.endswith("://"):
            Path(path).parent.mkdir(parents=True, exist_ok=True)

    def _setup_engine_events(self, engine: Engine) -> None:
        """Setup SQLAlchemy events for slow query logging"""

        @event.listens_for(engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            context._query_start_time = time.perf_counter()

        @event.listens_for(engine, "after_cursor_execute")
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            total_time_ms = (time.perf_counter() - context._query_start_time) * 1000

            if total_time_ms > PerformanceSettings.SLOW_QUERY_THRESHOLD_MS:
                self.logger.warning(
                    "Slow query detected",
                    extra={
                        "query_time_ms": total_time_ms,
                        "statement": statement[:200] + "..." if len(statement) > 200 else statement,
                    }
                )

    def get_session_factory(self) -> sessionmaker:
        """Get session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(),
                expire_on_commit=False
            )
        return self._session_factory

    def get_session(self) -> Session:
        """Get database session"""
        return self.get_session_factory()()

    def create_tables(self) -> None:
        """Create all database tables"""
        try:
            with PerformanceLogger("create_tables", self.logger):
                Base.metadata.create_all(self.get_engine())
                self.logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            self.logger.error("Failed to create database tables: %s", e, exc_info=True)
            raise DatabaseError(f"Failed to create database tables: {e}", "create_tables") from e

    def drop_tables(self) -> None:
        """Drop all database tables"""
        try:
            with PerformanceLogger("drop_tables", self.logger):
                Base.metadata.drop_all(self.get_engine())
                self.logger.info("Database tables dropped successfully")
        except SQLAlchemyError as e:
            self.logger.error("Failed to drop database tables: %s", e, exc_info=True)
            raise DatabaseError(f"Failed to drop database tables: {e}", "drop_tables") from e

    def health_check(self) -> Dict[str, Any]:
        """Perform database health check"""
        try:
            with self.get_session() as session:
                result = session.execute(text("SELECT 1")).scalar()
            if result == 1:
                return {"status": "healthy", "environment": self.config.environment}
            return {
                "status": "unhealthy",
                "error": "Health check query returned unexpected result",
            }
        except SQLAlchemyError as e:
            self.logger.error("Database health check failed: %s", e, exc_info=True)
            return {"status": "unhealthy", "error": str(e)}

    def close(self) -> None:
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
        self._session_factory = None
        self.logger.info("Database connections closed")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """Replace the global database manager (tests, alternative URLs)"""
    global _db_manager
    _db_manager = manager


def init_db(manager: Optional[DatabaseManager] = None) -> DatabaseManager:
    """Initialize database tables"""
    manager = manager or get_db_manager()
    manager.create_tables()
    return manager
