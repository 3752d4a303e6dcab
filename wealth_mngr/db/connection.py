"""
Database connection management.

Handles:
- Environment-based configuration (SQLite by default, any SQLAlchemy URL otherwise)
- Connection pooling for server databases
- Context managers for transactions
- The FastAPI session dependency
"""

import logging
import os
from contextlib import contextmanager
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

# Load environment variables from .env file
load_dotenv()

# Import models to ensure they're registered with Base
from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///wealth_mngr.db"


class DatabaseConfig:
    """Database configuration from environment variables."""

    def __init__(self):
        self.database_url = (
            os.getenv("WEALTH_MNGR_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
        )
        self.echo = os.getenv("SQL_ECHO", "false").lower() == "true"

        # Log masked URL for debugging (hide password)
        if '@' in self.database_url:
            logger.info(f"Database: Connecting to {self.database_url.split('@')[1]}")
        else:
            logger.info(f"Database: Using {self.database_url}")

        # Connection pooling settings (server databases only)
        self.pool_size = int(os.getenv("DB_POOL_SIZE", "5"))
        self.max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "10"))
        self.pool_timeout = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.pool_recycle = int(os.getenv("DB_POOL_RECYCLE", "3600"))  # 1 hour

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


class DatabaseManager:
    """
    Singleton database manager for connection pooling.

    Usage:
        db_manager = DatabaseManager()
        with db_manager.session() as session:
            calculations = session.query(SavedCalculation).all()
    """

    _instance: Optional["DatabaseManager"] = None
    _engine: Optional[Engine] = None
    _session_factory: Optional[sessionmaker] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._engine is None:
            self._initialize_engine()

    def _initialize_engine(self):
        """Initialize SQLAlchemy engine."""
        config = DatabaseConfig()

        if config.is_sqlite:
            # SQLite connections are shared across FastAPI worker threads
            self._engine = create_engine(
                config.database_url,
                connect_args={"check_same_thread": False},
                echo=config.echo,
            )
            logger.info("Database: Using SQLite")
        else:
            self._engine = create_engine(
                config.database_url,
                pool_size=config.pool_size,
                max_overflow=config.max_overflow,
                pool_timeout=config.pool_timeout,
                pool_recycle=config.pool_recycle,
                poolclass=QueuePool,
                echo=config.echo,
            )
            logger.info(f"Database: Using QueuePool (pool_size={config.pool_size}, "
                        f"max_overflow={config.max_overflow})")

        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with automatic commit/rollback.

        Usage:
            with db_manager.session() as session:
                calculation = session.get(SavedCalculation, calc_id)
                calculation.name = "Retirement"
                # Automatically commits on success, rolls back on exception
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """
        Get a new session without context manager.

        Warning: Caller is responsible for closing the session.
        Prefer using session() context manager instead.
        """
        return self._session_factory()

    def create_all(self):
        """Create all tables in the database."""
        Base.metadata.create_all(self._engine)
        logger.info("Database: All tables created")

    @property
    def engine(self) -> Engine:
        return self._engine


# Convenience functions

def get_db_manager() -> DatabaseManager:
    """Get or create the database manager singleton."""
    return DatabaseManager()


@contextmanager
def db_session() -> Generator[Session, None, None]:
    """
    Convenience context manager for database sessions.

    Usage:
        from wealth_mngr.db.connection import db_session

        with db_session() as session:
            calculations = session.query(SavedCalculation).all()
    """
    db_manager = get_db_manager()
    with db_manager.session() as session:
        yield session


def init_database():
    """
    Initialize database schema.

    Safe to call on every start-up; existing tables are left alone.
    """
    db_manager = get_db_manager()
    db_manager.create_all()


def get_db_session() -> Generator[Session, None, None]:
    """
    FastAPI dependency for getting database sessions.

    Usage in FastAPI routes:
        @app.get("/api/saved-calculations")
        def list_calculations(db: Session = Depends(get_db_session)):
            return get_all_saved_calculations(db)
    """
    db_manager = get_db_manager()
    session = db_manager.get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """
    Get the SQLAlchemy engine instance.

    Returns:
        Engine instance
    """
    return get_db_manager().engine
