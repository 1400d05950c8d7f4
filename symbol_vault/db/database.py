"""Database engine and session management.

The engine (and its connection pool) is created lazily on first use, shared by
every request handler, and disposed by `dispose_engine()` at shutdown.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from symbol_vault.config import get_settings
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)

# Global engine instance
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Get or create the global database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(
            settings.get_active_database_url(),
            pool_size=5,  # Number of persistent connections
            max_overflow=5,  # Maximum overflow connections
            pool_timeout=30,  # Timeout waiting for connection
            pool_recycle=1800,  # Recycle connections after 30 minutes
            pool_pre_ping=True,  # Test connections before use
            echo=False,
        )
        logger.info("Created database engine", operation="db_engine_init")
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the global session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=get_engine()
        )
        logger.info("Created session factory", operation="db_session_factory_init")
    return _SessionLocal


def dispose_engine() -> None:
    """Close every pooled connection and forget the engine."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
        logger.info("Disposed database engine", operation="db_engine_dispose")
    _engine = None
    _SessionLocal = None


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.
    Ensures proper cleanup after use; an uncommitted transaction is rolled back
    when the session closes.
    """
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
