"""
Database connection utilities
"""

import logging
import os
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Database URL from environment variable
DEFAULT_DATABASE_URL = "sqlite:///./chart_engine.db"


def get_database_url() -> str:
    return os.getenv("CHART_ENGINE_DATABASE_URL", DEFAULT_DATABASE_URL)


def create_db_engine(url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the response store.

    In-memory SQLite uses StaticPool so every session shares one connection
    (and therefore one database), including sessions opened in worker threads.
    """
    url = url or get_database_url()
    if url.startswith("sqlite"):
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo,
            )
        return create_engine(url, connect_args={"check_same_thread": False}, echo=echo)

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20,
        echo=echo,
    )


_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_db_engine() -> Engine:
    """Get the process wide engine, created on first use"""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Session factory bound to ``engine`` (default: the process wide engine)"""
    global _session_factory
    if engine is not None:
        return sessionmaker(autocommit=False, autoflush=False, bind=engine)
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_db_engine())
    return _session_factory


def get_db_session() -> Generator[Session, None, None]:
    """
    Generator that provides a database session

    Usage:
        for db in get_db_session():
            rows = db.query(PillarResponseRow).all()
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Optional[Engine] = None):
    """
    Initialize the database by creating all tables
    """
    from database.orm_models import Base, PillarResponseRow  # noqa: F401

    engine = engine or get_db_engine()
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise
