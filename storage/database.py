"""
Storage - Database.

============================================================
RESPONSIBILITY
============================================================
Manages the SQLAlchemy engine and sessions backing the SQL
event and baseline stores.

- Engine creation from DATABASE_URL
- Session factory and transaction scope
- Table creation and connection checks

============================================================
DATABASE URL
============================================================
DATABASE_URL (a .env file is honored). Defaults to a local
SQLite file. "sqlite://" and ":memory:" URLs use a single
shared connection, which the in-memory test databases need.

============================================================
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.exceptions import StoreUnavailableError
from storage.models import Base


logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./waste_intelligence.db"


def get_database_url() -> str:
    """Get database URL from environment."""
    load_dotenv()
    url = os.getenv("DATABASE_URL")
    if not url:
        url = DEFAULT_DATABASE_URL
        logger.warning(f"DATABASE_URL not set, using default: {url}")
    return url


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url in ("sqlite://", "sqlite:///") or ":memory:" in url)


def create_database_engine(url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        url: Database URL; DATABASE_URL when None
        echo: Log SQL statements

    Returns:
        SQLAlchemy Engine
    """
    database_url = url or get_database_url()
    logger.info(f"Creating database engine for: {database_url.split('@')[-1]}")

    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(database_url, **kwargs)

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        logger.debug("Database connection established")

    return engine


class Database:
    """
    Engine, session factory and transaction scope.

    SQLite connections are used from worker threads, so access
    is serialized with a lock for SQLite URLs.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = False):
        self._url = url or get_database_url()
        self._engine = create_database_engine(self._url, echo=echo)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        self._lock = threading.RLock() if self._url.startswith("sqlite") else None

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """
        Get a new database session.

        Caller is responsible for committing/closing.
        Prefer transaction_scope().
        """
        return self._session_factory()

    @contextmanager
    def transaction_scope(self) -> Generator[Session, None, None]:
        """
        Explicit transaction boundary.

        Commits only if no exception occurs; rolls back on any
        exception. Database errors are raised as
        StoreUnavailableError.
        """
        if self._lock is not None:
            self._lock.acquire()
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database transaction failed, rolling back: {e}")
            session.rollback()
            raise StoreUnavailableError(
                f"Transaction failed: {e}",
                store="database",
                operation="commit",
                cause=e,
            ) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            if self._lock is not None:
                self._lock.release()

    def create_all_tables(self) -> None:
        """Create every table defined in storage.models."""
        try:
            Base.metadata.create_all(bind=self._engine)
            logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise StoreUnavailableError(
                f"Table creation failed: {e}",
                store="database",
                operation="create_all",
                cause=e,
            ) from e

    def verify_connection(self) -> bool:
        """
        Verify the database answers a trivial query.

        Raises:
            StoreUnavailableError: Connection failed
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return True
        except OperationalError as e:
            logger.error(f"Database connection failed: {e}")
            raise StoreUnavailableError(
                f"Cannot connect to database: {e}",
                store="database",
                operation="connect",
                cause=e,
            ) from e

    def dispose(self) -> None:
        self._engine.dispose()


def initialize_database(url: Optional[str] = None) -> Database:
    """Connect, create tables and return the ready Database."""
    database = Database(url)
    database.verify_connection()
    database.create_all_tables()
    logger.info("Database initialization complete")
    return database
