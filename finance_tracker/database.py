"""
Database handle and SQLAlchemy session management.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool, StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _is_eventlet() -> bool:
    # Gunicorn eventlet workers (production). Render sets PORT.
    return (
        os.environ.get('GUNICORN_CMD_ARGS') is not None or
        os.environ.get('SERVER_SOFTWARE', '').startswith('gunicorn') or
        os.environ.get('PORT') is not None
    )


def build_engine(database_url: str) -> Engine:
    """
    Create the engine with a pool suited to the runtime.

    - In-memory SQLite: StaticPool so every session sees the same database.
    - PostgreSQL under eventlet: NullPool, since QueuePool locks do not play
      well with green threads.
    - Everything else: QueuePool with pre-ping and recycling.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Required for SQLite when used across multiple threads.
        connect_args["check_same_thread"] = False
    if database_url.startswith("postgresql"):
        connect_args.setdefault("connect_timeout", 10)

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            poolclass=StaticPool,
            future=True,
            echo=False,
            connect_args=connect_args,
        )

    if _is_eventlet() and database_url.startswith("postgresql"):
        # NullPool doesn't support pool_timeout or pool_recycle
        return create_engine(
            database_url,
            poolclass=NullPool,
            pool_pre_ping=True,
            future=True,
            echo=False,
            connect_args=connect_args,
        )

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_pre_ping=True,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_timeout=10,    # Timeout when getting connection from pool
        future=True,
        echo=False,
        connect_args=connect_args,
    )


class Database:
    """
    Storage handle owning the engine and session factory.

    Opened by the application factory and disposed on shutdown.
    """

    def __init__(self, database_url: str):
        self.url = database_url
        self.engine = build_engine(database_url)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
        self._disposed = False

    def init_db(self) -> None:
        """
        Import models and create tables. Should be invoked once during startup.
        """
        try:
            from finance_tracker import models  # noqa: F401  (side-effect import)
            Base.metadata.create_all(bind=self.engine)
        except Exception as e:
            logger.error(f"Error initializing database: {e}", exc_info=True)
            raise

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager that yields a SQLAlchemy session and guarantees cleanup.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        if self._disposed:
            return
        self.engine.dispose()
        self._disposed = True
        logger.info("Database connection pool drained")
