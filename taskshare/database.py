import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they are registered with SQLModel metadata
from .models import Attachment, Category, SharedTask, Task, User  # noqa: F401

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # Postgres and friends: pre-ping so stale pooled connections are dropped
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


class Database:
    """Handle on the relational store.

    Nothing touches the database until ``connect()`` is called; the app calls
    it on startup and ``disconnect()`` on shutdown.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def connect(self) -> None:
        if self.engine is not None:
            return
        self.engine = _create_engine(self.url)
        self._session_factory = sessionmaker(
            bind=self.engine,
            class_=Session,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Connected to database %s", self.engine.url.render_as_string(hide_password=True))

    def disconnect(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database connection pool disposed")

    def create_tables(self) -> None:
        """Create all database tables."""
        SQLModel.metadata.create_all(bind=self._require_engine())

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Get a database session (context manager style).

        Usage:
            with database.session() as session:
                # do something with session
        """
        self._require_engine()
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self.engine


def get_db(request: Request) -> Iterator[Session]:
    """Dependency to get a database session from the app's store handle."""
    database: Database = request.app.state.database
    with database.session() as db:
        yield db
