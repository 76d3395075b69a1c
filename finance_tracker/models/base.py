"""
Database engine, session management, and base model.

Every model inherits from Base. The Database object owns the
engine and hands out sessions through session_scope(). One
Database is built when the application starts (or once per test)
and passed explicitly to the stores that need it.
"""

import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how SQLite stores DateTime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine and the session factory.

    An in-memory SQLite URL gets a StaticPool so every session
    sees the same connection (and therefore the same data).
    Access to that connection is serialised with a re-entrant
    lock, because FastAPI runs sync endpoints in a thread pool.
    """

    def __init__(self, url: str = "sqlite://"):
        self.url = url
        self.engine = self._create_engine(url)

        # expire_on_commit=False keeps returned objects readable
        # after their session has closed.
        self._session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        self._lock = threading.RLock()

    @staticmethod
    def _create_engine(url: str):
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            kwargs = {"connect_args": {"check_same_thread": False}}
            if parsed.database in (None, "", ":memory:"):
                kwargs["poolclass"] = StaticPool
            return create_engine(url, **kwargs)
        return create_engine(url, pool_pre_ping=True)

    def create_all(self) -> None:
        """Create every table registered on Base.metadata."""
        # Import models so they register themselves on Base.metadata
        import finance_tracker.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a session for a single unit of work.

        Commits if the block finishes, rolls back if it raises,
        and always closes the session.
        """
        with self._lock:
            session = self._session_factory()
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    def is_healthy(self) -> bool:
        try:
            with self.session_scope() as session:
                session.execute(text("SELECT 1"))
        except Exception:
            return False
        return True

    def dispose(self) -> None:
        self.engine.dispose()
