"""
Infrastructure layer: SQLAlchemy engine and session lifecycle.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import logging
import threading

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the engine and session factory for one database URL.

    File-backed SQLite databases get their parent directory created on demand.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args = {}
        parsed = make_url(url)
        if parsed.drivername.startswith("sqlite"):
            # Sessions are used from FastAPI's threadpool
            connect_args["check_same_thread"] = False
            if parsed.database and parsed.database != ":memory:":
                Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    def create_all(self) -> None:
        """Create missing tables and indexes."""
        # Import registers the ORM table on Base.metadata
        from app.infrastructure import trash_repository  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database schema ready at {self.engine.url.render_as_string(hide_password=True)}")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session scope: commit on success, roll back on error."""
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


# Singleton instance
_database: Optional[Database] = None
_database_lock = threading.Lock()


def get_database() -> Database:
    """
    Get or create the singleton Database instance.

    Returns:
        Database bound to settings.database_url
    """
    global _database
    if _database is None:
        # Sync dependencies resolve in the threadpool
        with _database_lock:
            if _database is None:
                _database = Database(settings.database_url, echo=settings.database_echo)
    return _database
