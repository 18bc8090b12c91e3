"""Database connection and session management."""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker

from internmatch.logging import get_logger

from .exceptions import DatabaseConnectionError

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None

logger = get_logger(__name__, component="database")


def init_database(database_url: str) -> None:
    """Create the engine, validate the connection and create missing tables.

    Call once at startup; calling again replaces the previous engine.

    Args:
        database_url: SQLAlchemy URL (e.g. "sqlite:///./data/internmatch.db")

    Raises:
        DatabaseConnectionError: If the URL is invalid or the database is unreachable
    """
    global _engine, _session_factory

    if not database_url or not isinstance(database_url, str):
        raise DatabaseConnectionError("Database URL must be a non-empty string")

    try:
        url = make_url(database_url)
    except ArgumentError as e:
        raise DatabaseConnectionError(f"Invalid database URL: {e}") from e

    logger.info(
        "Initializing database",
        extra={"event": "database.initializing", "database_url": url.render_as_string(hide_password=True)},
    )

    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite and url.database and url.database != ":memory:":
        db_dir = Path(url.database).parent
        if not db_dir.exists():
            logger.info(f"Creating database directory: {db_dir}")
            db_dir.mkdir(parents=True, exist_ok=True)

    if _engine is not None:
        close_database()

    try:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False, "timeout": 30} if is_sqlite else {},
        )
        if is_sqlite:
            _configure_sqlite(engine)

        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()

        from .schema import create_schema

        create_schema(engine)
    except Exception as e:
        error_msg = f"Failed to initialize database: {e}"
        logger.error(error_msg, exc_info=True, extra={"event": "database.init_failed"})
        raise DatabaseConnectionError(error_msg) from e

    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)

    logger.info(
        "Database initialized",
        extra={"event": "database.initialized", "database_url": url.render_as_string(hide_password=True)},
    )


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys on every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session scope: commit on success, roll back on any exception.

    Raises:
        DatabaseConnectionError: If init_database() has not been called

    Example:
        >>> with get_session() as session:
        ...     repo = ApplicationRepository(session)
        ...     record = repo.get_by_id("3f2a...")
    """
    if _session_factory is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_session()"
        )

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.warning(
            f"Database session rolled back: {e}",
            extra={"event": "database.session.rolled_back", "error_type": type(e).__name__},
        )
        raise
    finally:
        session.close()


def get_engine() -> Engine:
    """Return the active engine.

    Raises:
        DatabaseConnectionError: If init_database() has not been called
    """
    if _engine is None:
        raise DatabaseConnectionError(
            "Database not initialized. Call init_database() before using get_engine()"
        )
    return _engine


def close_database() -> None:
    """Dispose of the engine; safe to call when nothing is open."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed", extra={"event": "database.closed"})
