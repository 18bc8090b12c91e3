"""SQLite/SQLAlchemy persistence for application rows and their snapshots."""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import APPLICANT_SORTS, ApplicationRepository
from .schema import ApplicationModel, Base, create_schema

__all__ = [
    "init_database",
    "get_session",
    "get_engine",
    "close_database",
    "create_schema",
    "Base",
    "ApplicationModel",
    "ApplicationRepository",
    "APPLICANT_SORTS",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
