"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can
catch database problems with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""


class DatabaseConnectionError(PersistenceError):
    """Database initialization or connection failed (bad URL, unreadable file, ...)."""


class RecordNotFoundError(PersistenceError):
    """A record that had to exist was not found.

    Optional lookups return None instead of raising this.
    """


class DataIntegrityError(PersistenceError):
    """A constraint was violated, e.g. a second application for the same pair."""
