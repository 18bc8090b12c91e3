"""Application submission with immutable match snapshots.

ApplicationService lives in internmatch.applications.service; it is not
re-exported here because the persistence layer imports this package's models.
"""

from .exceptions import ApplicationError, DuplicateApplicationError, InternshipClosedError
from .models import ApplicationRecord, ApplicationStatus

__all__ = [
    "ApplicationError",
    "ApplicationRecord",
    "ApplicationStatus",
    "DuplicateApplicationError",
    "InternshipClosedError",
]
