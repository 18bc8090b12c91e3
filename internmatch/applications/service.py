"""Application submission: freeze the match snapshot and store it with the row."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from internmatch.logging import get_logger, scoring_context
from internmatch.matching.service import InternshipRow, MatchingService, StudentRow
from internmatch.persistence import (
    ApplicationRepository,
    DataIntegrityError,
    get_session,
)
from internmatch.snapshots import SnapshotBuilder
from internmatch.utils import ensure_utc, new_application_id, utc_now

from .exceptions import DuplicateApplicationError, InternshipClosedError
from .models import ApplicationRecord, ApplicationStatus

logger = get_logger(__name__, component="applications")


class ApplicationService:
    """Submits applications against the active database.

    init_database() must have been called before submit() or the listing
    helpers are used.
    """

    def __init__(
        self,
        matching_service: Optional[MatchingService] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ApplicationService.

        Args:
            matching_service: Normalizes rows and owns the scoring model
            clock: Source of the submission time (also the snapshot's computed_at)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.matching_service = matching_service or MatchingService()
        self.clock = clock
        self.logger = logger_instance or logger
        self.snapshot_builder = SnapshotBuilder(
            self.matching_service.engine, clock=clock, logger_instance=logger_instance
        )

    def submit(self, raw_student: StudentRow, raw_internship: InternshipRow) -> ApplicationRecord:
        """Apply a student to an internship.

        The snapshot is computed before anything is written; the row and its
        snapshot are then inserted in a single session.

        Raises:
            InternshipClosedError: If the listing is inactive or past its deadline
            DuplicateApplicationError: If the student already applied
            PersistenceError: If the database write fails for another reason
        """
        internship = self.matching_service.internship(raw_internship)
        student = self.matching_service.student(raw_student)
        now = self.clock()

        if not internship.is_active:
            raise InternshipClosedError(internship.internship_id, "listing is not active")
        deadline = ensure_utc(internship.application_deadline)
        if deadline is not None and deadline < ensure_utc(now):
            raise InternshipClosedError(
                internship.internship_id,
                f"application deadline {deadline.date().isoformat()} has passed",
            )

        with scoring_context(student_id=student.student_id, internship_id=internship.internship_id):
            snapshot = self.snapshot_builder.build(internship, student)
            record = ApplicationRecord(
                id=new_application_id(),
                student_id=student.student_id,
                internship_id=internship.internship_id,
                status=ApplicationStatus.SUBMITTED,
                created_at=now,
                snapshot=snapshot,
            )

            with get_session() as session:
                repo = ApplicationRepository(session)
                if repo.get_for_pair(student.student_id, internship.internship_id) is not None:
                    raise DuplicateApplicationError(student.student_id, internship.internship_id)
                try:
                    stored = repo.add(record)
                except DataIntegrityError as e:
                    raise DuplicateApplicationError(
                        student.student_id, internship.internship_id
                    ) from e

            self.logger.info(
                "Application submitted",
                extra={
                    "event": "application.submitted",
                    "application_id": stored.id,
                    "match_score": stored.snapshot.score,
                    "matching_version": stored.snapshot.matching_version,
                },
            )
            return stored

    def applicants(self, internship_id: str, sort: str = "match_score") -> List[ApplicationRecord]:
        """Stored applications for an internship, ordered by snapshot score or date."""
        with get_session() as session:
            return ApplicationRepository(session).list_for_internship(internship_id, sort=sort)

    def applications_for(self, student_id: str) -> List[ApplicationRecord]:
        with get_session() as session:
            return ApplicationRepository(session).list_for_student(student_id)

    def update_status(self, application_id: str, status: ApplicationStatus) -> ApplicationRecord:
        """Move an application through review; its snapshot never changes."""
        with get_session() as session:
            record = ApplicationRepository(session).update_status(application_id, status)
        self.logger.info(
            "Application status updated",
            extra={
                "event": "application.status_updated",
                "application_id": application_id,
                "status": record.status.value,
            },
        )
        return record
