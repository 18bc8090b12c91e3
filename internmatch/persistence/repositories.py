"""Data access layer for application rows.

The repository returns domain models, never ORM objects. It has no method
that rewrites the snapshot columns of an existing row: a stored snapshot is
only ever replaced by deleting the application, which is out of scope here.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from internmatch.applications.models import ApplicationRecord, ApplicationStatus
from internmatch.logging import get_logger

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import ApplicationModel

logger = get_logger(__name__, component="database")

SORT_BY_MATCH_SCORE = "match_score"
SORT_BY_APPLIED_AT = "applied_at"
APPLICANT_SORTS = (SORT_BY_MATCH_SCORE, SORT_BY_APPLIED_AT)


class ApplicationRepository:
    """Repository for application rows and their snapshots."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add(self, record: ApplicationRecord) -> ApplicationRecord:
        """Insert a new application with its snapshot.

        Raises:
            DataIntegrityError: If the student already applied to the internship
            PersistenceError: If database error occurs
        """
        try:
            model = ApplicationModel.from_domain(record)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.warning(
                f"Integrity error inserting application {record.id}: {e}",
                extra={
                    "event": "database.application.conflict",
                    "student_id": record.student_id,
                    "internship_id": record.internship_id,
                },
            )
            raise DataIntegrityError(
                f"Application for student {record.student_id} and internship "
                f"{record.internship_id} violates a constraint: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting application {record.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert application: {e}") from e

    def get_by_id(self, application_id: str) -> Optional[ApplicationRecord]:
        """Retrieve an application by primary key, or None."""
        try:
            model = self.session.get(ApplicationModel, application_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving application {application_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve application: {e}") from e

    def get_for_pair(self, student_id: str, internship_id: str) -> Optional[ApplicationRecord]:
        """Retrieve the student's application to an internship, or None."""
        try:
            stmt = select(ApplicationModel).where(
                ApplicationModel.student_id == student_id,
                ApplicationModel.internship_id == internship_id,
            )
            model = self.session.execute(stmt).scalar_one_or_none()
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(
                f"Error retrieving application for {student_id}/{internship_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to retrieve application: {e}") from e

    def list_for_internship(
        self, internship_id: str, sort: str = SORT_BY_MATCH_SCORE
    ) -> List[ApplicationRecord]:
        """List an internship's applicants.

        Args:
            internship_id: Internship id
            sort: "match_score" (highest stored score first, newest on ties)
                or "applied_at" (newest first, higher score on ties).
                Anything else falls back to "match_score".

        Returns:
            List of ApplicationRecord (empty list if none found)

        Raises:
            PersistenceError: If database error occurs
        """
        if sort not in APPLICANT_SORTS:
            logger.warning(
                f"Unknown applicant sort {sort!r}, using {SORT_BY_MATCH_SCORE}",
                extra={"event": "database.sort.unknown"},
            )
            sort = SORT_BY_MATCH_SCORE

        if sort == SORT_BY_APPLIED_AT:
            order = (
                ApplicationModel.created_at.desc(),
                ApplicationModel.match_score.desc(),
                ApplicationModel.id.asc(),
            )
        else:
            order = (
                ApplicationModel.match_score.desc(),
                ApplicationModel.created_at.desc(),
                ApplicationModel.id.asc(),
            )

        try:
            stmt = (
                select(ApplicationModel)
                .where(ApplicationModel.internship_id == internship_id)
                .order_by(*order)
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(
                f"Error listing applications for internship {internship_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to list applications: {e}") from e

    def list_for_student(self, student_id: str) -> List[ApplicationRecord]:
        """List a student's applications, newest first."""
        try:
            stmt = (
                select(ApplicationModel)
                .where(ApplicationModel.student_id == student_id)
                .order_by(ApplicationModel.created_at.desc(), ApplicationModel.id.asc())
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(
                f"Error listing applications for student {student_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to list applications: {e}") from e

    def update_status(self, application_id: str, status: ApplicationStatus) -> ApplicationRecord:
        """Change an application's review status; the snapshot is left untouched.

        Raises:
            RecordNotFoundError: If application_id doesn't exist
            PersistenceError: If database error occurs
        """
        status = ApplicationStatus(status)
        try:
            stmt = (
                update(ApplicationModel)
                .where(ApplicationModel.id == application_id)
                .values(status=status.value)
            )
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                raise RecordNotFoundError(f"Application {application_id} not found")

            model = self.session.get(ApplicationModel, application_id)
            self.session.refresh(model)
            return model.to_domain()

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error updating status for application {application_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update application status: {e}") from e
