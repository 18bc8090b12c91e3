"""Application submission exceptions."""


class ApplicationError(Exception):
    """Base exception for application submission failures."""


class InternshipClosedError(ApplicationError):
    """The internship is inactive or its application deadline has passed."""

    def __init__(self, internship_id: str, reason: str):
        self.internship_id = internship_id
        self.reason = reason
        super().__init__(f"Internship {internship_id} is not accepting applications: {reason}")


class DuplicateApplicationError(ApplicationError):
    """The student has already applied to this internship."""

    def __init__(self, student_id: str, internship_id: str):
        self.student_id = student_id
        self.internship_id = internship_id
        super().__init__(f"Student {student_id} has already applied to internship {internship_id}")
