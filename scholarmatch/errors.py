"""Exceptions raised by the match scoring engine."""


class ScholarMatchError(Exception):
    """Base class for all engine errors."""


class MissingProfileError(ScholarMatchError):
    """Raised when a student has no profile to score against."""

    def __init__(self, student_id: str | None = None):
        self.student_id = student_id
        if student_id:
            message = f"Student {student_id} has no profile; create a profile before scoring"
        else:
            message = "No profile provided; create a profile before scoring"
        super().__init__(message)


class MalformedCriteriaError(ScholarMatchError, ValueError):
    """Raised when an eligibility criteria payload cannot be parsed."""
