"""Exceptions raised by the personalization engine."""


class PersonalizationError(Exception):
    """Base exception for engine errors."""
    pass


class SubjectNotFoundError(PersonalizationError):
    """Raised when a candidate or viewer id is not in the profile repository."""

    def __init__(self, subject_id: str, kind: str = "subject"):
        self.subject_id = subject_id
        self.kind = kind
        super().__init__(f"Unknown {kind}: {subject_id}")


class InvalidInteractionError(PersonalizationError, ValueError):
    """Raised for interaction events that would decrease a counter or are malformed."""
    pass
