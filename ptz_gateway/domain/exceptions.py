"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidProfileError(DomainException):
    """Household profile is incomplete, malformed or uses an unknown table key"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class PersistenceError(DomainException):
    """Submission could not be written to the store after all retries"""

    pass


class NotificationError(DomainException):
    """Confirmation message could not be delivered"""

    pass
