"""Domain-specific exceptions"""

from datetime import datetime


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPayloadError(DomainException):
    """Scoring payload has the wrong shape for a required field"""

    def __init__(self, field: str, expected: str):
        self.field = field
        self.expected = expected
        super().__init__(f"Invalid payload field '{field}': expected {expected}")


class AnalysisNotFoundError(DomainException):
    """No stored credit analysis exists for the user"""

    pass


class RescoreCooldownError(DomainException):
    """User was scored too recently to be scored again"""

    def __init__(self, user_id: str, next_allowed_at: datetime):
        self.user_id = user_id
        self.next_allowed_at = next_allowed_at
        super().__init__(f"User {user_id} can be re-scored after {next_allowed_at.isoformat()}")
