"""Domain exceptions shared by the services.

Each exception carries the HTTP status the API reports it with; the global
handlers in ``main`` do the translation so services never touch HTTP.
"""


class DomainError(Exception):
    """Base exception for domain errors."""

    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input is missing or malformed."""

    status_code = 400
    default_message = "Invalid input"


class InvalidCategoryError(ValidationError):
    """Raised when a category does not belong to the event kind."""

    def __init__(self, kind: str, category: str) -> None:
        super().__init__(f"Invalid category '{category}' for {kind}")
        self.kind = kind
        self.category = category


class SelfReferenceError(ValidationError):
    """Raised when a user targets themself with a friend request."""

    default_message = "Cannot add yourself"


class NotFoundError(DomainError):
    """Raised when a referenced user, friendship or invite does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(DomainError):
    """Raised when a visibility or ownership check fails."""

    status_code = 403
    default_message = "Forbidden"


class AlreadyExistsError(DomainError):
    """Raised when creating a duplicate relationship."""

    status_code = 409
    default_message = "Already exists"


class ExpiredError(DomainError):
    """Raised when an invite or reset token is past its expiry."""

    status_code = 410
    default_message = "Expired"
