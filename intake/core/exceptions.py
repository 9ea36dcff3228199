from typing import Optional


class IntakeError(Exception):
    """
    Base exception for the intake service. Carries the plain-text message
    shown to the caller and the HTTP status it maps to.
    """

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(IntakeError):
    """Submitted data has the wrong shape (caller's fault)."""

    def __init__(self, message: str = "Validation error", field: Optional[str] = None):
        self.field = field
        super().__init__(message, status_code=400)


class NotFound(IntakeError):
    """The referenced document does not exist."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, status_code=404)


class StorageError(IntakeError):
    """The document store failed to read or write."""

    def __init__(self, message: str = "Storage backend error"):
        super().__init__(message, status_code=500)


class DeliveryError(IntakeError):
    """The chat transport rejected or failed to deliver a message."""

    def __init__(self, message: str = "Notification delivery failed"):
        super().__init__(message, status_code=502)
