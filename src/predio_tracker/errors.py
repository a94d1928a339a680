class PredioError(Exception):
    """Base error for predio_tracker."""


class ValidationError(PredioError):
    """Rejected input. Raised before any store is touched."""


class StorageError(PredioError):
    """The store could not complete the operation."""

    def __init__(self, operation: str, message: str = "storage unavailable"):
        super().__init__(message)
        self.operation = operation


class AuthError(PredioError):
    """Missing or wrong shared-secret credential."""
