"""Package initializer for `predio_tracker`."""

from .errors import PredioError, StorageError, ValidationError
from .service import PredioService

__all__ = ["PredioError", "PredioService", "StorageError", "ValidationError"]
