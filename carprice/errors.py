"""
Exception classes for the carprice package.

Every failure raised by the package derives from `CarPriceError`, which keeps
a human readable message plus a `details` dict describing what went wrong
(file path, offending column, line numbers ...).
"""

from typing import Any, Dict, Optional


class CarPriceError(Exception):
    """
    Base class for all carprice errors.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DataLoadError(CarPriceError):
    """Raised when the training dataset is missing or cannot be read."""


class DataFormatError(DataLoadError):
    """Raised when the dataset is readable but its contents are malformed."""


class ArtifactLoadError(CarPriceError):
    """Raised when a model artifact is missing, corrupt or schema-incompatible."""

    def __init__(self, path, reason: str):
        super().__init__(
            f"Cannot load model artifact {path}: {reason}",
            details={"path": str(path), "reason": reason},
        )


class PredictionError(CarPriceError):
    """Raised when an input record cannot be encoded for scoring."""
