"""Exception types raised by the sentiment model.

All of them are local caller errors: nothing here is transient, so callers
should fix the input rather than retry.
"""

from __future__ import annotations


class SentimentModelError(Exception):
    """Base class for every error raised by the sentiment model."""


class EmptyDatasetError(SentimentModelError, ValueError):
    """Training was called with zero examples."""

    def __init__(self, message: str = "Training data cannot be empty") -> None:
        super().__init__(message)


class UntrainedModelError(SentimentModelError, RuntimeError):
    """Prediction or export was attempted before a successful ``train()``."""

    def __init__(self, message: str = "Model must be trained before making predictions") -> None:
        super().__init__(message)


class MalformedImportError(SentimentModelError, ValueError):
    """An import payload is missing fields or has fields of the wrong shape.

    Attributes:
        field: Dotted path of the offending field, when known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)
