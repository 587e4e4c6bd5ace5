"""Exception hierarchy for the document classification pipeline.

Errors are grouped by what the caller has to fix: the training data, the
configuration, or the file system.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class ClassificationError(Exception):
    """Base class for all errors raised by this package."""


class DataError(ClassificationError):
    """Training or model data is malformed.

    Raised for documents whose name carries no class keyword, empty
    corpora or vocabularies, and saved models that fail validation.
    """

    def __init__(self, message: str, document: Optional[str] = None) -> None:
        self.document = document
        if document is not None:
            message = f"[{document}] {message}"
        super().__init__(message)


class ConfigurationError(ClassificationError):
    """Invalid feature/classifier selection or an incorrectly prepared classifier."""


class InputIOError(ClassificationError):
    """A document, directory, reference list or model file could not be read."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")
