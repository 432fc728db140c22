"""Exception hierarchy for the application intake pipeline.

Each error carries the HTTP status it maps to; the handler translates them
into a plain-text response at a single boundary.
"""
from typing import Iterable, List


class IntakeError(Exception):
    """Base exception for all intake errors."""

    status_code = 500


class UploadError(IntakeError):
    """A file part broke an upload rule (size, type, unexpected field)."""

    status_code = 400


class ValidationError(IntakeError):
    """Required text fields or files are missing."""

    status_code = 400

    def __init__(self, message: str, missing: Iterable[str] = ()):
        super().__init__(message)
        self.missing: List[str] = list(missing)


class DeliveryError(IntakeError):
    """Rendering the document or handing the message to the transport failed."""

    status_code = 500
