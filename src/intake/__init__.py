"""
Application intake package: submission models and upload validation.

The request pipeline lives in ``intake.handler``.
"""
from .errors import IntakeError, UploadError, ValidationError, DeliveryError
from .models import ApplicationSubmission, UploadedFile, NOT_PROVIDED, FILE_SLOTS, FILE_FIELDS
from .validation import parse_submission

__all__ = [
    "ApplicationSubmission",
    "DeliveryError",
    "FILE_FIELDS",
    "FILE_SLOTS",
    "IntakeError",
    "NOT_PROVIDED",
    "UploadError",
    "UploadedFile",
    "ValidationError",
    "parse_submission",
]
