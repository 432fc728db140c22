"""
Upload and presence checks that turn a parsed multipart form into a submission.
"""
from pathlib import Path
from typing import Container, Dict, List, Tuple
import pydantic
from loguru import logger
from starlette.datastructures import FormData, UploadFile

from .errors import UploadError, ValidationError
from .models import (
    ApplicationSubmission,
    FILE_FIELDS,
    TEXT_FIELDS,
    UploadedFile,
)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}

TYPE_REJECTED_MESSAGE = "Only JPEG/PNG images are allowed!"
MISSING_FIELDS_MESSAGE = "All required fields and files must be provided."


def file_too_large_message(field_name: str, max_bytes: int) -> str:
    limit_mb = max_bytes / (1024 * 1024)
    return f"File too large: {field_name} exceeds the {limit_mb:g} MB limit"


def check_file_type(filename: str, content_type: str) -> None:
    """Reject anything whose extension or declared MIME type is not JPEG/PNG."""
    extension = Path(filename).suffix.lower()
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if extension not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_CONTENT_TYPES:
        raise UploadError(TYPE_REJECTED_MESSAGE)


def check_slot(field_name: str, filled: Container[str]) -> None:
    """A file part must name one of the five slots, and each slot takes one file."""
    if field_name not in FILE_FIELDS or field_name in filled:
        raise UploadError(f"Unexpected field: {field_name}")


async def read_upload(field_name: str, upload: UploadFile, max_bytes: int) -> UploadedFile:
    """Copy one already-parsed file part into memory, rejecting it past max_bytes."""
    filename = upload.filename or ""
    content_type = upload.content_type or ""
    check_file_type(filename, content_type)

    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise UploadError(file_too_large_message(field_name, max_bytes))
    return UploadedFile(field_name=field_name, filename=filename, content_type=content_type, data=data)


async def collect_uploads(form: FormData, max_bytes: int) -> Dict[str, UploadedFile]:
    """Apply the per-file upload rules in arrival order; returns the slots that were filled."""
    uploads: Dict[str, UploadedFile] = {}
    for name, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        # An unselected browser file input still posts an empty part
        if not value.filename:
            continue
        check_slot(name, uploads)
        uploads[name] = await read_upload(name, value, max_bytes)
    return uploads


def collect_text_fields(form: FormData) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for name in TEXT_FIELDS:
        value = form.get(name)
        if isinstance(value, str):
            fields[name] = value
    return fields


def build_submission(fields: Dict[str, str], uploads: Dict[str, UploadedFile]) -> ApplicationSubmission:
    """Check every required text field and file slot in one pass."""
    missing: List[str] = [name for name in FILE_FIELDS if name not in uploads]
    submission = None
    try:
        submission = ApplicationSubmission.model_validate(fields)
    except pydantic.ValidationError as e:
        for err in e.errors():
            missing.extend(str(part) for part in err.get("loc", ()))

    if missing or submission is None:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing=missing)
    return submission


async def parse_submission(form: FormData, max_bytes: int) -> Tuple[ApplicationSubmission, Dict[str, UploadedFile]]:
    uploads = await collect_uploads(form, max_bytes)
    fields = collect_text_fields(form)
    submission = build_submission(fields, uploads)
    logger.debug(f"Parsed submission for {submission.full_name} with {len(uploads)} file(s)")
    return submission, uploads
