"""
Application intake pipeline: accept -> validate -> render -> deliver -> respond.
"""
from __future__ import annotations
import asyncio
from email.message import EmailMessage
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple
from loguru import logger
from starlette.datastructures import FormData
from starlette.requests import Request

from config import Settings
from applicators import EmailSender, build_application_message
from processors import ApplicationPdfRenderer
from .errors import DeliveryError, IntakeError, ValidationError
from .models import ApplicationSubmission, UploadedFile
from .multipart import BoundedFormParser
from .validation import parse_submission

SUCCESS_MESSAGE = "Email and PDF sent successfully"
FAILURE_MESSAGE = "Error processing request"


class DocumentRenderer(Protocol):
    """Capability that turns a submission and its images into PDF bytes."""

    def render(self, submission: ApplicationSubmission, uploads: Mapping[str, UploadedFile]) -> bytes:
        ...


class MailTransport(Protocol):
    """Capability that hands one composed message to a mail server."""

    def send_message(self, msg: EmailMessage) -> Dict[str, Any]:
        ...


class ApplicationIntakeHandler:
    """Runs one submission through the pipeline and maps the outcome to (status, text)."""

    def __init__(self, settings: Settings, email_sender: Optional[MailTransport] = None,
                 renderer: Optional[DocumentRenderer] = None):
        self.settings = settings
        self.email_sender = email_sender or EmailSender(settings)
        self.renderer = renderer or ApplicationPdfRenderer(company_name=settings.company_name)

    async def handle(self, request: Request) -> Tuple[int, str]:
        try:
            submission, uploads = await self.accept(request)
        except IntakeError as e:
            logger.warning(f"Rejected submission: {e}")
            return e.status_code, str(e)
        except Exception as e:
            logger.exception(f"Error reading submission: {e}")
            return DeliveryError.status_code, FAILURE_MESSAGE

        try:
            await self.process(submission, uploads)
        except Exception as e:
            logger.exception(f"Error processing request for {submission.full_name}: {e}")
            return DeliveryError.status_code, FAILURE_MESSAGE

        logger.info(f"Application from {submission.full_name} delivered to {submission.email}")
        return 200, SUCCESS_MESSAGE

    async def accept(self, request: Request) -> Tuple[ApplicationSubmission, Dict[str, UploadedFile]]:
        """Parse the multipart body and run the upload and presence checks."""
        parser = BoundedFormParser(request.headers, request.stream(), self.settings.max_upload_bytes)
        form = await parser.parse()
        return await self._parse(form)

    async def _parse(self, form: FormData) -> Tuple[ApplicationSubmission, Dict[str, UploadedFile]]:
        try:
            return await parse_submission(form, self.settings.max_upload_bytes)
        except ValidationError as e:
            logger.warning(f"Missing required input: {', '.join(e.missing)}")
            raise

    async def process(self, submission: ApplicationSubmission, uploads: Dict[str, UploadedFile]) -> None:
        """Render, compose and send; raises on any failure."""
        pdf_bytes = await asyncio.to_thread(self.renderer.render, submission, uploads)
        logger.info(f"Rendered {submission.pdf_filename} ({len(pdf_bytes)} bytes)")

        msg = build_application_message(submission, uploads, pdf_bytes, self.settings)
        result = await asyncio.to_thread(self.email_sender.send_message, msg)
        if result.get("status") != "success":
            raise DeliveryError(result.get("message") or "Mail transport rejected the message")
