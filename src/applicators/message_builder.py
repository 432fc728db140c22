"""
Composes the outbound application email: summary body plus the raw uploads and rendered PDF.
"""
import mimetypes
from email.message import EmailMessage
from typing import List, Mapping, Optional, Tuple
from jinja2 import Environment, PackageLoader, select_autoescape

from config import Settings
from intake.models import ApplicationSubmission, UploadedFile, uploads_in_slot_order

_env = Environment(
    loader=PackageLoader("applicators", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def build_subject(submission: ApplicationSubmission) -> str:
    return f"Job Application from {submission.full_name}"


def build_bodies(submission: ApplicationSubmission, attachment_names: List[str],
                 company_name: str) -> Tuple[str, str]:
    """Return (plain_text, html) summaries of the eleven applicant fields."""
    rows = submission.detail_rows()
    plain_text = (
        "Job Application Submission\n\n"
        + "\n".join(f"{label}: {value}" for label, value in rows)
        + "\n\nAttached Documents:\n"
        + "\n".join(f" - {name}" for name in attachment_names)
        + "\n\nThank You\n"
    )
    html = _env.get_template("application_email.html").render(
        rows=rows,
        attachment_names=attachment_names,
        company_name=company_name,
    )
    return plain_text, html


def _split_content_type(content_type: Optional[str], filename: str) -> Tuple[str, str]:
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    if "/" not in ctype:
        ctype, encoding = mimetypes.guess_type(filename)
        if ctype is None or encoding is not None:
            ctype = "application/octet-stream"
    maintype, subtype = ctype.split("/", 1)
    return maintype, subtype


def build_application_message(submission: ApplicationSubmission, uploads: Mapping[str, UploadedFile],
                              pdf_bytes: bytes, settings: Settings) -> EmailMessage:
    """Build the message sent to the applicant: five raw uploads first, then the rendered PDF."""
    images = uploads_in_slot_order(uploads)
    attachment_names = [upload.filename for upload in images] + [submission.pdf_filename]
    plain_text, html = build_bodies(submission, attachment_names, settings.company_name)

    msg = EmailMessage()
    msg["Subject"] = build_subject(submission)
    msg["From"] = settings.sender_address
    msg["To"] = submission.email
    if settings.smtp_bcc:
        msg["Bcc"] = settings.smtp_bcc
    # Set plain text content first, then add HTML alternative
    msg.set_content(plain_text)
    msg.add_alternative(html, subtype="html")

    for upload in images:
        maintype, subtype = _split_content_type(upload.content_type, upload.filename)
        msg.add_attachment(upload.data, maintype=maintype, subtype=subtype, filename=upload.filename)
    msg.add_attachment(pdf_bytes, maintype="application", subtype="pdf", filename=submission.pdf_filename)
    return msg
