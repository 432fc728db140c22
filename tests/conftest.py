"""Shared fixtures: settings, real JPEG/PNG bytes, and fake delivery capabilities."""
import io
from email.message import EmailMessage
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from config import Settings
from frontend import create_app
from intake.handler import ApplicationIntakeHandler
from intake.models import ApplicationSubmission, UploadedFile

FRONTEND_URL = "https://frontend.example.com"


def make_image(fmt: str, size=(64, 40), color="navy") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


class FakeSender:
    """Records messages instead of talking to an SMTP server."""

    def __init__(self, result: Dict[str, Any] = None):
        self.result = result or {"status": "success", "message": "Email sent successfully"}
        self.messages: List[EmailMessage] = []

    def send_message(self, msg: EmailMessage) -> Dict[str, Any]:
        self.messages.append(msg)
        return self.result


class ExplodingRenderer:
    def render(self, submission, uploads) -> bytes:
        raise RuntimeError("renderer exploded: secret detail")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        frontend_url=FRONTEND_URL,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_secure=False,
        smtp_timeout=30,
        smtp_user="intake@example.com",
        smtp_pass="app-password",
        smtp_bcc=None,
        company_name="AgeeSmart",
    )


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG", color="orange")


@pytest.fixture
def form_fields() -> Dict[str, str]:
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "applyingPosition": "Analyst",
        "email": "jane@x.com",
        "dateOfBirth": "1990-01-01",
        "phoneNumber": "555-1111",
    }


@pytest.fixture
def form_files(jpeg_bytes, png_bytes) -> Dict[str, tuple]:
    return {
        "idFileFront": ("id-front.jpg", jpeg_bytes, "image/jpeg"),
        "idFileBack": ("id-back.jpeg", jpeg_bytes, "image/jpeg"),
        "selfie1": ("selfie one.png", png_bytes, "image/png"),
        "selfie2": ("selfie2.jpg", jpeg_bytes, "image/jpeg"),
        "selfie3": ("selfie3.png", png_bytes, "image/png"),
    }


@pytest.fixture
def submission(form_fields) -> ApplicationSubmission:
    return ApplicationSubmission.model_validate(form_fields)


@pytest.fixture
def uploads(form_files) -> Dict[str, UploadedFile]:
    return {
        name: UploadedFile(field_name=name, filename=filename, content_type=ctype, data=data)
        for name, (filename, data, ctype) in form_files.items()
    }


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def client(settings, sender) -> TestClient:
    handler = ApplicationIntakeHandler(settings, email_sender=sender)
    return TestClient(create_app(settings, handler=handler))
