"""
Delivery package: composes application emails and sends them over SMTP.
"""
from .email_sender import EmailSender
from .message_builder import build_application_message

__all__ = ["EmailSender", "build_application_message"]
