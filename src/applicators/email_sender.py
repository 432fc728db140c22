"""
SMTP-based email sender for application messages.
"""
from __future__ import annotations
import smtplib
import ssl
from typing import Any, Dict, List, Optional
from email.message import EmailMessage
from loguru import logger

from config import Settings

class EmailSender:
    """Hands composed messages to the configured SMTP server."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_pass
        self.use_ssl = settings.smtp_secure
        self.use_tls = settings.smtp_starttls
        self.timeout = settings.smtp_timeout
        self.default_from = settings.sender_address

    def _connect(self) -> smtplib.SMTP:
        server: Optional[smtplib.SMTP] = None
        ctx = ssl.create_default_context()
        try:
            if self.use_ssl:
                # SMTPS (implicit TLS), typically port 465
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=ctx)
            else:
                # Start unencrypted and upgrade with STARTTLS when offered (typically port 587)
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
                server.ehlo()
                if self.use_tls and server.has_extn("starttls"):
                    server.starttls(context=ctx)
                    server.ehlo()
            if self.username and self.password:
                server.login(self.username, self.password)
            return server
        except Exception:
            if server is not None:
                try:
                    server.quit()
                except smtplib.SMTPException as e:
                    logger.debug(f"Ignoring error while closing SMTP connection: {e}")
            raise

    @staticmethod
    def _recipients(msg: EmailMessage) -> List[str]:
        addrs: List[str] = []
        for header in ("To", "Cc", "Bcc"):
            value = msg.get(header)
            if value:
                addrs.extend(a.strip() for a in str(value).split(",") if a.strip())
        return addrs

    def send_message(self, msg: EmailMessage) -> Dict[str, Any]:
        """Send one composed message. Never raises; the outcome is reported in the returned dict."""
        if not msg.get("From"):
            if not self.default_from:
                return {"status": "error", "message": "No sender address configured. Set SMTP_FROM or SMTP_USER."}
            msg["From"] = self.default_from

        to_addrs = self._recipients(msg)
        if not to_addrs:
            return {"status": "error", "message": "Message has no recipients."}

        attachment_count = sum(1 for _ in msg.iter_attachments())
        try:
            with self._connect() as server:
                server.send_message(msg)
            logger.info(f"Email sent to {to_addrs} with {attachment_count} attachment(s)")
            return {"status": "success", "message": "Email sent successfully"}
        except Exception as e:
            logger.error(f"Failed to send email: {e}")
            return {"status": "error", "message": str(e)}
