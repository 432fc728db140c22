"""
Configuration management for the application intake service.
"""
from typing import Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(case_sensitive=False, populate_by_name=True, extra="ignore")

    # HTTP server
    host: str = Field("0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(8000, description="Listening port")
    frontend_url: str = Field(
        "https://age-smart.netlify.app",
        validation_alias=AliasChoices("FRONTEND_URL", "FrontendUrl", "frontend_url"),
        description="The only origin allowed by the CORS policy",
    )

    # Uploads
    max_upload_bytes: int = Field(2 * 1024 * 1024, description="Per-file upload limit")

    # Document branding
    company_name: str = Field("AgeeSmart", description="Shown in the PDF footer")

    # Logging
    log_level: str = Field("INFO")
    log_file: str = Field("./logs/application_intake.log")

    # SMTP / Email Settings (Gmail by default)
    smtp_host: str = Field("smtp.gmail.com")
    smtp_port: int = Field(587)
    smtp_secure: bool = Field(False, description="Implicit TLS (SMTPS), typically port 465")
    smtp_starttls: bool = Field(True, description="Upgrade plain connections when STARTTLS is offered")
    smtp_user: str = Field("")
    smtp_pass: str = Field("")
    smtp_from: Optional[str] = Field(None)
    smtp_bcc: Optional[str] = Field(None)
    smtp_timeout: int = Field(30)

    # Validators
    @field_validator("smtp_pass", mode="before")
    @classmethod
    def _clean_smtp_pass(cls, v):
        """Normalize pasted Gmail app passwords by stripping quotes and spaces."""
        if isinstance(v, str):
            return v.strip().replace('"', '').replace("'", "").replace(" ", "")
        return v

    @field_validator("smtp_from", "smtp_bcc", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def sender_address(self) -> str:
        """Address used in the From header."""
        return self.smtp_from or self.smtp_user

    @property
    def max_upload_mb(self) -> float:
        return self.max_upload_bytes / (1024 * 1024)
