#!/usr/bin/env python3
"""
Web frontend for the application intake service.
"""
import sys
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from config import Settings
from intake.handler import ApplicationIntakeHandler

CORS_METHODS = ["GET", "POST", "PATCH", "DELETE"]


def create_app(settings: Optional[Settings] = None,
               handler: Optional[ApplicationIntakeHandler] = None) -> FastAPI:
    """Build the FastAPI app. Serve with ``uvicorn frontend:create_app --factory`` or ``python main.py``."""
    settings = settings or Settings()
    intake_handler = handler or ApplicationIntakeHandler(settings)

    app = FastAPI(title="Application Intake Service", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.post("/send-email", response_class=PlainTextResponse)
    async def send_email(request: Request):
        """Accept one application form, email the PDF summary and images to the applicant."""
        status_code, text = await intake_handler.handle(request)
        return PlainTextResponse(content=text, status_code=status_code)

    logger.info(f"Intake app ready (CORS origin: {settings.frontend_url})")
    return app
