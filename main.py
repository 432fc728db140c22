#!/usr/bin/env python3
"""
Main application runner for the application intake service.
"""
import argparse
import sys
from pathlib import Path
from loguru import logger
import uvicorn

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from config import Settings
from frontend import create_app


def setup_logging(settings: Settings):
    """Setup logging configuration."""
    # Remove default logger
    logger.remove()

    # Add console logging
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    # Add file logging
    log_file = Path(settings.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        level=settings.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="30 days"
    )


def print_config(settings: Settings):
    def mask(value: str) -> str:
        return "✓ Set" if value else "✗ Missing"

    print("Configuration Check:")
    print(f"Listen: {settings.host}:{settings.port}")
    print(f"Frontend URL (CORS): {settings.frontend_url}")
    print(f"SMTP Server: {settings.smtp_host}:{settings.smtp_port} "
          f"({'SSL' if settings.smtp_secure else 'STARTTLS' if settings.smtp_starttls else 'plain'})")
    print(f"SMTP User: {mask(settings.smtp_user)}")
    print(f"SMTP Password: {mask(settings.smtp_pass)}")
    print(f"Sender Address: {settings.sender_address or '✗ Missing'}")
    print(f"Bcc: {settings.smtp_bcc or '-'}")
    print(f"Upload Limit: {settings.max_upload_mb:g} MB per file")
    print(f"Log File: {settings.log_file} ({settings.log_level})")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Job application intake service: renders a PDF summary and emails it with the uploads"
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: HOST or 0.0.0.0)"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: PORT or 8000)"
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Check configuration and exit"
    )

    args = parser.parse_args()
    settings = Settings()

    # Configuration check
    if args.config_check:
        print_config(settings)
        return

    setup_logging(settings)
    host = args.host or settings.host
    port = args.port or settings.port

    try:
        app = create_app(settings)
        logger.info(f"Server is running at port {port}")
        uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    except KeyboardInterrupt:
        print("\nProcess interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
