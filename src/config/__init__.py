"""
Configuration package for the application intake service.
"""
from .settings import Settings

__all__ = ["Settings"]
