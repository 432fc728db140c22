"""
Document processors package for rendering application summaries.
"""
from .pdf_renderer import ApplicationPdfRenderer

__all__ = ["ApplicationPdfRenderer"]
