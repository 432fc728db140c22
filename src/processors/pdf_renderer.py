"""
Single-page PDF summary of a job application, drawn with reportlab.
"""
import io
from datetime import datetime
from typing import List, Mapping, Optional, Sequence, Tuple
from loguru import logger

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from intake.models import ApplicationSubmission, UploadedFile, uploads_in_slot_order

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40

# Applicant details table
TABLE_X = MARGIN
TABLE_WIDTH = 515
VALUE_COL_X = 180
DIVIDER_X = VALUE_COL_X - 10
ROW_HEIGHT = 20
CELL_PADDING = 5
LABEL_WIDTH = 130
VALUE_WIDTH = 330

# Image grid: 2 then 3 per row
IMAGE_WIDTH = 160
IMAGE_HEIGHT = 100
IMAGE_GAP = 15
ROW_SPACING = 25
IMAGE_ROWS = (2, 3)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
LINE_SPACING = 1.2
FOOTER_COLOR = HexColor("#777777")


class ApplicationPdfRenderer:
    """Renders an ApplicationSubmission and its five images to PDF bytes.

    Coordinates are tracked top-down from the page edge (``top``) and flipped
    to reportlab's bottom-left origin only when drawing.
    """

    def __init__(self, company_name: str = "AgeeSmart"):
        self.company_name = company_name

    def render(self, submission: ApplicationSubmission, uploads: Mapping[str, UploadedFile],
               generated_at: Optional[datetime] = None) -> bytes:
        """Render the summary page and return the finished PDF."""
        generated_at = generated_at or datetime.now()
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(f"Job Application - {submission.full_name}")
        pdf.setAuthor(self.company_name)
        pdf.setSubject(submission.applying_position)

        top = MARGIN
        top = self._draw_header(pdf, top, generated_at)
        top = self._draw_heading(pdf, top, "Applicant Details")
        top = self._draw_details_table(pdf, top, submission.detail_rows())
        top += 2 * 10 * LINE_SPACING
        top = self._draw_heading(pdf, top, "Uploaded Images")
        top = self._draw_images(pdf, top, uploads_in_slot_order(uploads))
        top += 2 * 10 * LINE_SPACING
        self._draw_footer(pdf, top)

        pdf.showPage()
        pdf.save()
        data = buffer.getvalue()
        logger.debug(f"Rendered application PDF for {submission.full_name}: {len(data)} bytes")
        return data

    @staticmethod
    def _baseline(top: float, size: float) -> float:
        return PAGE_HEIGHT - top - size

    def _draw_header(self, pdf: canvas.Canvas, top: float, generated_at: datetime) -> float:
        pdf.setFont(FONT_BOLD, 20)
        pdf.drawCentredString(PAGE_WIDTH / 2, self._baseline(top, 20), "Job Application")
        top += 20 * LINE_SPACING + 20 * LINE_SPACING * 0.5

        stamp = f"{generated_at.month}/{generated_at.day}/{generated_at.year}"
        pdf.setFont(FONT, 10)
        pdf.drawCentredString(PAGE_WIDTH / 2, self._baseline(top, 10), f"Generated on {stamp}")
        return top + 10 * LINE_SPACING * 2

    def _draw_heading(self, pdf: canvas.Canvas, top: float, text: str) -> float:
        pdf.setFont(FONT_BOLD, 14)
        baseline = self._baseline(top, 14)
        pdf.drawString(MARGIN, baseline, text)
        pdf.setLineWidth(0.75)
        pdf.line(MARGIN, baseline - 2, MARGIN + pdf.stringWidth(text, FONT_BOLD, 14), baseline - 2)
        return top + 14 * LINE_SPACING * 1.5

    def _draw_details_table(self, pdf: canvas.Canvas, top: float, rows: Sequence[Tuple[str, str]]) -> float:
        height = ROW_HEIGHT * len(rows)
        bottom = PAGE_HEIGHT - top - height

        pdf.setLineWidth(1)
        pdf.setStrokeColor(black)
        pdf.rect(TABLE_X, bottom, TABLE_WIDTH, height, stroke=1, fill=0)
        pdf.line(DIVIDER_X, PAGE_HEIGHT - top, DIVIDER_X, bottom)

        row_top = top
        for index, (label, value) in enumerate(rows):
            if index > 0:
                y = PAGE_HEIGHT - row_top
                pdf.line(TABLE_X, y, TABLE_X + TABLE_WIDTH, y)
            baseline = self._baseline(row_top + CELL_PADDING, 10)
            pdf.setFont(FONT_BOLD, 10)
            pdf.drawString(TABLE_X + CELL_PADDING, baseline, _first_line(label, FONT_BOLD, LABEL_WIDTH))
            pdf.setFont(FONT, 10)
            pdf.drawString(VALUE_COL_X + CELL_PADDING, baseline, _first_line(value, FONT, VALUE_WIDTH))
            row_top += ROW_HEIGHT
        return row_top

    def _draw_images(self, pdf: canvas.Canvas, top: float, images: List[UploadedFile]) -> float:
        start = 0
        for count in IMAGE_ROWS:
            x = TABLE_X
            for upload in images[start:start + count]:
                pdf.drawImage(
                    ImageReader(io.BytesIO(upload.data)),
                    x,
                    PAGE_HEIGHT - top - IMAGE_HEIGHT,
                    width=IMAGE_WIDTH,
                    height=IMAGE_HEIGHT,
                    preserveAspectRatio=True,
                    anchor="n",
                    mask="auto",
                )
                pdf.setFont(FONT, 8)
                pdf.drawCentredString(x + IMAGE_WIDTH / 2, self._baseline(top + IMAGE_HEIGHT + 5, 8), upload.caption)
                x += IMAGE_WIDTH + IMAGE_GAP
            start += count
            top += IMAGE_HEIGHT + ROW_SPACING
        return top

    def _draw_footer(self, pdf: canvas.Canvas, top: float) -> None:
        pdf.setFont(FONT, 8)
        pdf.setFillColor(FOOTER_COLOR)
        pdf.drawCentredString(PAGE_WIDTH / 2, self._baseline(top, 8), f"{self.company_name} - Job Application")
        pdf.setFillColor(black)


def _first_line(text: str, font: str, width: float) -> str:
    """Values are confined to one fixed-height row; anything past the first wrapped line is dropped."""
    lines = simpleSplit(text or "", font, 10, width)
    return lines[0] if lines else ""
