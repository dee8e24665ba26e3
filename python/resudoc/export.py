"""
PDF export.

This is a placeholder renderer: it checks that the input is a DOCX container
and returns a fixed single-page PDF. It does not lay out the document.
"""

import fitz  # PyMuPDF
import structlog

from resudoc.errors import ProcessingFailure
from resudoc.settings import settings
from resudoc.utils.docx import check_container_signature

logger = structlog.get_logger(__name__)

# US Letter in points
PAGE_WIDTH = 612
PAGE_HEIGHT = 792


def _from_bottom(x: float, y: float) -> fitz.Point:
    # Layout below is given in PDF user space (origin bottom-left); PyMuPDF is top-left
    return fitz.Point(x, PAGE_HEIGHT - y)


def export_to_pdf(doc_bytes: bytes) -> bytes:
    check_container_signature(doc_bytes)

    try:
        pdf = fitz.open()
        page = pdf.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        page.insert_text(_from_bottom(100, 700), settings.pdf_title, fontname="hebo", fontsize=16)
        page.insert_text(_from_bottom(100, 650), settings.pdf_subtitle, fontname="helv", fontsize=12)
        data = pdf.tobytes(garbage=4, deflate=True)
        pdf.close()
    except Exception as e:
        logger.error(f"PDF export failed: {e}", exc_info=True)
        raise ProcessingFailure(f"Failed to export to PDF: {e}") from e

    logger.info(f"Exported placeholder PDF ({len(data)} bytes).")
    return data
