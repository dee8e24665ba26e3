"""
Thin adapter over python-docx exposing the paragraph/run surface the edit
engine needs: read paragraph text, overwrite a run's text, remove a run.

Run formatting (w:rPr) is never inspected or copied here. It survives an edit
because the run element itself is mutated rather than rebuilt.
"""

from io import BytesIO
from typing import Iterator, List, Optional

import structlog
from docx import Document
from docx.document import Document as DocumentObject
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from resudoc.errors import InvalidFormat, ProcessingFailure
from resudoc.settings import settings

logger = structlog.get_logger(__name__)

# Local file header signature of a ZIP archive ("PK\x03\x04")
DOCX_SIGNATURE = b"PK\x03\x04"

VISIBLE_RUNS_XPATH = (
    "./w:r"
    " | ./w:hyperlink/w:r"
    " | ./w:ins/w:r"
    " | ./w:hyperlink/w:ins/w:r"
    " | ./w:ins/w:hyperlink/w:r"
)

RUN_WRAPPER_TAGS = (qn("w:hyperlink"), qn("w:ins"))


def check_container_signature(data: Optional[bytes], max_bytes: Optional[int] = None):
    """
    Rejects anything that is not a ZIP container before it reaches the parser.
    """
    if not data:
        raise InvalidFormat("Document content is empty or null")

    limit = settings.max_document_bytes if max_bytes is None else max_bytes
    if limit and len(data) > limit:
        raise InvalidFormat(f"Document is {len(data)} bytes, limit is {limit} bytes")

    if data[:4] != DOCX_SIGNATURE:
        raise InvalidFormat("Invalid DOCX file format. File must be a valid .docx document.")


def load_docx(data: bytes) -> DocumentObject:
    """
    Parses DOCX bytes into a fresh python-docx Document.
    Every call builds its own object tree, so independent calls never share state.
    """
    check_container_signature(data)
    try:
        return Document(BytesIO(data))
    except Exception as e:
        logger.error(f"DOCX parsing failed: {e}", exc_info=True)
        raise ProcessingFailure(f"Could not parse document: {e}") from e


def save_docx(doc: DocumentObject) -> bytes:
    try:
        stream = BytesIO()
        doc.save(stream)
        return stream.getvalue()
    except Exception as e:
        logger.error(f"DOCX serialization failed: {e}", exc_info=True)
        raise ProcessingFailure(f"Could not save document: {e}") from e


def iter_paragraphs(doc: DocumentObject) -> Iterator[Paragraph]:
    """Body paragraphs in document order (tables, headers and footers are not visited)."""
    yield from doc.paragraphs


def get_paragraph_runs(paragraph: Paragraph) -> List[Run]:
    """
    Visible runs of a paragraph in document order: direct runs plus runs wrapped in
    <w:hyperlink> and tracked insertions (<w:ins>), including either nested in the other.
    Deleted runs (<w:del>) are not visible and are left alone.
    python-docx's `paragraph.runs` only returns direct children.
    """
    return [Run(r, paragraph) for r in paragraph._p.xpath(VISIBLE_RUNS_XPATH)]


def get_paragraph_text(paragraph: Paragraph) -> str:
    """Concatenated run text. Recomputed on every call, never cached."""
    return "".join(run.text for run in get_paragraph_runs(paragraph))


def set_run_text(run: Run, text: str):
    """
    Replaces the run's content with `text`, keeping its <w:rPr>.
    Tabs and newlines become <w:tab/> and <w:br/> as python-docx does.
    """
    run.text = text


def remove_run(paragraph: Paragraph, index: int):
    """
    Removes the run at `index` (as returned by get_paragraph_runs).
    A hyperlink or tracked insertion left without runs is removed as well.
    """
    runs = get_paragraph_runs(paragraph)
    r_element = runs[index]._r
    parent = r_element.getparent()
    parent.remove(r_element)

    # Unwind emptied wrappers up to the paragraph (w:ins may sit inside w:hyperlink and vice versa)
    while parent.tag in RUN_WRAPPER_TAGS and not parent.findall(".//" + qn("w:r")):
        grandparent = parent.getparent()
        grandparent.remove(parent)
        parent = grandparent
