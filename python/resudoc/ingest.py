import structlog

from resudoc.utils.docx import get_paragraph_text, iter_paragraphs, load_docx

logger = structlog.get_logger(__name__)


def extract_text(doc_bytes: bytes) -> str:
    """
    Plain text of every body paragraph in document order, each followed by a newline.
    Paragraph text is read the same way the edit matcher reads it.
    """
    doc = load_docx(doc_bytes)
    lines = [get_paragraph_text(p) for p in iter_paragraphs(doc)]
    logger.debug(f"Extracted {len(lines)} paragraphs.")
    return "".join(f"{line}\n" for line in lines)
