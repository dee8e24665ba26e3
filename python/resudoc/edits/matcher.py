from typing import Iterable, Optional

from docx.text.paragraph import Paragraph

from resudoc.normalize import normalize_text
from resudoc.utils.docx import get_paragraph_text


def find_paragraph(paragraphs: Iterable[Paragraph], target: str) -> Optional[Paragraph]:
    """
    Returns the first paragraph whose normalized text equals the normalized target.

    First match wins: when several paragraphs read the same, only the earliest
    one is ever returned. None means the target is no longer in the document.
    """
    wanted = normalize_text(target)
    return next(
        (p for p in paragraphs if normalize_text(get_paragraph_text(p)) == wanted),
        None,
    )
