import re
from typing import Optional

WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """
    Canonical comparison form of a text value: trimmed, with every run of
    whitespace collapsed to a single space.

    Only used to compare paragraph text against edit targets. The literal
    replacement text is what gets written into the document.
    """
    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(" ", text).strip()
