from typing import List, Optional, Sequence

import structlog

from resudoc.edits.matcher import find_paragraph
from resudoc.edits.merger import merge_runs
from resudoc.edits.resolver import resolve_edit
from resudoc.errors import ProcessingFailure
from resudoc.models import EditOutcome, EditResult, ProcessResult, SuggestedEdit
from resudoc.utils.docx import iter_paragraphs, load_docx, save_docx

logger = structlog.get_logger(__name__)


class EditEngine:
    """
    Applies accepted suggestions to one DOCX document.

    Each accepted index is handled on its own, in the order given, against the
    current state of the document: once an edit lands, its paragraph reads as
    the replacement and a repeated edit no longer matches. Unusable indices,
    unresolvable suggestions and missing targets are skipped, never raised.
    Parse, edit and save failures raise ProcessingFailure and abort the whole batch.
    """

    def __init__(self, doc_bytes: bytes):
        self.doc = load_docx(doc_bytes)
        self.results: List[EditResult] = []

    def apply_edits(self, accepted_edits: Sequence[int], suggested_edits: Sequence[SuggestedEdit]) -> tuple[int, int]:
        applied = 0
        skipped = 0

        for index in accepted_edits:
            result = self._apply_single_edit(index, suggested_edits)
            self.results.append(result)
            if result.outcome == EditOutcome.APPLIED:
                applied += 1
            else:
                skipped += 1

        logger.info("Edit batch finished", applied=applied, skipped=skipped)
        return applied, skipped

    def _apply_single_edit(self, index: int, suggested_edits: Sequence[SuggestedEdit]) -> EditResult:
        # Stale clients may send indices from an older suggestion list
        if index < 0 or index >= len(suggested_edits):
            logger.warning(f"Skipping edit {index}: index out of range (0..{len(suggested_edits) - 1}).")
            return EditResult(index=index, outcome=EditOutcome.SKIPPED_BAD_INDEX)

        resolved = resolve_edit(suggested_edits[index])
        if resolved is None:
            logger.warning(f"Skipping edit {index}: no usable target/replacement text.")
            return EditResult(index=index, outcome=EditOutcome.SKIPPED_UNRESOLVABLE)

        try:
            paragraph = find_paragraph(iter_paragraphs(self.doc), resolved.target)
            merged = paragraph is not None and merge_runs(paragraph, resolved.replacement)
        except Exception as e:
            logger.error(f"Failed to apply edit {index}: {e}", exc_info=True)
            raise ProcessingFailure(f"Failed to apply edit {index}: {e}") from e

        if not merged:
            logger.warning(f"Skipping edit {index}: target '{resolved.target[:30]}...' not found.")
            return EditResult(index=index, outcome=EditOutcome.SKIPPED_NO_MATCH, target=resolved.target)

        logger.info(f"Applied edit {index}.")
        return EditResult(index=index, outcome=EditOutcome.APPLIED, target=resolved.target)

    def save_to_bytes(self) -> bytes:
        return save_docx(self.doc)


def apply_accepted_edits(
    doc_bytes: bytes,
    accepted_edits: Optional[Sequence[int]],
    suggested_edits: Optional[Sequence[SuggestedEdit]],
) -> ProcessResult:
    """Loads, edits and re-serializes a document in one call."""
    engine = EditEngine(doc_bytes)
    engine.apply_edits(accepted_edits or [], suggested_edits or [])
    return ProcessResult(document=engine.save_to_bytes(), results=engine.results)
