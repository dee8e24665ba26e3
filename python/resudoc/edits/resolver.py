from typing import Optional

from resudoc.models import ResolvedEdit, SuggestedEdit
from resudoc.normalize import normalize_text


def _prefer(primary: Optional[str], fallback: Optional[str]) -> Optional[str]:
    # Empty primary falls through to the fallback field
    if primary:
        return primary
    return fallback


def resolve_edit(edit: SuggestedEdit) -> Optional[ResolvedEdit]:
    """
    Picks the target and replacement strings for an edit.

    Bullet-level fields take precedence over `original`/`suggested`. Returns
    None when the edit cannot be applied: a missing value on either side, a
    target that is blank once normalized (it would match empty spacer
    paragraphs), or an empty replacement.
    """
    target = _prefer(edit.bullet_original, edit.original)
    replacement = _prefer(edit.bullet_improved, edit.suggested)

    if target is None or replacement is None:
        return None

    if not normalize_text(target) or replacement == "":
        return None

    return ResolvedEdit(target=target, replacement=replacement)
