from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SuggestedEdit(BaseModel):
    """
    A single proposed change produced by the upstream optimiser.

    Two priority pairs: the bullet-level fields win over the whole-line
    fields when they are present and non-empty.
    """

    model_config = ConfigDict(populate_by_name=True)

    section: Optional[str] = Field(None, description="Resume section the edit belongs to. Not used for matching.")
    original: Optional[str] = Field(None, description="Paragraph text to replace.")
    suggested: Optional[str] = Field(None, description="Replacement text for `original`.")
    reason: Optional[str] = Field(None, description="Justification shown to the user. Not used for matching.")

    bullet_original: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("bullet_original", "bulletOriginal", "originalBullet"),
        serialization_alias="bulletOriginal",
        description="Bullet-level target text. Preferred over `original`.",
    )
    bullet_improved: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("bullet_improved", "bulletImproved", "improvedBullet"),
        serialization_alias="bulletImproved",
        description="Bullet-level replacement text. Preferred over `suggested`.",
    )


class ResolvedEdit(NamedTuple):
    target: str
    replacement: str


class EditOutcome(str, Enum):
    APPLIED = "applied"
    SKIPPED_NO_MATCH = "skipped_no_match"
    SKIPPED_BAD_INDEX = "skipped_bad_index"
    SKIPPED_UNRESOLVABLE = "skipped_unresolvable"


class EditResult(BaseModel):
    """What happened to one accepted edit index."""

    index: int
    outcome: EditOutcome
    target: Optional[str] = None


@dataclass
class ProcessResult:
    document: bytes
    results: List[EditResult] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return sum(1 for r in self.results if r.outcome == EditOutcome.APPLIED)

    @property
    def skipped(self) -> int:
        return len(self.results) - self.applied


# --- Request / response envelopes ---
# Documents travel as base64 strings; field names follow the JSON payloads
# sent by the web backend (camelCase).


class DocumentProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_file: str = Field(..., alias="originalFile", description="Base64 encoded DOCX.")
    accepted_edits: List[int] = Field(default_factory=list, alias="acceptedEdits")
    suggested_edits: List[SuggestedEdit] = Field(default_factory=list, alias="suggestedEdits")
    job_description: Optional[str] = Field(None, alias="jobDescription")


class DocumentProcessResponse(BaseModel):
    document: Optional[str] = Field(None, description="Base64 encoded DOCX with accepted edits merged in.")
    success: bool
    message: str
    applied: int = 0
    skipped: int = 0
    results: List[EditResult] = Field(default_factory=list)


class ExportRequest(BaseModel):
    document: str = Field(..., description="Base64 encoded DOCX.")
    format: str = "pdf"


class ExportResponse(BaseModel):
    pdf: Optional[str] = Field(None, description="Base64 encoded PDF.")
    success: bool
    message: str
