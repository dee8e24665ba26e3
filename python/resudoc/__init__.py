from importlib.metadata import PackageNotFoundError, version

from resudoc.edits.engine import EditEngine, apply_accepted_edits
from resudoc.errors import InvalidFormat, ProcessingFailure
from resudoc.ingest import extract_text
from resudoc.models import EditOutcome, SuggestedEdit
from resudoc.normalize import normalize_text

try:
    __version__ = version("resudoc")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "EditEngine",
    "EditOutcome",
    "InvalidFormat",
    "ProcessingFailure",
    "SuggestedEdit",
    "apply_accepted_edits",
    "extract_text",
    "normalize_text",
    "__version__",
]
