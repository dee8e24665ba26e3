import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from mcp.server.fastmcp import FastMCP

from resudoc.edits.engine import EditEngine
from resudoc.export import export_to_pdf
from resudoc.ingest import extract_text
from resudoc.models import DocumentProcessRequest, DocumentProcessResponse, SuggestedEdit
from resudoc.service import health, process_request
from resudoc.settings import settings

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO
logging.basicConfig(stream=sys.stderr, level=LOG_LEVEL, force=True)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL),
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP(settings.service_name)


def _read_file_bytes(path: str) -> bytes:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(p, "rb") as f:
        return f.read()


def _save_bytes(data: bytes, path: str):
    with open(path, "wb") as f:
        f.write(data)


@mcp.tool()
def read_docx_text(file_path: str) -> str:
    """
    Reads a DOCX file and returns the plain text of its body paragraphs, one per line.
    Use this to see the exact paragraph text that suggested edits must target.

    Args:
        file_path: Absolute path to the DOCX file.
    """
    try:
        return extract_text(_read_file_bytes(file_path))
    except Exception as e:
        return f"Error reading file: {str(e)}"


@mcp.tool()
def process_docx(
    original_docx_path: str,
    suggested_edits: List[SuggestedEdit],
    accepted_edits: List[int],
    output_path: Optional[str] = None,
) -> str:
    """
    Applies the accepted suggestions to a DOCX file.

    Matching Strategy:
    - Each suggestion targets a whole paragraph. `bulletOriginal` is used when present, else `original`.
    - Paragraph text and target are compared after collapsing whitespace; the first matching paragraph wins.
    - The paragraph is rewritten with `bulletImproved` (else `suggested`), keeping the formatting of its first run.

    Args:
        original_docx_path: Absolute path to the source file.
        suggested_edits: The full list of suggestions, as produced by the optimiser.
        accepted_edits: 0-based indices into `suggested_edits` the user approved. Unknown indices are ignored.
        output_path: Optional. Defaults to '<name>_optimized.docx' next to the source
        (or the source itself if it already ends in _optimized).
    """
    try:
        engine = EditEngine(_read_file_bytes(original_docx_path))
        applied, skipped = engine.apply_edits(accepted_edits, suggested_edits)

        if not output_path:
            p = Path(original_docx_path)
            if p.stem.endswith("_optimized"):
                output_path = str(p)
            else:
                output_path = str(p.parent / f"{p.stem}_optimized{p.suffix}")

        _save_bytes(engine.save_to_bytes(), output_path)

        return f"Applied {applied} edits. Skipped {skipped} edits. Saved to: {output_path}"

    except Exception as e:
        return f"Error applying edits: {str(e)}"


@mcp.tool()
def export_docx_to_pdf(docx_path: str, output_path: Optional[str] = None) -> str:
    """
    Exports a DOCX file to PDF.
    Note: the current exporter produces a fixed placeholder page, not a faithful rendering.
    """
    try:
        pdf_bytes = export_to_pdf(_read_file_bytes(docx_path))

        if not output_path:
            output_path = str(Path(docx_path).with_suffix(".pdf"))

        _save_bytes(pdf_bytes, output_path)
        return f"Exported PDF. Saved to: {output_path}"
    except Exception as e:
        return f"Error exporting document: {str(e)}"


@mcp.tool()
def process_document_payload(request: DocumentProcessRequest) -> DocumentProcessResponse:
    """
    Same as process_docx, but the document travels inline as base64 (`originalFile`)
    and the result comes back as base64 in `document`.
    """
    return process_request(request)


@mcp.tool()
def health_check() -> Dict[str, Any]:
    """Reports that the document service is up."""
    return health()


def main():
    mcp.run()


if __name__ == "__main__":
    main()
