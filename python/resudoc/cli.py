import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import structlog
from pydantic import TypeAdapter, ValidationError

from resudoc import __version__
from resudoc.edits.engine import EditEngine
from resudoc.errors import ResudocError
from resudoc.export import export_to_pdf
from resudoc.ingest import extract_text
from resudoc.models import EditOutcome, SuggestedEdit
from resudoc.settings import settings

EDITS_ADAPTER = TypeAdapter(List[SuggestedEdit])
ACCEPTED_ADAPTER = TypeAdapter(Optional[List[int]])


def _configure_logging():
    # stdout carries command output (e.g. `extract`); logs go to stderr only
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _read_bytes(path: Path) -> bytes:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    with open(path, "rb") as f:
        return f.read()


def _load_edits_from_json(path: Path) -> Tuple[List[SuggestedEdit], Optional[List[int]]]:
    """
    Accepts either a bare list of suggestions or the web backend's payload shape:
    {"suggestedEdits": [...], "acceptedEdits": [...]}.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        accepted = None
        if isinstance(data, dict):
            accepted = ACCEPTED_ADAPTER.validate_python(data.get("acceptedEdits"), strict=True)
            data = data.get("suggestedEdits", [])

        return EDITS_ADAPTER.validate_python(data), accepted
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error parsing JSON edits: {e}", file=sys.stderr)
        sys.exit(1)


def handle_extract(args):
    text = extract_text(_read_bytes(args.input))
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Extracted text to {args.output}", file=sys.stderr)
    else:
        print(text, end="")


def handle_apply(args):
    edits, accepted = _load_edits_from_json(args.edits)

    if args.accept is not None:
        accepted = args.accept
    elif accepted is None:
        accepted = list(range(len(edits)))

    print(f"Applying {len(accepted)} of {len(edits)} suggested edits...", file=sys.stderr)

    engine = EditEngine(_read_bytes(args.original))
    applied, skipped = engine.apply_edits(accepted, edits)

    output_path = args.output
    if not output_path:
        if args.original.stem.endswith("_optimized"):
            output_path = args.original
        else:
            output_path = args.original.with_name(f"{args.original.stem}_optimized.docx")

    with open(output_path, "wb") as f:
        f.write(engine.save_to_bytes())

    print(f"✅ Saved to {output_path}", file=sys.stderr)
    print(f"Stats: {applied} applied, {skipped} skipped.", file=sys.stderr)
    for result in engine.results:
        if result.outcome != EditOutcome.APPLIED:
            print(f"  [{result.index}] {result.outcome.value}", file=sys.stderr)

    if args.strict and skipped > 0:
        sys.exit(1)


def handle_export(args):
    pdf_bytes = export_to_pdf(_read_bytes(args.input))
    output_path = args.output or args.input.with_suffix(".pdf")
    with open(output_path, "wb") as f:
        f.write(pdf_bytes)
    print(f"✅ Saved PDF to {output_path}", file=sys.stderr)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="resudoc", description="Resudoc: apply accepted CV edits to DOCX files")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_extract = subparsers.add_parser("extract", help="Extract paragraph text from a DOCX file")
    p_extract.add_argument("input", type=Path, help="Input DOCX file")
    p_extract.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_extract.set_defaults(func=handle_extract)

    p_apply = subparsers.add_parser("apply", help="Apply accepted suggestions to a DOCX")
    p_apply.add_argument("original", type=Path, help="Original DOCX")
    p_apply.add_argument("edits", type=Path, help="JSON file with suggested edits")
    p_apply.add_argument(
        "-a",
        "--accept",
        type=int,
        nargs="*",
        help="Indices of accepted suggestions (default: acceptedEdits from the JSON, else all)",
    )
    p_apply.add_argument("-o", "--output", type=Path, help="Output DOCX path")
    p_apply.add_argument("--strict", action="store_true", help="Exit with status 1 if any edit was skipped")
    p_apply.set_defaults(func=handle_apply)

    p_export = subparsers.add_parser("export", help="Export a DOCX to PDF (placeholder page)")
    p_export.add_argument("input", type=Path, help="Input DOCX file")
    p_export.add_argument("-o", "--output", type=Path, help="Output PDF path (default: input.pdf)")
    p_export.set_defaults(func=handle_export)

    args = parser.parse_args(argv)
    _configure_logging()
    try:
        args.func(args)
    except ResudocError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
