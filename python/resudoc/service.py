"""
Request handling for base64 JSON payloads.

Decodes the incoming document, runs the edit engine or the exporter, and
folds every failure into a `success=False` response with a short message.
Full details are logged, only a summary is returned.
"""

import base64
import binascii
import datetime
from typing import Any, Dict

import structlog

from resudoc.edits.engine import apply_accepted_edits
from resudoc.errors import InvalidFormat
from resudoc.export import export_to_pdf
from resudoc.models import DocumentProcessRequest, DocumentProcessResponse, ExportRequest, ExportResponse
from resudoc.settings import settings

logger = structlog.get_logger(__name__)

SUPPORTED_EXPORT_FORMATS = ("pdf",)


def _decode_document(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFormat(f"Document is not valid base64: {e}") from e


def _encode_document(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def process_request(request: DocumentProcessRequest) -> DocumentProcessResponse:
    try:
        original = _decode_document(request.original_file)

        if request.job_description:
            # Edits were already tailored upstream; kept for request logs only
            logger.info(f"Processing document for job description ({len(request.job_description)} chars).")

        result = apply_accepted_edits(original, request.accepted_edits, request.suggested_edits)

        return DocumentProcessResponse(
            document=_encode_document(result.document),
            success=True,
            message="Document processed successfully",
            applied=result.applied,
            skipped=result.skipped,
            results=result.results,
        )

    except InvalidFormat as e:
        logger.error(f"Invalid document format: {e}")
        return DocumentProcessResponse(success=False, message=f"Invalid document format: {e}")
    except Exception as e:
        logger.error(f"Error processing document: {e}", exc_info=True)
        return DocumentProcessResponse(success=False, message=f"Failed to process document: {e}")


def export_request(request: ExportRequest) -> ExportResponse:
    try:
        if request.format.lower() not in SUPPORTED_EXPORT_FORMATS:
            raise InvalidFormat(f"Unsupported export format '{request.format}'")

        pdf_bytes = export_to_pdf(_decode_document(request.document))
        return ExportResponse(pdf=_encode_document(pdf_bytes), success=True, message="Document exported successfully")

    except InvalidFormat as e:
        logger.error(f"Invalid export request: {e}")
        return ExportResponse(success=False, message=f"Invalid document format: {e}")
    except Exception as e:
        logger.error(f"Error exporting document: {e}", exc_info=True)
        return ExportResponse(success=False, message=f"Failed to export document: {e}")


def health() -> Dict[str, Any]:
    return {
        "status": "OK",
        "service": settings.service_name,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
