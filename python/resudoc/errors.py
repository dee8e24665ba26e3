"""
Exception types raised by resudoc.

Skipped edits are reported as outcomes, never as exceptions. Only problems
with the document container itself abort a call.
"""


class ResudocError(Exception):
    """Base exception for all resudoc errors."""

    pass


class InvalidFormat(ResudocError, ValueError):
    """
    Raised when input bytes are not a DOCX container.

    Covers empty input, oversized input, a missing ZIP signature, undecodable
    base64 payloads and unsupported export formats. Raised before any parsing
    is attempted.
    """

    pass


class ProcessingFailure(ResudocError):
    """Raised when a structurally valid container cannot be parsed, edited or saved."""

    pass
