"""Exceptions raised while reading uploaded drawings."""

from __future__ import annotations

UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please upload a DXF or SVG file."


class UnsupportedFileTypeError(ValueError):
    """Raised when an upload is neither .dxf nor .svg."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(UNSUPPORTED_FILE_MESSAGE)


class DrawingParseError(ValueError):
    """Raised when drawing content cannot be parsed as the detected format."""

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Could not read {kind} drawing: {reason}")
