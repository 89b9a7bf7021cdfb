"""
Error kinds raised by the upload and conversion stages.

Every error carries its HTTP status and response body, so the web layer maps
them by type rather than by message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

MIB = 1024 * 1024


class ConverterError(Exception):
    """Base class for classified service errors."""

    kind = "internal"
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class UploadError(ConverterError):
    """Client input rejected before conversion."""

    kind = "upload"
    status_code = 400


class MissingImageFile(UploadError):
    kind = "missing_file"
    message = 'No image file provided. Please upload an image using the "image" field.'


class UnsupportedFileType(UploadError):
    kind = "unsupported_type"
    message = "Only image files are allowed!"


class FileTooLarge(UploadError):
    kind = "file_too_large"

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"File too large. Maximum size is {limit // MIB}MB.")


class ImageConversionError(ConverterError):
    """The codec could not decode or re-encode the uploaded bytes."""

    kind = "conversion"
    message = "Failed to convert image"

    def __init__(self, details: str):
        self.details = details
        super().__init__()

    def __str__(self) -> str:
        return f"{self.message}: {self.details}"

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}
