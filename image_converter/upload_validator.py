"""
Upload type checks.

The declared MIME type and the filename extension are client-supplied hints.
Either one looking like an image is enough to accept the upload; the bytes
themselves are only checked when the codec decodes them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass
class UploadedImage:
    """One uploaded file, held in memory for the lifetime of a request."""
    content: bytes
    content_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class TypeCheckResult:
    """Outcome of the MIME/extension heuristic."""
    image_mime: bool
    image_extension: bool

    @property
    def accepted(self) -> bool:
        return self.image_mime or self.image_extension

    def __str__(self) -> str:
        if not self.accepted:
            return "rejected"
        signals = [name for name, ok in (("mime", self.image_mime), ("extension", self.image_extension)) if ok]
        return "accepted by " + "+".join(signals)


def file_extension(filename: str) -> str:
    """Lower-cased text from the last '.' (including it), or '' when there is none."""
    index = filename.rfind(".")
    if index < 0:
        return ""
    return filename[index:].lower()


class UploadTypeValidator:
    """OR-policy check over declared MIME type and filename extension."""

    def __init__(self, allowed_mime_types: Iterable[str], allowed_extensions: Iterable[str]):
        self.allowed_mime_types = frozenset(m.lower() for m in allowed_mime_types)
        self.allowed_extensions = frozenset(e.lower() for e in allowed_extensions)

    def is_image_mime(self, content_type: str) -> bool:
        content_type = (content_type or "").lower()
        return content_type.startswith("image/") or content_type in self.allowed_mime_types

    def is_image_extension(self, filename: str) -> bool:
        return file_extension(filename or "") in self.allowed_extensions

    def check(self, filename: str, content_type: str) -> TypeCheckResult:
        return TypeCheckResult(
            image_mime=self.is_image_mime(content_type),
            image_extension=self.is_image_extension(filename),
        )
