"""
Service settings.

The defaults reproduce the public contract of the service; only the port and
the log level are read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import FrozenSet

from .env_init import read_int_env

DEFAULT_PORT = 3000
MAX_FILE_SIZE = 10 * 1024 * 1024
UPLOAD_FIELD_NAME = "image"

SUPPORTED_MIME_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/avif",
    "image/heic",
    "image/heif",
    "image/tiff",
    "image/bmp",
    "image/svg+xml",
    "image/x-icon",
})

SUPPORTED_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif",
    ".heic", ".heif", ".tiff", ".tif", ".bmp", ".svg",
})


@dataclass(frozen=True)
class Settings:
    """Configuration owned by one application instance."""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    max_file_size: int = MAX_FILE_SIZE
    field_name: str = UPLOAD_FIELD_NAME
    allowed_mime_types: FrozenSet[str] = field(default=SUPPORTED_MIME_TYPES)
    allowed_extensions: FrozenSet[str] = field(default=SUPPORTED_EXTENSIONS)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            port=read_int_env("PORT", DEFAULT_PORT, minimum=1),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
