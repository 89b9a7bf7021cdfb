"""
Streaming reader for the single-file multipart upload.

Parses a multipart/form-data body chunk by chunk, keeps only the file part of
the upload field in memory and stops reading as soon as a limit is broken:
the type check runs when the part headers arrive, the size check while the
part data is being collected.
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, Optional

import python_multipart as multipart
from python_multipart.multipart import parse_options_header

from .errors import FileTooLarge, MissingImageFile, UnsupportedFileType
from .logging_config import get_logger
from .upload_validator import UploadedImage, UploadTypeValidator

logger = get_logger("upload")

DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


def _decode_header(value: bytes) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return value.decode("latin-1")


class MultipartImageReader:
    """Extracts one image file part from a multipart body."""

    def __init__(self, field_name: str, max_file_size: int, validator: UploadTypeValidator):
        self.field_name = field_name
        self.max_file_size = max_file_size
        self.validator = validator

        self._header_name = b""
        self._header_value = b""
        self._part_headers: Dict[bytes, bytes] = {}
        self._collecting = False
        self._filename = ""
        self._content_type = ""
        self._buffer = bytearray()
        self._result: Optional[UploadedImage] = None

    # ---------- parser callbacks ----------

    def on_part_begin(self) -> None:
        self._part_headers = {}

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._part_headers[self._header_name.lower()] = self._header_value
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._part_headers.get(b"content-disposition", b""))
        name = _decode_header(options.get(b"name", b""))

        # only the first file part of the upload field is kept; extra file parts and
        # files under other field names are skipped rather than rejected, so a
        # request without a usable image part ends as MissingImageFile (400)
        if name != self.field_name or b"filename" not in options or self._result is not None:
            return

        filename = _decode_header(options[b"filename"])
        raw_type = self._part_headers.get(b"content-type")
        if raw_type:
            mime, _ = parse_options_header(raw_type)
            content_type = _decode_header(mime).lower()
        else:
            content_type = DEFAULT_FILE_CONTENT_TYPE

        check = self.validator.check(filename, content_type)
        if not check.accepted:
            logger.warning(f"Upload {filename!r} ({content_type}) {check}: not an image")
            raise UnsupportedFileType()
        logger.debug(f"Upload {filename!r} ({content_type}) {check}")

        self._collecting = True
        self._filename = filename
        self._content_type = content_type
        self._buffer = bytearray()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if not self._collecting:
            return
        self._buffer += data[start:end]
        if len(self._buffer) > self.max_file_size:
            logger.warning(f"Rejected upload {self._filename!r}: exceeds {self.max_file_size} bytes")
            raise FileTooLarge(self.max_file_size)

    def on_part_end(self) -> None:
        if not self._collecting:
            return
        self._collecting = False
        self._result = UploadedImage(
            content=bytes(self._buffer),
            content_type=self._content_type,
            filename=self._filename,
        )
        self._buffer = bytearray()

    # ---------- entry point ----------

    async def read(self, content_type: Optional[str], stream: AsyncIterator[bytes]) -> UploadedImage:
        """
        Consume the request body and return the uploaded image.

        Raises:
            MissingImageFile: the body is not multipart or has no file part for the field.
            UnsupportedFileType: neither the MIME type nor the extension looks like an image.
            FileTooLarge: the file part is larger than the configured limit.
            ValueError: the multipart body is malformed.
        """
        media_type, params = parse_options_header(content_type)
        if media_type.lower() != b"multipart/form-data":
            raise MissingImageFile()

        boundary = params.get(b"boundary")
        if not boundary:
            raise ValueError("Missing boundary in multipart/form-data body")

        callbacks = {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
        }
        parser = multipart.MultipartParser(boundary, callbacks)

        async for chunk in stream:
            parser.write(chunk)
        parser.finalize()

        if self._result is None:
            raise MissingImageFile()
        return self._result
