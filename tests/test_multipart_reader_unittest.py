import asyncio
import unittest

from image_converter.config import SUPPORTED_EXTENSIONS, SUPPORTED_MIME_TYPES
from image_converter.errors import FileTooLarge, MissingImageFile, UnsupportedFileType
from image_converter.multipart_reader import MultipartImageReader
from image_converter.upload_validator import UploadTypeValidator

BOUNDARY = "testboundary123"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def _part(name, data, filename=None, content_type=None) -> bytes:
    disposition = f'form-data; name="{name}"'
    if filename is not None:
        disposition += f'; filename="{filename}"'
    headers = [f"Content-Disposition: {disposition}"]
    if content_type:
        headers.append(f"Content-Type: {content_type}")
    head = "\r\n".join(headers).encode() + b"\r\n\r\n"
    return f"--{BOUNDARY}\r\n".encode() + head + data + b"\r\n"


def _body(*parts) -> bytes:
    return b"".join(parts) + f"--{BOUNDARY}--\r\n".encode()


async def _chunks(body: bytes, size: int):
    for i in range(0, len(body), size):
        yield body[i:i + size]


class TestMultipartImageReader(unittest.TestCase):
    def _reader(self, max_file_size=1024):
        validator = UploadTypeValidator(SUPPORTED_MIME_TYPES, SUPPORTED_EXTENSIONS)
        return MultipartImageReader("image", max_file_size, validator)

    def _read(self, body, content_type=CONTENT_TYPE, chunk_size=7, max_file_size=1024):
        return asyncio.run(self._reader(max_file_size).read(content_type, _chunks(body, chunk_size)))

    def test_reads_file_split_across_chunks(self):
        body = _body(
            _part("caption", b"hello"),
            _part("image", b"\x89PNG-bytes", filename="pic.png", content_type="image/png"),
        )

        upload = self._read(body, chunk_size=3)

        self.assertEqual(upload.content, b"\x89PNG-bytes")
        self.assertEqual(upload.filename, "pic.png")
        self.assertEqual(upload.content_type, "image/png")
        self.assertEqual(upload.size, 10)

    def test_content_type_parameters_and_case_are_dropped(self):
        body = _body(_part("image", b"abc", filename="a.jpg", content_type="Image/JPEG; q=1"))

        upload = self._read(body)

        self.assertEqual(upload.content_type, "image/jpeg")

    def test_missing_content_type_defaults_to_octet_stream(self):
        body = _body(_part("image", b"abc", filename="a.webp"))

        upload = self._read(body)

        self.assertEqual(upload.content_type, "application/octet-stream")

    def test_first_image_part_wins(self):
        body = _body(
            _part("image", b"first", filename="one.png", content_type="image/png"),
            _part("image", b"second", filename="two.png", content_type="image/png"),
        )

        self.assertEqual(self._read(body).content, b"first")

    def test_field_without_filename_is_not_a_file(self):
        body = _body(_part("image", b"text value"))

        with self.assertRaises(MissingImageFile):
            self._read(body)

    def test_non_multipart_request(self):
        with self.assertRaises(MissingImageFile):
            self._read(b"image=abc", content_type="application/x-www-form-urlencoded")

    def test_type_rejected_before_size(self):
        body = _body(_part("image", b"x" * 4096, filename="notes.txt", content_type="text/plain"))

        with self.assertRaises(UnsupportedFileType):
            self._read(body, chunk_size=512)

    def test_rejection_is_logged_with_check_outcome(self):
        body = _body(_part("image", b"hello", filename="notes.txt", content_type="text/plain"))

        with self.assertLogs("image_converter.upload", level="WARNING") as logs:
            with self.assertRaises(UnsupportedFileType):
                self._read(body)

        self.assertIn("notes.txt", logs.output[0])
        self.assertIn("rejected", logs.output[0])

    def test_oversized_file(self):
        body = _body(_part("image", b"x" * 4096, filename="big.png", content_type="image/png"))

        with self.assertRaises(FileTooLarge) as ctx:
            self._read(body, chunk_size=512)
        self.assertEqual(ctx.exception.limit, 1024)

    def test_other_large_fields_are_not_buffered(self):
        body = _body(
            _part("attachment", b"x" * 4096, filename="big.png", content_type="image/png"),
            _part("image", b"ok", filename="small.png", content_type="image/png"),
        )

        self.assertEqual(self._read(body).content, b"ok")

    def test_missing_boundary(self):
        with self.assertRaises(ValueError):
            self._read(b"", content_type="multipart/form-data")


if __name__ == "__main__":
    unittest.main()
