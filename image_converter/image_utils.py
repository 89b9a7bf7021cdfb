"""
Image utility helpers.

Normalizes uploaded images of any supported container format into RGBA PNG.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO

from PIL import Image
from pillow_heif import register_heif_opener

from .errors import ImageConversionError

# HEIC/HEIF decoding; must run before any Image.open() call
register_heif_opener()

OUTPUT_MIME_TYPE = "image/png"
OUTPUT_COLOR_SPACE = "RGBA"

_SVG_SNIFF_BYTES = 1024

# integer grayscale modes holding 16-bit samples; "I" is what TIFF and older
# Pillow releases produce for 16-bit data
HIGH_BIT_DEPTH_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


@dataclass
class ConversionResult:
    """PNG produced from one upload."""
    png: bytes
    width: int
    height: int
    source_mode: str

    @property
    def size(self) -> int:
        return len(self.png)

    def to_base64(self) -> str:
        return base64.b64encode(self.png).decode("ascii")


def looks_like_svg(content: bytes) -> bool:
    head = content[:_SVG_SNIFF_BYTES].lstrip(b"\xef\xbb\xbf \t\r\n").lower()
    if head.startswith(b"<svg"):
        return True
    return head.startswith((b"<?xml", b"<!doctype svg", b"<!--")) and b"<svg" in head


def rasterize_svg(content: bytes) -> bytes:
    """Render SVG markup to PNG bytes at its intrinsic size."""
    # cairosvg needs the system cairo library, so it is only loaded for SVG input
    import cairosvg

    return cairosvg.svg2png(bytestring=content)


def _open_image(content: bytes) -> Image.Image:
    if looks_like_svg(content):
        content = rasterize_svg(content)
    img = Image.open(BytesIO(content))
    # Image.open is lazy; force the decode so truncated data fails here
    img.load()
    return img


def _to_8bit(img: Image.Image) -> Image.Image:
    """Scale 16-bit integer grayscale down to 8-bit L instead of clipping at 255."""
    return img.convert("I").point(lambda v: v * (1 / 256)).convert("L")


def _ensure_alpha(img: Image.Image) -> Image.Image:
    if img.mode == OUTPUT_COLOR_SPACE:
        return img
    if img.mode in HIGH_BIT_DEPTH_MODES:
        img = _to_8bit(img)
    try:
        return img.convert(OUTPUT_COLOR_SPACE)
    except ValueError:
        # modes without a direct RGBA conversion go through RGB
        return img.convert("RGB").convert(OUTPUT_COLOR_SPACE)


def convert_image_bytes_to_png(content: bytes) -> ConversionResult:
    """
    Convert arbitrary image bytes (jpg/png/gif/webp/avif/heic/tiff/bmp/svg/ico)
    into RGBA PNG bytes.

    Images without an alpha channel get a fully opaque one. Multi-frame
    images contribute their first frame.

    Raises:
        ImageConversionError: if the bytes cannot be decoded or re-encoded.
    """
    try:
        with _open_image(content) as img:
            source_mode = img.mode
            rgba = _ensure_alpha(img)
            out = BytesIO()
            rgba.save(out, format="PNG")
            return ConversionResult(
                png=out.getvalue(),
                width=rgba.width,
                height=rgba.height,
                source_mode=source_mode,
            )
    except Exception as e:
        raise ImageConversionError(str(e) or e.__class__.__name__) from e
