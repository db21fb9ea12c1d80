"""
Inline image payloads for the report PDF.

Photos, signatures and the logo arrive as base64 text, optionally as a
data URL. Decoding probes a short list of formats in order and the first
decoder that accepts the bytes wins.
"""

import base64
import binascii
import io
import logging
import re
from typing import Callable, Optional, Sequence, Union

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^\s*data:[^,]*?;base64,", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

ImagePayload = Union[str, bytes]


class ImageDecodeError(ValueError):
    """Raised when a payload cannot be read in any candidate format"""

    pass


def decode_payload(payload: ImagePayload) -> bytes:
    """
    Turn an inline image payload into raw bytes.

    Strings are base64 text with an optional ``data:<mime>;base64,`` prefix.
    Bytes are assumed to be raw image data already.
    """
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)

    text = _DATA_URL_PREFIX.sub("", payload, count=1)
    text = _WHITESPACE.sub("", text)
    # Browsers sometimes drop the padding
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image payload: {e}") from e


def _open_as(fmt: str) -> Callable[[bytes], Image.Image]:
    def decoder(data: bytes) -> Image.Image:
        img = Image.open(io.BytesIO(data), formats=[fmt])
        # Force a full decode so truncated files fail here, not in reportlab
        img.load()
        return img

    return decoder


# Tried in order, first success wins
IMAGE_DECODERS: tuple[tuple[str, Callable[[bytes], Image.Image]], ...] = (
    ("JPEG", _open_as("JPEG")),
    ("PNG", _open_as("PNG")),
)


def probe_image(data: bytes, formats: Optional[Sequence[str]] = None) -> tuple[str, Image.Image]:
    """
    Decode image bytes with the first matching decoder.

    Args:
        data: Raw image bytes
        formats: Restrict the probe list to these format names

    Returns:
        (format name, decoded PIL image)

    Raises:
        ImageDecodeError: If no decoder accepts the bytes
    """
    for fmt, decoder in IMAGE_DECODERS:
        if formats is not None and fmt not in formats:
            continue
        try:
            return fmt, decoder(data)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ):
            continue

    tried = ", ".join(f for f, _ in IMAGE_DECODERS if formats is None or f in formats)
    raise ImageDecodeError(f"Image is not a supported format (tried {tried})")


def load_image(
    payload: Optional[ImagePayload],
    label: str = "image",
    formats: Optional[Sequence[str]] = None,
) -> Optional[ImageReader]:
    """
    Decode a payload into a reportlab ImageReader.

    Returns None (and logs a warning) when the payload is missing or can't be
    decoded, so one bad image never aborts a render.
    """
    if not payload:
        return None

    try:
        fmt, img = probe_image(decode_payload(payload), formats=formats)
    except ImageDecodeError as e:
        logger.warning(f"⚠️ Skipping {label}: {e}")
        return None

    logger.debug(f"Decoded {label} as {fmt} ({img.width}x{img.height})")
    return ImageReader(img)
