"""Decoding of base64 image payloads posted by browser clients."""

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

# Only these are stripped, and only with this exact casing
DATA_URI_PREFIXES = (
    "data:image/png;base64,",
    "data:image/jpg;base64,",
    "data:image/jpeg;base64,",
    "data:image/gif;base64,",
)

# Pillow format name -> extension we stage the file under
FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    "MPO": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "BMP": "bmp",
}


class ImagePayloadError(ValueError):
    """Raised when a payload is not valid base64."""
    pass


def decode_image_payload(raw: str) -> bytes:
    """
    Turn a (possibly data-URI prefixed) base64 string into bytes.

    Form encoding turns ``+`` into a space on the way in, so spaces are
    turned back into ``+`` before decoding. Any other data-URI prefix is
    left in place and will fail to decode.
    """
    cleaned = raw.replace(" ", "+")
    for prefix in DATA_URI_PREFIXES:
        cleaned = cleaned.replace(prefix, "")

    try:
        return base64.b64decode(cleaned)
    except (binascii.Error, ValueError) as e:
        raise ImagePayloadError(f"Invalid base64 image payload: {e}") from e


def infer_extension_from_image_bytes(data: bytes) -> str:
    """Return jpg, png, gif or bmp for recognised images, "" otherwise."""
    if not data:
        return ""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError):
        return ""
    return FORMAT_EXTENSIONS.get(fmt, "")
