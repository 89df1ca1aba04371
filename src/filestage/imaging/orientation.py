"""
EXIF orientation normalisation for photos taken on phones.

Cameras usually store pixels in sensor order and record the rotation in
the EXIF Orientation tag. We rotate the pixels so the image displays
correctly without the tag, then reset the tag to 1 so viewers that do
honour it don't rotate a second time.

Only the three pure rotations are handled. Mirrored orientations
(2, 4, 5, 7) are left as they are.
"""

import io
import logging
from enum import IntEnum

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112

# Formats Pillow can write an EXIF block into
EXIF_WRITABLE_FORMATS = {"JPEG", "PNG", "WEBP", "TIFF"}

JPEG_QUALITY = 95


class Orientation(IntEnum):
    NORMAL = 1
    BOTTOM_RIGHT = 3  # stored upside down
    RIGHT_TOP = 6  # needs 90 degrees clockwise
    LEFT_BOTTOM = 8  # needs 90 degrees counter-clockwise


# Pillow's ROTATE_* constants turn counter-clockwise
_TRANSPOSE = {
    Orientation.RIGHT_TOP: Image.Transpose.ROTATE_270,
    Orientation.BOTTOM_RIGHT: Image.Transpose.ROTATE_180,
    Orientation.LEFT_BOTTOM: Image.Transpose.ROTATE_90,
}


def read_orientation(data: bytes) -> int | None:
    """Return the raw EXIF orientation value of *data*, if any."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.getexif().get(ORIENTATION_TAG)
    except (UnidentifiedImageError, OSError, ValueError):
        return None


def normalize_orientation(data: bytes) -> bytes:
    """
    Rotate *data* to its canonical orientation.

    Returns the input untouched if it isn't a readable image, carries no
    orientation tag, or carries a value other than 3, 6 or 8.
    """
    try:
        img = Image.open(io.BytesIO(data))
        exif = img.getexif()
    except (UnidentifiedImageError, OSError, ValueError):
        return data

    with img:
        value = exif.get(ORIENTATION_TAG)
        try:
            transpose = _TRANSPOSE[Orientation(value)]
        except (ValueError, KeyError):
            return data

        # Multi-picture phone JPEGs are re-saved as their primary JPEG frame
        fmt = "JPEG" if img.format == "MPO" else img.format
        icc_profile = img.info.get("icc_profile")
        rotated = img.transpose(transpose)

    exif[ORIENTATION_TAG] = int(Orientation.NORMAL)
    params = {}
    if fmt in EXIF_WRITABLE_FORMATS:
        params["exif"] = exif.tobytes()
    if icc_profile:
        params["icc_profile"] = icc_profile
    if fmt == "JPEG":
        params["quality"] = JPEG_QUALITY

    out = io.BytesIO()
    rotated.save(out, format=fmt, **params)
    logger.info(f"Rotated {fmt} image from orientation {value} to {Orientation.NORMAL.value}")
    return out.getvalue()
