from .base64_decoder import (
    ImagePayloadError,
    decode_image_payload,
    infer_extension_from_image_bytes,
)
from .orientation import Orientation, normalize_orientation, read_orientation

__all__ = [
    "ImagePayloadError",
    "decode_image_payload",
    "infer_extension_from_image_bytes",
    "Orientation",
    "normalize_orientation",
    "read_orientation",
]
