from __future__ import annotations

import base64
import binascii
import io
import math

from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_coordinate(value, field_name: str, *, limit: float) -> float:
    """Coerce a latitude/longitude in decimal degrees, bounded by +/- limit."""

    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not math.isfinite(number) or abs(number) > limit:
        raise ValidationError(f"{field_name} is out of range")
    return number


def decode_photo_data_uri(value: str | None) -> tuple[bytes, str]:
    """Decode a ``data:image/<type>;base64,<payload>`` URI.

    Returns the raw bytes and the MIME type. The payload must be a decodable
    image; anything else is rejected before it reaches the fraud assessor.
    """

    value = require_non_empty(value, "Photo")
    if not value.startswith("data:image/"):
        raise ValidationError("Photo must be an image data URI")

    header, sep, payload = value.partition(",")
    if not sep or not payload or not header.endswith(";base64"):
        raise ValidationError("Photo must be base64 encoded")
    mime_type = header[len("data:"):-len(";base64")]

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Photo is not valid base64") from None
    if not data:
        raise ValidationError("Photo is empty")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, DecompressionBombError, OSError, SyntaxError):
        raise ValidationError("Photo is not a readable image") from None

    return data, mime_type
