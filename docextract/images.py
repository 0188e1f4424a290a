"""
Image Extraction Module

Decodes image XObjects addressed by their indirect object number.
PNG encoding is done by MuPDF, pixel access by Pillow.
"""

from __future__ import annotations

import io

import fitz  # PyMuPDF
from PIL import Image

from .exceptions import (
    CreatePixmapError,
    NotImageError,
    ObjectMissingError,
    PixmapSamplesError,
)
from .logging_config import get_logger

logger = get_logger(__name__)

# The only colorspaces MuPDF's PNG writer accepts. Separation, Lab, CMYK
# and ICC-based pixmaps must be converted first, whatever their component
# count.
_PNG_COLORSPACES = (fitz.csGRAY.name, fitz.csRGB.name)


def is_image(native: fitz.Document, object_number: int) -> bool:
    """Check whether the object's dictionary has ``/Subtype /Image``."""
    try:
        kind, value = native.xref_get_key(object_number, "Subtype")
    except Exception as exc:
        # An unreadable object cannot be decoded either; scans treat it as
        # any other non-image.
        logger.warning("Cannot read object %d: %s", object_number, exc)
        return False
    return kind == "name" and value == "/Image"


def extract_image_bytes(
    native: fitz.Document,
    object_number: int,
    object_total: int,
    convert_to_rgb: bool = True,
) -> bytes:
    """
    Decode an image object and return it PNG-encoded.

    Args:
        native: Open PyMuPDF document
        object_number: Indirect object number (1-based)
        object_total: Size of the cross-reference table
        convert_to_rgb: Convert non-gray, non-RGB colorspaces before encoding

    Returns:
        PNG bytes

    Raises:
        ObjectMissingError: object_number outside [1, object_total)
        NotImageError: the object exists but is not an image
        CreatePixmapError: MuPDF could not decode the image
    """
    if object_number <= 0 or object_number >= object_total:
        raise ObjectMissingError(object_number, object_total)

    if not is_image(native, object_number):
        logger.debug("Object %d is not an image", object_number)
        raise NotImageError(object_number)

    try:
        pix = fitz.Pixmap(native, object_number)
        if (
            convert_to_rgb
            and pix.colorspace is not None
            and pix.colorspace.name not in _PNG_COLORSPACES
        ):
            pix = fitz.Pixmap(fitz.csRGB, pix)
        data = pix.tobytes("png")
    except Exception as exc:
        logger.warning("Cannot decode image object %d: %s", object_number, exc)
        raise CreatePixmapError(object_number, exc) from exc

    logger.debug(
        "Decoded image object %d (%dx%d, %d bytes)",
        object_number, pix.width, pix.height, len(data),
    )
    return data


def decode_png(data: bytes, object_number: int) -> Image.Image:
    """
    Decode PNG bytes into an in-memory Pillow image.

    Pixels are loaded eagerly so the returned image does not depend on
    the source buffer.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (OSError, ValueError) as exc:
        raise PixmapSamplesError(object_number, exc) from exc
    return image
