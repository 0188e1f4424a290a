"""
Fixed-key metadata record.
"""

from __future__ import annotations

import fitz  # PyMuPDF

from .models import METADATA_KEYS


def read_metadata(native: fitz.Document, field_limit: int = 256) -> dict[str, str]:
    """
    Read the ten standard metadata fields.

    Each value is bounded to ``field_limit - 1`` bytes of UTF-8 (one byte is
    reserved for the terminator, as in MuPDF's lookup buffer) and trailing
    NUL padding is trimmed. Missing fields map to "".
    """
    raw = native.metadata or {}
    return {key: _bounded(raw.get(key), field_limit) for key in METADATA_KEYS}


def _bounded(value, field_limit: int) -> str:
    if not value:
        return ""
    data = str(value).encode("utf-8")[: max(field_limit - 1, 0)]
    return data.decode("utf-8", errors="ignore").rstrip("\x00")
