"""
Magic-byte detection of PDF and EPUB content.
"""

from __future__ import annotations

from typing import Optional

PDF_MIME = "application/pdf"
EPUB_MIME = "application/epub+zip"

_PDF_SIGNATURE = b"%PDF"
_ZIP_SIGNATURE = b"PK\x03\x04"
# A stored first entry named "mimetype" starts its name at offset 30 of
# the local file header; its content follows the 8-byte name directly.
_EPUB_MARKER = b"mimetypeapplication/epub+zip"
_EPUB_MARKER_OFFSET = 30
_EPUB_MIN_LENGTH = _EPUB_MARKER_OFFSET + len(_EPUB_MARKER)

# Leading bytes detect_format needs to see.
SNIFF_LENGTH = _EPUB_MIN_LENGTH

_FILETYPES = {
    PDF_MIME: "pdf",
    EPUB_MIME: "epub",
}


def detect_format(data: bytes) -> str:
    """
    Classify raw bytes as PDF or EPUB.

    Args:
        data: Leading bytes of a document (the whole document is fine)

    Returns:
        "application/pdf", "application/epub+zip", or "" when neither matches
    """
    view = memoryview(data)
    if view[:4] == _PDF_SIGNATURE:
        return PDF_MIME
    if (
        len(view) >= _EPUB_MIN_LENGTH
        and view[:4] == _ZIP_SIGNATURE
        and view[_EPUB_MARKER_OFFSET:_EPUB_MIN_LENGTH] == _EPUB_MARKER
    ):
        return EPUB_MIME
    return ""


def filetype_for(data: bytes) -> Optional[str]:
    """Return the MuPDF file type ("pdf"/"epub") for ``data``, or None."""
    return _FILETYPES.get(detect_format(data))
