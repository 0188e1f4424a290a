"""
Plain-text extraction for a single page.

Uses PyMuPDF's structured-text device. The caller holds the document lock.
"""

from __future__ import annotations

import fitz  # PyMuPDF

from .exceptions import PageMissingError, TextExtractionError
from .logging_config import get_logger

logger = get_logger(__name__)


def extract_text(
    native: fitz.Document,
    page_index: int,
    page_total: int,
    flags: int = 0,
) -> str:
    """
    Render one page into structured text and flatten it.

    The page is run over its own bounds with the identity matrix; no
    scaling or rotation is applied. The text comes back in MuPDF's natural
    reading order, without block sorting.

    Args:
        native: Open PyMuPDF document
        page_index: Page number (0-indexed)
        page_total: Page count fixed at open time
        flags: Structured-text flags (0 = library defaults)

    Returns:
        The page text, possibly empty
    """
    if page_index < 0 or page_index >= page_total:
        raise PageMissingError(page_index, page_total)

    # get_text builds and drops its own structured-text page and device per
    # call. PyMuPDF exposes no FZ_NO_CACHE hint for that device; the text
    # device does not populate MuPDF's render cache.
    try:
        page = native.load_page(page_index)
        text = page.get_text("text", clip=page.rect, flags=flags, sort=False)
    except Exception as exc:
        logger.warning("Text extraction failed on page %d: %s", page_index, exc)
        raise TextExtractionError(page_index, exc) from exc

    logger.debug("Extracted %d characters from page %d", len(text), page_index)
    return text
