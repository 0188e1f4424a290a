"""
Flattening of the document outline (table of contents).
"""

from __future__ import annotations

import math
from typing import Optional

import fitz  # PyMuPDF

from .exceptions import LoadOutlineError
from .logging_config import get_logger
from .models import OutlineEntry

logger = get_logger(__name__)


def has_outline(native: fitz.Document) -> bool:
    """
    Check whether the document declares an outline at all.

    For PDFs this is the ``/Outlines`` entry of the catalog, which may
    exist without any items. Other formats only have an outline when
    MuPDF can load one.
    """
    if native.is_pdf:
        kind, _ = native.xref_get_key(native.pdf_catalog(), "Outlines")
        return kind != "null"
    return native.outline is not None


def load_outline(native: fitz.Document) -> list[OutlineEntry]:
    """
    Load the outline and flatten it in depth-first pre-order.

    Raises:
        LoadOutlineError: the document has no outline structure
    """
    try:
        present = has_outline(native)
        root = native.outline
    except Exception as exc:
        raise LoadOutlineError(f"Cannot load outline: {exc}") from exc

    if not present:
        raise LoadOutlineError()

    entries = walk(root)
    logger.debug("Loaded outline with %d entries", len(entries))
    return entries


def walk(root: Optional[fitz.Outline]) -> list[OutlineEntry]:
    """
    Flatten an outline forest starting at ``root``.

    Uses an explicit stack, so arbitrarily deep outlines cannot exhaust the
    interpreter's recursion limit. Siblings share a level; each step down
    adds exactly one.
    """
    entries: list[OutlineEntry] = []
    stack = [(root, 1)] if root is not None else []

    while stack:
        node, level = stack.pop()
        entries.append(_to_entry(node, level))

        # Push the sibling first so the whole child subtree is emitted
        # before it.
        if node.next is not None:
            stack.append((node.next, level))
        if node.down is not None:
            stack.append((node.down, level + 1))

    return entries


def _to_entry(node: fitz.Outline, level: int) -> OutlineEntry:
    page = node.page if node.page is not None else -1
    top = node.y
    if top is None or math.isnan(top):
        top = 0.0
    return OutlineEntry(
        level=level,
        title=node.title or "",
        uri=node.uri or "",
        page=max(page, -1),
        top=float(top),
    )
