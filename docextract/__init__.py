"""
docextract - Text, image, outline and metadata extraction via MuPDF.

Core components:
- Document: thread-safe handle around one opened PDF/EPUB document
- OutlineEntry: flattened table-of-contents node
- detect_format: magic-byte sniffing of PDF and EPUB content

Quick Start:
    from docextract import Document, NotImageError

    with Document.open("document.pdf") as doc:
        for page in range(doc.page_count):
            print(doc.extract_text(page))

        for object_number, png in doc.iter_images():
            print(object_number, len(png))
"""

__version__ = "1.0.0"

from .config import DocumentConfig
from .document import Document
from .exceptions import (
    DocumentError,
    OpenError,
    NoSuchFileError,
    CreateContextError,
    OpenDocumentError,
    OpenMemoryError,
    NeedsPasswordError,
    DocumentClosedError,
    PageMissingError,
    ObjectMissingError,
    NotImageError,
    LoadOutlineError,
    ExtractionFailure,
    TextExtractionError,
    CreatePixmapError,
    PixmapSamplesError,
    is_skippable,
    format_error_chain,
)
from .logging_config import setup_logging, get_logger
from .models import METADATA_KEYS, OutlineEntry
from .sniff import EPUB_MIME, PDF_MIME, detect_format, filetype_for

__all__ = [
    "__version__",
    # Main class
    "Document",
    "DocumentConfig",
    # Models
    "OutlineEntry",
    "METADATA_KEYS",
    # Sniffing
    "detect_format",
    "filetype_for",
    "PDF_MIME",
    "EPUB_MIME",
    # Exceptions
    "DocumentError",
    "OpenError",
    "NoSuchFileError",
    "CreateContextError",
    "OpenDocumentError",
    "OpenMemoryError",
    "NeedsPasswordError",
    "DocumentClosedError",
    "PageMissingError",
    "ObjectMissingError",
    "NotImageError",
    "LoadOutlineError",
    "ExtractionFailure",
    "TextExtractionError",
    "CreatePixmapError",
    "PixmapSamplesError",
    "is_skippable",
    "format_error_chain",
    # Logging
    "setup_logging",
    "get_logger",
]
