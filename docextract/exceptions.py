"""
Custom Exceptions for Document Extraction.

Every failure of the native MuPDF layer is translated into one of these
types at the boundary of a public operation, so callers never see a raw
``fitz`` exception.

Exception Hierarchy:
    DocumentError (base)
    ├── OpenError
    │   ├── NoSuchFileError
    │   ├── CreateContextError
    │   ├── OpenDocumentError
    │   ├── OpenMemoryError
    │   └── NeedsPasswordError
    ├── DocumentClosedError
    ├── PageMissingError
    ├── ObjectMissingError
    ├── NotImageError
    ├── LoadOutlineError
    └── ExtractionFailure
        ├── TextExtractionError
        ├── CreatePixmapError
        └── PixmapSamplesError

Usage:
    from docextract import Document, NotImageError

    with Document.open("scan.pdf") as doc:
        for n in range(1, doc.object_count):
            try:
                png = doc.extract_image_bytes(n)
            except NotImageError:
                continue
"""

from __future__ import annotations

from typing import Iterator, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class DocumentError(Exception):
    """
    Base exception for all document-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A document error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# OPEN ERRORS
# =============================================================================


class OpenError(DocumentError):
    """Base class for errors raised while opening a document."""

    def __init__(
        self,
        message: str = "Cannot open document",
        path: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.path = path
        if path:
            message = f"{message} [{path}]"
        super().__init__(message, details)


class NoSuchFileError(OpenError):
    """
    Raised when the document path does not exist.

    Attributes:
        path: Absolute path that was looked up
    """

    def __init__(self, path: str):
        super().__init__(message="No such file", path=path)


class CreateContextError(OpenError):
    """Raised when MuPDF cannot allocate the state needed for a new document."""

    def __init__(
        self,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message="Cannot create context", path=path, details=details)


class OpenDocumentError(OpenError):
    """
    Raised when the document is malformed or of an unsupported type.

    Attributes:
        path: Path to the document, None for in-memory sources
        original_error: The underlying error from MuPDF
    """

    def __init__(
        self,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message="Cannot open document", path=path, details=details)


class OpenMemoryError(OpenError):
    """Raised when a byte buffer cannot be wrapped as a memory stream."""

    def __init__(
        self,
        message: str = "Cannot open memory",
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message=message, details=details)


class NeedsPasswordError(OpenError):
    """
    Raised when the document is encrypted and was not unlocked.

    The native document has already been released when this is raised; the
    counts read before the password check are kept for diagnostics.

    Attributes:
        page_total: Page count reported by the locked document
        object_total: Object count reported by the locked document
    """

    def __init__(
        self,
        path: Optional[str] = None,
        page_total: int = 0,
        object_total: int = 0,
    ):
        self.page_total = page_total
        self.object_total = object_total
        super().__init__(message="Document needs password", path=path)


# =============================================================================
# USAGE ERRORS
# =============================================================================


class DocumentClosedError(DocumentError):
    """Raised when an operation is attempted on a closed document."""

    def __init__(self, message: str = "Document is closed"):
        super().__init__(message)


class PageMissingError(DocumentError):
    """
    Raised when a page index is outside ``[0, page_total)``.

    Attributes:
        page_index: The requested page (0-indexed)
        page_total: Number of pages in the document
    """

    def __init__(self, page_index: int, page_total: int):
        self.page_index = page_index
        self.page_total = page_total
        super().__init__(f"Page missing: {page_index} (document has {page_total} pages)")


class ObjectMissingError(DocumentError):
    """
    Raised when an object number is outside ``[1, object_total)``.

    Attributes:
        object_number: The requested indirect object number
        object_total: Size of the cross-reference table
    """

    def __init__(self, object_number: int, object_total: int):
        self.object_number = object_number
        self.object_total = object_total
        super().__init__(
            f"Object missing: {object_number} (valid range 1-{object_total - 1})"
        )


class NotImageError(DocumentError):
    """
    Raised when an existing object is not an image.

    This is the expected outcome for most objects while scanning a document
    for images; callers skip the object and continue.
    """

    def __init__(self, object_number: int):
        self.object_number = object_number
        super().__init__(f"Object {object_number} is not an image, please ignore it")


class LoadOutlineError(DocumentError):
    """Raised when the document has no outline structure at all."""

    def __init__(self, message: str = "Cannot load outline"):
        super().__init__(message)


# =============================================================================
# EXTRACTION FAILURES
# =============================================================================


class ExtractionFailure(DocumentError):
    """
    Base class for native failures in the middle of an extraction.

    Attributes:
        original_error: The underlying error from MuPDF or Pillow
    """

    def __init__(
        self,
        message: str = "Extraction failed",
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class TextExtractionError(ExtractionFailure):
    """Raised when a page cannot be run through the structured text device."""

    def __init__(self, page_index: int, original_error: Optional[Exception] = None):
        self.page_index = page_index
        super().__init__(f"Cannot extract text from page {page_index}", original_error)


class CreatePixmapError(ExtractionFailure):
    """Raised when an image object cannot be decoded into a pixmap."""

    def __init__(self, object_number: int, original_error: Optional[Exception] = None):
        self.object_number = object_number
        super().__init__(f"Cannot create pixmap for object {object_number}", original_error)


class PixmapSamplesError(ExtractionFailure):
    """Raised when encoded image bytes cannot be decoded into pixels."""

    def __init__(self, object_number: int, original_error: Optional[Exception] = None):
        self.object_number = object_number
        super().__init__(f"Cannot get pixmap samples for object {object_number}", original_error)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def is_skippable(error: Exception) -> bool:
    """
    Check if an error only means "nothing to extract here".

    Returns True for NotImageError, which object scans are expected to
    ignore. Everything else is either misuse or a permanent property of the
    document; nothing here is worth retrying.
    """
    return isinstance(error, NotImageError)


def format_error_chain(error: Exception) -> str:
    """
    Render a translated error followed by the MuPDF or Pillow error under it.

    Each level is indented below the one that wrapped it, for example::

        CreatePixmapError: Cannot create pixmap for object 7 | Details: ...
          └─ RuntimeError: pixmap must be grayscale or rgb to write as png
    """
    return "\n".join(
        ("  " * depth + "└─ " if depth else "") + f"{type(item).__name__}: {item}"
        for depth, item in enumerate(_error_chain(error))
    )


def _error_chain(error: Exception) -> Iterator[Exception]:
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = getattr(current, "original_error", None) or current.__cause__
