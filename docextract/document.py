"""
Document Handle

Owns one opened PyMuPDF document and serializes every call into it.

MuPDF contexts are not reentrant, so each extraction runs under a
per-document lock for its full duration. Counts are read once at open time
and never change afterwards.

Usage:
    from docextract import Document

    with Document.open("report.pdf") as doc:
        print(doc.page_count, doc.object_count)
        text = doc.extract_text(0)
        toc = doc.load_outline()
        meta = doc.read_metadata()
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

import fitz  # PyMuPDF
from PIL import Image

from .config import DocumentConfig
from .exceptions import (
    CreateContextError,
    DocumentClosedError,
    NeedsPasswordError,
    NoSuchFileError,
    NotImageError,
    OpenDocumentError,
    OpenMemoryError,
)
from .images import decode_png, extract_image_bytes
from .logging_config import get_logger
from .metadata import read_metadata
from .models import OutlineEntry
from .outline import load_outline
from .sniff import SNIFF_LENGTH, filetype_for
from .text import extract_text

logger = get_logger(__name__)


class Document:
    """
    A PDF or EPUB document opened through MuPDF.

    Create instances with ``Document.open``, ``Document.from_bytes`` or
    ``Document.from_stream``; release them with ``close()`` or a ``with``
    block. A closed document rejects every extraction call with
    DocumentClosedError.
    """

    def __init__(
        self,
        native: fitz.Document,
        source: str,
        config: Optional[DocumentConfig] = None,
    ):
        """
        Wrap an already opened and unlocked PyMuPDF document.

        Args:
            native: Open PyMuPDF document, owned by this handle from now on
            source: Path or description of the source, for logging
            config: Extraction settings
        """
        self._native = native
        self.source = source
        self.config = config or DocumentConfig()
        self._page_total = native.page_count
        self._object_total = _count_objects(native)
        self._lock = threading.RLock()
        self._closed = False

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        password: Optional[str] = None,
        config: Optional[DocumentConfig] = None,
    ) -> "Document":
        """
        Open a document from the filesystem.

        Args:
            path: Path to a PDF or EPUB file
            password: Password for encrypted documents
            config: Extraction settings

        Raises:
            NoSuchFileError: path does not exist
            CreateContextError: MuPDF ran out of memory
            OpenDocumentError: file is malformed or unsupported
            NeedsPasswordError: document is encrypted and was not unlocked
        """
        config = config or DocumentConfig()
        path = Path(path).absolute()
        if not path.exists():
            raise NoSuchFileError(str(path))

        try:
            with path.open("rb") as handle:
                head = handle.read(SNIFF_LENGTH)
        except OSError as exc:
            raise OpenDocumentError(str(path), exc) from exc

        filetype = filetype_for(head) or config.fallback_filetype
        native = _open_native(filetype, path=path)

        return cls._unlock(native, str(path), str(path), password, config)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        password: Optional[str] = None,
        config: Optional[DocumentConfig] = None,
    ) -> "Document":
        """
        Open a document held in memory.

        The file type is sniffed from the leading bytes and falls back to
        ``config.fallback_filetype``.

        Raises:
            OpenMemoryError: data is not a non-empty bytes-like object
            CreateContextError: MuPDF ran out of memory
            OpenDocumentError: content is malformed or unsupported
            NeedsPasswordError: document is encrypted and was not unlocked
        """
        config = config or DocumentConfig()
        try:
            buffer = bytes(memoryview(data))
        except TypeError as exc:
            raise OpenMemoryError(original_error=exc) from exc
        if not buffer:
            raise OpenMemoryError("Cannot open memory: buffer is empty")

        filetype = filetype_for(buffer) or config.fallback_filetype
        native = _open_native(filetype, stream=buffer)

        return cls._unlock(native, f"<memory:{filetype}>", None, password, config)

    @classmethod
    def from_stream(
        cls,
        reader: BinaryIO,
        password: Optional[str] = None,
        config: Optional[DocumentConfig] = None,
    ) -> "Document":
        """
        Drain a binary stream and open its content.

        Errors raised by ``reader.read()`` propagate unchanged.
        """
        data = reader.read()
        return cls.from_bytes(data, password=password, config=config)

    @classmethod
    def _unlock(
        cls,
        native: fitz.Document,
        source: str,
        path: Optional[str],
        password: Optional[str],
        config: Optional[DocumentConfig],
    ) -> "Document":
        # Either the handle takes ownership of native, or native is closed
        # before the error leaves this method.
        if native.needs_pass and not (password and native.authenticate(password)):
            try:
                page_total = native.page_count
                object_total = _count_objects(native)
            except ValueError:
                # PyMuPDF refuses some calls on a locked document.
                page_total = object_total = 0
            native.close()
            logger.info("Document %s needs a password", source)
            raise NeedsPasswordError(
                path,
                page_total=page_total,
                object_total=object_total,
            )

        try:
            document = cls(native, source, config)
        except Exception as exc:
            native.close()
            raise OpenDocumentError(path, exc) from exc
        logger.info(
            "Opened %s (%d pages, %d objects)",
            source, document.page_count, document.object_count,
        )
        return document

    @staticmethod
    def mupdf_version() -> str:
        """Version of the MuPDF library PyMuPDF is linked against."""
        return fitz.VersionFitz

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def page_count(self) -> int:
        """Number of pages, fixed at open time."""
        return self._page_total

    @property
    def object_count(self) -> int:
        """Size of the cross-reference table (0 for non-PDF documents)."""
        return self._object_total

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the native document. Calling it again is a no-op."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._native.close()
        logger.info("Closed %s", self.source)

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"<Document {self.source!r} pages={self._page_total} "
            f"objects={self._object_total} {state}>"
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise DocumentClosedError(f"Document is closed: {self.source}")

    # =========================================================================
    # EXTRACTION
    # =========================================================================

    def extract_text(self, page_index: int) -> str:
        """
        Extract the plain text of one page.

        Args:
            page_index: Page number (0-indexed)

        Raises:
            PageMissingError: page_index outside [0, page_count)
            TextExtractionError: MuPDF failed while running the page
        """
        with self._lock:
            self._ensure_open()
            return extract_text(
                self._native, page_index, self._page_total, self.config.text_flags
            )

    def extract_image_bytes(self, object_number: int) -> bytes:
        """
        Decode the image stored in an indirect object as PNG bytes.

        Args:
            object_number: Object number in [1, object_count)

        Raises:
            ObjectMissingError: object_number out of range
            NotImageError: the object is not an image (skip it when scanning)
            CreatePixmapError: MuPDF could not decode the image
        """
        with self._lock:
            self._ensure_open()
            return extract_image_bytes(
                self._native,
                object_number,
                self._object_total,
                convert_to_rgb=self.config.convert_to_rgb,
            )

    def extract_image(self, object_number: int) -> Image.Image:
        """
        Decode the image stored in an indirect object into pixels.

        Same errors as extract_image_bytes, plus PixmapSamplesError when the
        PNG cannot be decoded.
        """
        data = self.extract_image_bytes(object_number)
        return decode_png(data, object_number)

    def iter_images(self) -> Iterator[tuple[int, bytes]]:
        """
        Scan every object and yield ``(object_number, png_bytes)`` for images.

        Non-image objects are skipped; any other error stops the scan.
        """
        for object_number in range(1, self._object_total):
            try:
                data = self.extract_image_bytes(object_number)
            except NotImageError:
                continue
            yield object_number, data

    def load_outline(self) -> list[OutlineEntry]:
        """
        Flatten the table of contents in depth-first pre-order.

        Raises:
            LoadOutlineError: the document has no outline at all
        """
        with self._lock:
            self._ensure_open()
            return load_outline(self._native)

    def read_metadata(self) -> dict[str, str]:
        """Return the ten standard metadata fields; absent fields are ""."""
        with self._lock:
            self._ensure_open()
            return read_metadata(self._native, self.config.metadata_field_limit)


def _count_objects(native: fitz.Document) -> int:
    if not native.is_pdf:
        return 0
    return native.xref_length()


def _open_native(
    filetype: str,
    path: Optional[Path] = None,
    stream: Optional[bytes] = None,
) -> fitz.Document:
    """
    Open a file or buffer as ``filetype`` and translate MuPDF failures.

    MuPDF also opens images, plain text and other formats it recognizes on
    its own. When a PDF was asked for, anything that did not open as a PDF
    is rejected.
    """
    source = str(path) if path is not None else None
    try:
        if path is not None:
            native = fitz.open(path, filetype=filetype)
        else:
            native = fitz.open(stream=stream, filetype=filetype)
    except MemoryError as exc:
        raise CreateContextError(source, exc) from exc
    except Exception as exc:
        logger.warning("Cannot open %s as %s: %s", source or "buffer", filetype, exc)
        raise OpenDocumentError(source, exc) from exc

    if filetype == "pdf" and not native.is_pdf:
        native.close()
        logger.warning("Rejected %s: not a PDF document", source or "buffer")
        raise OpenDocumentError(source)
    return native
