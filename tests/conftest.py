"""
Pytest fixtures for docextract tests.

All documents are generated with PyMuPDF at test time.
"""

import io
import zipfile

import fitz  # PyMuPDF
import pytest

from docextract import Document


PAGE_TEXTS = ["Hello page one", "Second page text", ""]

SAMPLE_TOC = [
    [1, "Chapter 1", 1],
    [2, "Section 1.1", 1],
    [3, "Detail", 2],
    [2, "Section 1.2", 2],
    [1, "Chapter 2", 3],
]

SAMPLE_METADATA = {
    "title": "Sample Title",
    "author": "Jane Doe",
    "subject": "Testing",
    "keywords": "pdf, extraction",
    "creator": "pytest",
    "producer": "PyMuPDF",
}

IMAGE_COLORS = [(255, 0, 0), (0, 0, 255)]


def make_png(color, width=16, height=8) -> bytes:
    """Create a solid RGB PNG without alpha channel."""
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.set_rect(pix.irect, color)
    return pix.tobytes("png")


def build_text_pdf(toc=None, metadata=None, **save_options) -> bytes:
    doc = fitz.open()
    for text in PAGE_TEXTS:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=12)
    if toc:
        doc.set_toc(toc)
    if metadata:
        doc.set_metadata(metadata)
    data = doc.tobytes(**save_options)
    doc.close()
    return data


@pytest.fixture
def text_pdf_bytes():
    """Three pages of text with outline and metadata."""
    return build_text_pdf(toc=SAMPLE_TOC, metadata=SAMPLE_METADATA)


@pytest.fixture
def text_pdf_path(tmp_path, text_pdf_bytes):
    path = tmp_path / "text.pdf"
    path.write_bytes(text_pdf_bytes)
    return path


@pytest.fixture
def plain_pdf_bytes():
    """Text pages without outline or metadata."""
    return build_text_pdf()


@pytest.fixture
def empty_outline_pdf_bytes():
    """A PDF whose catalog has an /Outlines dictionary without items."""
    doc = fitz.open()
    doc.new_page()
    xref = doc.get_new_xref()
    doc.update_object(xref, "<< /Type /Outlines /Count 0 >>")
    doc.xref_set_key(doc.pdf_catalog(), "Outlines", f"{xref} 0 R")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def image_pdf_bytes():
    """One page with two embedded images of different colors."""
    doc = fitz.open()
    page = doc.new_page()
    for index, color in enumerate(IMAGE_COLORS):
        top = 50 + index * 100
        page.insert_image(fitz.Rect(50, top, 150, top + 50), stream=make_png(color))
    page.insert_text((72, 400), "Two images above", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def cmyk_image_pdf_bytes():
    """One page with a CMYK image, which PNG cannot store directly."""
    pix = fitz.Pixmap(fitz.csCMYK, fitz.IRect(0, 0, 8, 8), False)
    pix.set_rect(pix.irect, (0, 255, 255, 0))
    doc = fitz.open()
    page = doc.new_page()
    page.insert_image(fitz.Rect(50, 50, 100, 100), pixmap=pix)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def encrypted_pdf_path(tmp_path):
    """AES-256 encrypted PDF, user password "secret"."""
    data = build_text_pdf(
        metadata=SAMPLE_METADATA,
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="secret",
    )
    path = tmp_path / "encrypted.pdf"
    path.write_bytes(data)
    return path


@pytest.fixture
def epub_bytes():
    """Minimal EPUB 2 book with a single chapter."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(
            zipfile.ZipInfo("mimetype"), "application/epub+zip",
            compress_type=zipfile.ZIP_STORED,
        )
        archive.writestr(
            "META-INF/container.xml",
            '<?xml version="1.0"?>'
            '<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
            '<rootfiles><rootfile full-path="OEBPS/content.opf" '
            'media-type="application/oebps-package+xml"/></rootfiles></container>',
            compress_type=zipfile.ZIP_DEFLATED,
        )
        archive.writestr(
            "OEBPS/content.opf",
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="id">'
            '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/">'
            '<dc:title>Tiny Book</dc:title><dc:identifier id="id">tiny</dc:identifier>'
            '<dc:language>en</dc:language></metadata>'
            '<manifest><item id="ch1" href="ch1.xhtml" media-type="application/xhtml+xml"/></manifest>'
            '<spine><itemref idref="ch1"/></spine></package>',
            compress_type=zipfile.ZIP_DEFLATED,
        )
        archive.writestr(
            "OEBPS/ch1.xhtml",
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>One</title></head>'
            '<body><p>Tiny chapter text</p></body></html>',
            compress_type=zipfile.ZIP_DEFLATED,
        )
    return buffer.getvalue()


@pytest.fixture
def text_doc(text_pdf_bytes):
    doc = Document.from_bytes(text_pdf_bytes)
    yield doc
    doc.close()


@pytest.fixture
def image_doc(image_pdf_bytes):
    doc = Document.from_bytes(image_pdf_bytes)
    yield doc
    doc.close()


SEPARATION_COLORSPACE = (
    "[/Separation /Spot /DeviceCMYK "
    "<< /FunctionType 2 /Domain [0 1] /C0 [0 0 0 0] /C1 [0 1 1 0] /N 1 >>]"
)
LAB_COLORSPACE = "[/Lab << /WhitePoint [0.9505 1 1.089] /Range [-100 100 -100 100] >>]"


def build_raw_image_pdf(colorspace: str, samples: bytes) -> bytes:
    """
    A 2x1 8-bit image in ``colorspace`` written as a raw object, followed by
    an RGB image inserted the usual way (so it gets the higher xref).
    """
    doc = fitz.open()
    page = doc.new_page()
    xref = doc.get_new_xref()
    doc.update_object(
        xref,
        "<< /Type /XObject /Subtype /Image /Width 2 /Height 1 "
        f"/BitsPerComponent 8 /ColorSpace {colorspace} >>",
    )
    doc.update_stream(xref, samples)
    page.insert_image(fitz.Rect(50, 150, 150, 200), stream=make_png(IMAGE_COLORS[0]))
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def separation_image_pdf_bytes():
    """Spot-colour image (one component, not DeviceGray) before an RGB image."""
    return build_raw_image_pdf(SEPARATION_COLORSPACE, b"\x00\xff")


@pytest.fixture
def lab_image_pdf_bytes():
    """Lab image (three components, not DeviceRGB) before an RGB image."""
    return build_raw_image_pdf(LAB_COLORSPACE, b"\xff\x80\x80\x80\x80\x80")
