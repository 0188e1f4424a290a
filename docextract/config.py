from dataclasses import dataclass


@dataclass
class DocumentConfig:
    # Structured-text flags passed to MuPDF; 0 keeps the library defaults.
    text_flags: int = 0
    # Buffer size for each metadata lookup, terminator included.
    metadata_field_limit: int = 256
    # MuPDF file type used when an in-memory buffer is neither PDF nor EPUB.
    fallback_filetype: str = "pdf"
    # Convert CMYK and other non-RGB pixmaps before PNG encoding.
    convert_to_rgb: bool = True
