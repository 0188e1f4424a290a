"""
Data Models for Document Extraction.

Value objects returned by the document handle. The native MuPDF objects
they are built from never leave the handle.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# Keys of the metadata record, in output order. MuPDF resolves the
# "info:" keys against the trailer Info dictionary.
METADATA_KEYS: tuple[str, ...] = (
    "format",
    "encryption",
    "title",
    "author",
    "subject",
    "keywords",
    "creator",
    "producer",
    "creationDate",
    "modDate",
)


class OutlineEntry(BaseModel):
    """
    One node of the table of contents, flattened.

    The outline forest is emitted in depth-first pre-order; nesting is
    recorded in ``level`` instead of child lists.

    Examples:
        - {"level": 1, "title": "Introduction", "uri": "", "page": 0, "top": 72.0}
        - {"level": 2, "title": "Homepage", "uri": "https://example.org", "page": -1, "top": 0.0}
    """

    level: int = Field(
        ...,
        ge=1,
        description="Hierarchy level (1 = top-level entries)"
    )
    title: str = Field(
        "",
        description="Title of the outline item"
    )
    uri: str = Field(
        "",
        description="Link destination; empty or '#...' for internal links"
    )
    page: int = Field(
        -1,
        ge=-1,
        description="Target page (0-indexed), -1 for external links"
    )
    top: float = Field(
        0.0,
        description="Vertical offset on the target page"
    )

    model_config = {"frozen": True}

    @property
    def is_external(self) -> bool:
        """True when the entry points outside the document."""
        return self.page < 0

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return self.model_dump()
