"""
Module: stamping.config

Purpose:
    Configuration for document assembly. Immutable, validated on
    construction.

Key Classes:
    - AssemblyOptions: Page padding, page ceiling and output settings

Used By:
    - stamping.assembler: assemble()
    - cli: Options from job files and flags
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

# Fixed total, or callable(current_page_count) -> blank pages to insert
PageCount = Union[int, Callable[[int], int]]

# Blank pages added to an empty document use A4
DEFAULT_BLANK_PAGE_SIZE = (595.0, 842.0)


@dataclass(frozen=True)
class AssemblyOptions:
    """
    Options for assembling a document (immutable).

    Attributes:
        number_of_pages: Pad the document with blank pages inserted before
            the last page. An int pads up to that total; a callable gets the
            current page count and returns how many blank pages to insert.
        max_pages: Optional ceiling on pages produced by composition. None
            means unbounded; overflow that never fits then recurses forever.
        garbage: PyMuPDF garbage collection level used when saving (0-4)
        deflate: Compress streams when saving

    Example:
        >>> AssemblyOptions(number_of_pages=lambda count: count % 4)
        >>> AssemblyOptions.from_dict({"number_of_pages": 8})
    """

    number_of_pages: Optional[PageCount] = None
    max_pages: Optional[int] = None
    garbage: int = 3
    deflate: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        pages = self.number_of_pages
        if pages is not None and not callable(pages):
            if isinstance(pages, bool) or not isinstance(pages, int):
                raise TypeError(f"number_of_pages must be an int or callable: {pages!r}")
            if pages < 0:
                raise ValueError(f"number_of_pages must be non-negative: {pages}")
        if self.max_pages is not None and self.max_pages <= 0:
            raise ValueError(f"max_pages must be positive: {self.max_pages}")
        if not 0 <= self.garbage <= 4:
            raise ValueError(f"garbage must be 0-4: {self.garbage}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "AssemblyOptions":
        if not data:
            return cls()
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
