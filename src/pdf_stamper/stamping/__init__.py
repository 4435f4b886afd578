"""
Module: stamping

Purpose:
    The page composition engine: fills template regions with page data,
    inserts filler pages for page restrictions, continues overflowing
    content on follow-up pages, and assembles the final document.

Key Functions:
    - assemble(): Build a document from logical pages
    - compose_page(): Compose one logical page
    - fill_regions(): Fill one page's regions
    - register_region_filler(): Add a region type
    - register_page_transform(): Add a page transform kind

Key Classes:
    - AssemblyOptions: Assembly configuration
    - PageCanvas: Drawing surface for one page
    - OverlayBook: Drawing of many pages, stamped in one pass
"""

from .canvas import OverlayBook, PageCanvas
from .config import AssemblyOptions
from .regions import REGION_FILLERS, fill_region, fill_regions, register_region_filler
from .transforms import PAGE_TRANSFORMS, apply_transform, register_page_transform
from .composer import PageLimitExceeded, compose_page
from .assembler import assemble

# Built-in region types register themselves on import
from pdf_stamper import fillers as _fillers  # noqa: E402,F401

__all__ = [
    "OverlayBook",
    "PageCanvas",
    "AssemblyOptions",
    "REGION_FILLERS",
    "fill_region",
    "fill_regions",
    "register_region_filler",
    "PAGE_TRANSFORMS",
    "apply_transform",
    "register_page_transform",
    "PageLimitExceeded",
    "compose_page",
    "assemble",
]
