"""
Module: stamping.composer

Purpose:
    Compose one logical page into the output document. Resolves the
    template and its page restriction, inserts filler pages where needed,
    imports the template page for the parity the page lands on, fills its
    regions, applies page transforms and spawns continuation pages for
    overflowing content.

Key Functions:
    - compose_page(): Compose one logical page and its continuations

Algorithm:
    1. position = pages in document + 1
    2. Restricted position: drop the page (no filler) or compose one filler
       page per consecutive disallowed position
    3. Import the template page for the parity of the actual position
    4. Fill regions by priority, then apply the parity's transforms
    5. Overflow + overflow template: repeat from 1 for a continuation page with the
       original locations and the overflow merged over them. Overflow
       without an overflow template is truncated.

    Returned handles: fillers' ++ this page's ++ continuation's. Every
    handle stays open until the assembler has saved the document.

Dependencies:
    - fitz (PyMuPDF): Output document
    - context: Template lookup
    - stamping.regions / stamping.transforms: Filling and transforms
"""

from __future__ import annotations

import logging
from typing import List, Optional

import fitz

from pdf_stamper.context import StampContext
from pdf_stamper.core.models import PageData, PageRestriction, Parity

from .canvas import OverlayBook, PageCanvas
from .regions import fill_regions
from .transforms import apply_transform

logger = logging.getLogger(__name__)


class PageLimitExceeded(RuntimeError):
    """Raised when composition would produce more pages than allowed."""

    def __init__(self, limit: int, template: str):
        super().__init__(f"Page limit {limit} exceeded while composing template {template!r}")
        self.limit = limit
        self.template = template


def _fillers_needed(
    restriction: PageRestriction,
    position: int,
    template: str,
    page_limit: Optional[int],
) -> int:
    """Count consecutive disallowed positions starting at ``position``."""
    count = 0
    while not restriction.allows(position + count):
        count += 1
        if page_limit is not None and position + count > page_limit:
            raise PageLimitExceeded(page_limit, template)
    return count


def _compose(
    document: fitz.Document,
    page_data: PageData,
    context: StampContext,
    overlays: OverlayBook,
    page_limit: Optional[int],
) -> List[fitz.Document]:
    handles: List[fitz.Document] = []

    try:
        while True:
            template = context.template(page_data.template)
            position = document.page_count + 1

            restriction = template.only_on
            if restriction is not None and not restriction.allows(position):
                if restriction.filler is None:
                    logger.debug(f"Skipping {template.name!r}: not allowed on page {position}")
                    break
                filler_page = PageData(restriction.filler, page_data.filler_locations)
                for _ in range(_fillers_needed(restriction, position, template.name, page_limit)):
                    handles.extend(_compose(document, filler_page, context, overlays, page_limit))

            position = document.page_count + 1
            if page_limit is not None and position > page_limit:
                raise PageLimitExceeded(page_limit, template.name)
            parity = Parity.of(position)

            source = context.source_page_for_parity(template.name, parity)
            handles.append(source)
            document.insert_pdf(source, from_page=0, to_page=0)
            page = document[document.page_count - 1]

            with PageCanvas(page, overlays) as canvas:
                regions = context.regions_for_parity(template.name, parity)
                overflows = fill_regions(document, canvas, regions, page_data, context)
                for transform in template.transforms.for_parity(parity):
                    apply_transform(page, transform)

            logger.debug(
                f"Composed page {position} from {template.name!r} ({parity.value}), "
                f"{len(overflows)} region(s) overflowed"
            )

            if not overflows:
                break
            if template.overflow is None:
                logger.debug(
                    f"Truncating overflow of {sorted(overflows)} on {template.name!r}: "
                    f"no overflow template"
                )
                break
            # Continuation: original locations with the overflow merged over them
            page_data = PageData(template.overflow, {**page_data.locations, **overflows})
    except BaseException:
        for handle in handles:
            handle.close()
        raise

    return handles


def compose_page(
    document: fitz.Document,
    page_data: PageData,
    context: StampContext,
    *,
    page_limit: Optional[int] = None,
    overlays: Optional[OverlayBook] = None,
) -> List[fitz.Document]:
    """
    Compose one logical page, appending zero or more pages to ``document``.

    Args:
        document: Output document; pages are appended
        page_data: The logical page to compose
        context: Frozen stamping context
        page_limit: Optional ceiling on the document's page count
        overlays: Shared overlay book. The caller stamps it once every page
            is composed. Without one, the drawing is stamped before returning.

    Returns:
        Opened template source handles, in page order. The caller closes
        them after the document is saved.

    Raises:
        UnknownTemplateError: If page_data.template is not registered
        PageLimitExceeded: If page_limit would be exceeded

    Example:
        >>> handles = compose_page(document, PageData("letter", locations), context)
        >>> document.page_count
        2  # letter page + one continuation page
    """
    if overlays is not None:
        return _compose(document, page_data, context, overlays, page_limit)

    book = OverlayBook()
    handles = _compose(document, page_data, context, book, page_limit)
    try:
        book.stamp(document)
    except BaseException:
        for handle in handles:
            handle.close()
        raise
    return handles
