"""
Module: stamping.assembler

Purpose:
    Assemble a complete document from a sequence of logical pages: embed
    fonts, compose every page in order, stamp the drawing of all pages from
    one shared overlay document, pad with blank pages, save, and
    release every template handle opened along the way.

Key Functions:
    - assemble(): Main entry point

Dependencies:
    - fitz (PyMuPDF): Output document and persistence
    - context: Font embedding
    - stamping.composer: Page composition

Used By:
    - cli: build command
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import BinaryIO, Iterable, List, Mapping, Optional, Union

import fitz

from pdf_stamper.context import StampContext, embed_font
from pdf_stamper.core.models import PageData

from .canvas import OverlayBook
from .composer import compose_page
from .config import DEFAULT_BLANK_PAGE_SIZE, AssemblyOptions

logger = logging.getLogger(__name__)

Sink = Union[str, Path, BinaryIO]


def _embed_fonts(context: StampContext) -> StampContext:
    """Embed every pending font once, returning the frozen context to stamp with."""
    embedded = context.freeze()
    seen = set()
    for font in context.pending_font_embeddings():
        if font.key in seen:
            continue
        seen.add(font.key)
        embedded = embed_font(font, embedded)
    return embedded


def _blank_pages_to_insert(options: AssemblyOptions, page_count: int) -> int:
    wanted = options.number_of_pages
    if wanted is None:
        return 0
    if callable(wanted):
        blanks = int(wanted(page_count))
        if blanks < 0:
            logger.warning(f"number_of_pages returned {blanks} for {page_count} pages; inserting none")
            return 0
        return blanks
    return max(0, wanted - page_count)


def _pad_document(document: fitz.Document, blanks: int) -> None:
    """Insert blank pages before the last page, sized like the last page."""
    if blanks <= 0:
        return
    if document.page_count == 0:
        width, height = DEFAULT_BLANK_PAGE_SIZE
        for _ in range(blanks):
            document.new_page(width=width, height=height)
        return

    last = document[document.page_count - 1]
    width, height = last.cropbox.width, last.cropbox.height
    for _ in range(blanks):
        document.new_page(pno=document.page_count - 1, width=width, height=height)
    logger.debug(f"Inserted {blanks} blank page(s) before the last page")


def _write(data: bytes, out: Sink) -> None:
    if isinstance(out, (str, Path)):
        path = Path(out)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    else:
        out.write(data)


def assemble(
    pages: Iterable[Union[PageData, Mapping]],
    context: StampContext,
    options: Optional[Union[AssemblyOptions, Mapping]] = None,
    *,
    out: Optional[Sink] = None,
) -> bytes:
    """
    Assemble a document from logical pages.

    Fonts pending in the context are embedded before any page is composed.
    Pages are composed strictly in order, since where each page lands
    depends on how many pages the previous ones produced.

    Args:
        pages: PageData records (or dicts in the same shape)
        context: Stamping context with templates and fonts
        options: AssemblyOptions or a dict of its fields
        out: Optional sink: a path or a binary file object

    Returns:
        The assembled PDF bytes (also written to ``out`` when given)

    Raises:
        UnknownTemplateError: If a page references an unknown template
        PageLimitExceeded: If options.max_pages is exceeded
        OSError: If writing to ``out`` fails

    Example:
        >>> data = assemble(
        ...     [PageData("letter", {"body": {"contents": {"text": text}}})],
        ...     context,
        ...     AssemblyOptions(number_of_pages=4),
        ...     out=Path("output/letter.pdf"),
        ... )
    """
    if not isinstance(options, AssemblyOptions):
        options = AssemblyOptions.from_dict(options)
    start_time = time.perf_counter()

    stamping_context = _embed_fonts(context)
    handles: List[fitz.Document] = []
    overlays = OverlayBook()
    logical_pages = 0

    with fitz.open() as document:
        try:
            for page_data in pages:
                if not isinstance(page_data, PageData):
                    page_data = PageData.from_dict(page_data)
                handles.extend(
                    compose_page(
                        document,
                        page_data,
                        stamping_context,
                        page_limit=options.max_pages,
                        overlays=overlays,
                    )
                )
                logical_pages += 1
            # Before padding: blank pages shift the page numbers overlays point at
            overlays.stamp(document)

            _pad_document(document, _blank_pages_to_insert(options, document.page_count))
            if document.page_count == 0:
                # A PDF needs at least one page to be saved
                logger.warning("No pages were composed, writing a single blank page")
                _pad_document(document, 1)

            page_count = document.page_count
            data = document.tobytes(garbage=options.garbage, deflate=options.deflate)
            if out is not None:
                _write(data, out)
        finally:
            for handle in handles:
                handle.close()

    elapsed = time.perf_counter() - start_time
    logger.info(
        f"Assembled {page_count} pages from {logical_pages} page records "
        f"in {elapsed:.2f}s"
    )
    return data
