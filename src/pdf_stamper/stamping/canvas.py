"""
Module: stamping.canvas

Purpose:
    Drawing surfaces for output pages. Region fillers draw on a reportlab
    canvas sized to the page. All pages of one assembly draw into a single
    reportlab document (an overlay book), which is stamped onto the fitz
    pages in one pass, so fonts and images used on many pages are embedded
    in the output once.

Key Classes:
    - OverlayBook: One reportlab document holding every page's overlay
    - PageCanvas: Overlay canvas bound to a fitz page

Dependencies:
    - fitz (PyMuPDF): Target pages, overlay stamping
    - reportlab: Drawing primitives

Used By:
    - stamping.composer: One canvas per composed page
    - stamping.assembler: One book per assembly
    - fillers: Draw text and images
"""

from __future__ import annotations

import io
import logging
from typing import List, Optional, Tuple

import fitz
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)


class OverlayBook:
    """
    Overlays for many output pages, kept in one reportlab document.

    Each finished overlay page records the number of the output page it
    belongs to. stamp() puts every overlay onto its page. Since all overlays
    come from one source document, PyMuPDF copies shared resources (embedded
    fonts, images) into the output only once.

    Example:
        >>> book = OverlayBook()
        >>> with PageCanvas(document[0], book) as page_canvas:
        ...     page_canvas.surface.drawString(72, 720, "Hello")
        >>> book.stamp(document)
    """

    def __init__(self) -> None:
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer)
        self._targets: List[int] = []
        self._active: Optional["PageCanvas"] = None
        self._stamped = False

    def __len__(self) -> int:
        return len(self._targets)

    def begin(self, owner: "PageCanvas", size: Tuple[float, float]) -> canvas.Canvas:
        """Start the overlay page for ``owner``."""
        if self._stamped:
            raise RuntimeError("Overlay book is already stamped")
        if self._active is not None and self._active is not owner:
            raise RuntimeError("Another page canvas is still drawing")
        if self._active is None:
            self._active = owner
            self._canvas.setPageSize(size)
        return self._canvas

    def finish(self, owner: "PageCanvas", page_number: Optional[int]) -> None:
        """
        End the overlay page of ``owner``.

        With ``page_number`` None the drawing is kept out of the output.
        """
        if self._active is not owner:
            return
        self._canvas.showPage()
        self._active = None
        # Discarded drawing still occupies an overlay page; -1 marks it unused
        self._targets.append(-1 if page_number is None else page_number)

    def stamp(self, document: fitz.Document) -> None:
        """Stamp every finished overlay onto its output page. Call once."""
        if self._stamped:
            raise RuntimeError("Overlay book is already stamped")
        self._stamped = True
        if not any(target >= 0 for target in self._targets):
            return

        self._canvas.save()
        overlay = fitz.open(stream=self._buffer.getvalue(), filetype="pdf")
        try:
            for index, page_number in enumerate(self._targets):
                if page_number < 0:
                    continue
                page = document[page_number]
                # Stamp in unrotated page space; transforms may have rotated the page
                rotation = page.rotation
                if rotation:
                    page.set_rotation(0)
                page.show_pdf_page(page.rect, overlay, index)
                if rotation:
                    page.set_rotation(rotation)
        finally:
            overlay.close()
        logger.debug(f"Stamped {len(self._targets)} overlay page(s)")


class PageCanvas:
    """
    reportlab canvas for one fitz page.

    Coordinates are PDF points with the origin at the lower-left corner of
    the page's crop box, the same system regions are specified in.

    With a shared ``book`` the drawing is stamped when the book is stamped.
    Without one the canvas keeps a private book and stamps on close.

    Example:
        >>> with PageCanvas(document[-1]) as page_canvas:
        ...     page_canvas.surface.drawString(72, 720, "Hello")
    """

    def __init__(self, page: fitz.Page, book: Optional[OverlayBook] = None):
        self.page = page
        box = page.cropbox
        self.width = box.width
        self.height = box.height
        self._own_book = book is None
        self._book = OverlayBook() if book is None else book
        self._closed = False

    @property
    def surface(self) -> canvas.Canvas:
        """The reportlab canvas to draw on."""
        if self._closed:
            raise RuntimeError("Canvas is closed")
        return self._book.begin(self, (self.width, self.height))

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Finish the drawing for this page. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._book.finish(self, self.page.number)
        if self._own_book:
            self._book.stamp(self.page.parent)

    def discard(self) -> None:
        """Drop the drawing without stamping it."""
        if self._closed:
            return
        self._closed = True
        self._book.finish(self, None)

    def __enter__(self) -> "PageCanvas":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()
