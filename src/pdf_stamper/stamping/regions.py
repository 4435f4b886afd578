"""
Module: stamping.regions

Purpose:
    Fill the regions of one page. Each region is dispatched to the filler
    registered for its type; fillers draw synchronously and report any
    content that did not fit.

Key Functions:
    - register_region_filler(): Decorator registering a filler for a type
    - fill_region(): Fill one region, returning its overflow entry or None
    - fill_regions(): Fill all regions of a page in priority order

Filler Contract:
    filler(document, canvas, data, context) -> {"contents": ...} | None

    ``data`` is the region spec merged with the page's location entry; the
    location entry wins on key collisions. A filler must finish all drawing
    before it returns.

Dependencies:
    - core.dispatch: Tag -> handler registry
    - stamping.canvas: PageCanvas

Used By:
    - stamping.composer: Per-page filling
    - fillers: Built-in region types register here
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Optional

import fitz

from pdf_stamper.context import StampContext
from pdf_stamper.core.dispatch import HandlerRegistry
from pdf_stamper.core.models import LocationEntry, Overflow, PageData, RegionSpec

from .canvas import PageCanvas

logger = logging.getLogger(__name__)

RegionFiller = Callable[
    [fitz.Document, PageCanvas, Dict[str, Any], StampContext],
    Optional[Dict[str, Any]],
]

REGION_FILLERS: HandlerRegistry[RegionFiller] = HandlerRegistry("region filler")


def register_region_filler(region_type: str) -> Callable[[RegionFiller], RegionFiller]:
    """
    Register a filler for a region type.

    Example:
        >>> @register_region_filler("barcode")
        ... def fill_barcode(document, canvas, data, context):
        ...     draw_barcode(canvas.surface, data)
        ...     return None
    """
    return REGION_FILLERS.register(region_type)


def fill_region(
    document: fitz.Document,
    canvas: PageCanvas,
    region: RegionSpec,
    location: LocationEntry,
    context: StampContext,
) -> Optional[Dict[str, Any]]:
    """
    Fill one region with its location data.

    Raises:
        UnknownHandlerError: If no filler is registered for the region type
    """
    filler = REGION_FILLERS.get(region.type)
    data = {**region.as_record(), **location}
    overflow = filler(document, canvas, data, context)
    if overflow:
        logger.debug(f"Region {region.name!r} overflowed")
        return overflow
    return None


def fill_regions(
    document: fitz.Document,
    canvas: PageCanvas,
    regions: Iterable[RegionSpec],
    page_data: PageData,
    context: StampContext,
) -> Overflow:
    """
    Fill every region that has data on this page, lowest priority first.

    Regions without a location entry are skipped. Equal priorities keep
    their declared order.

    Returns:
        Region name -> overflow entry, only for regions that overflowed
    """
    overflows: Overflow = {}
    for region in sorted(regions, key=lambda r: r.priority):
        location = page_data.location(region.name)
        if location is None:
            continue
        overflow = fill_region(document, canvas, region, location, context)
        if overflow is not None:
            overflows[region.name] = overflow
    return overflows
