"""
Module: stamping.transforms

Purpose:
    Page transforms applied after a page's regions are filled, dispatched
    on the transform kind.

Key Functions:
    - register_page_transform(): Decorator registering a transform kind
    - apply_transform(): Apply one transform to a page

Dependencies:
    - fitz (PyMuPDF): Page mutation
    - core.dispatch: Tag -> handler registry
"""

from __future__ import annotations

import logging
from typing import Callable

import fitz

from pdf_stamper.core.dispatch import HandlerRegistry
from pdf_stamper.core.models import PageTransform

logger = logging.getLogger(__name__)

PageTransformer = Callable[[fitz.Page, PageTransform], fitz.Page]

PAGE_TRANSFORMS: HandlerRegistry[PageTransformer] = HandlerRegistry("page transform")


def register_page_transform(kind: str) -> Callable[[PageTransformer], PageTransformer]:
    return PAGE_TRANSFORMS.register(kind)


def apply_transform(page: fitz.Page, transform: PageTransform) -> fitz.Page:
    """
    Apply one transform to a page.

    Raises:
        UnknownHandlerError: If the transform kind is not registered
    """
    handler = PAGE_TRANSFORMS.get(transform.kind)
    logger.debug(f"Applying {transform.kind}{transform.args} to page {page.number}")
    return handler(page, transform)


@register_page_transform("rotate")
def rotate(page: fitz.Page, transform: PageTransform) -> fitz.Page:
    """Set the page's absolute rotation in degrees (multiple of 90)."""
    (degrees,) = transform.args
    degrees = int(degrees)
    if degrees % 90 != 0:
        raise ValueError(f"Rotation must be a multiple of 90 degrees: {degrees}")
    page.set_rotation(degrees % 360)
    return page
