"""
Module: fillers.images

Purpose:
    Image regions. The image is scaled into the region, either keeping its
    aspect ratio (centered) or stretched to the region's box. Images never
    overflow.

Region Fields:
    - aspect: "preserve" (default) or "stretch"

Contents:
    {"image": PIL.Image | path | bytes}

Dependencies:
    - PIL: Image decoding
    - reportlab: ImageReader, drawImage
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import fitz
from PIL import Image
from reportlab.lib.utils import ImageReader

from pdf_stamper.context import StampContext
from pdf_stamper.stamping.canvas import PageCanvas
from pdf_stamper.stamping.regions import register_region_filler

logger = logging.getLogger(__name__)

ASPECTS = ("preserve", "stretch")

ImageSource = Union[Image.Image, str, Path, bytes]


def load_image(source: ImageSource) -> Image.Image:
    """
    Load image contents into a PIL image.

    Raises:
        FileNotFoundError: If a path does not exist
        PIL.UnidentifiedImageError: If the data is not an image
    """
    if isinstance(source, Image.Image):
        return source
    if isinstance(source, (bytes, bytearray)):
        image = Image.open(io.BytesIO(source))
    else:
        image = Image.open(Path(source))
    image.load()
    return image


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


@register_region_filler("image")
def fill_image(
    document: fitz.Document,
    canvas: PageCanvas,
    data: Dict[str, Any],
    context: StampContext,
) -> Optional[Dict[str, Any]]:
    """Draw an image into a region. Always returns None."""
    contents = data.get("contents") or {}
    source = contents.get("image")
    if source is None:
        logger.warning(f"Image region {data['name']!r} has no image in its contents")
        return None

    aspect = data.get("aspect", "preserve")
    if aspect not in ASPECTS:
        raise ValueError(f"Region {data['name']!r}: unknown aspect {aspect!r}")

    image = load_image(source)
    surface = canvas.surface
    surface.drawImage(
        _pil_to_reader(image),
        float(data["x"]),
        float(data["y"]),
        width=float(data["width"]),
        height=float(data["height"]),
        preserveAspectRatio=aspect == "preserve",
        anchor="c",
        mask="auto",
    )
    return None
