"""
Module: fillers.text

Purpose:
    Plain text regions. Text is wrapped to the region width in a single
    font and drawn top-down; lines that do not fit the region height are
    returned as overflow text.

Region Fields:
    - font: Font family (default "helvetica")
    - style: "regular", "bold", "italic" or "bold-italic"
    - size: Font size in points (default 10)
    - line_height: Line spacing as a multiple of size (default 1.2)
    - align: "left", "center" or "right"
    - color: Color name, "#rrggbb" or RGB triple

Contents:
    {"text": str}

Dependencies:
    - reportlab.pdfbase.pdfmetrics: Text measurement
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import fitz
from reportlab.pdfbase import pdfmetrics

from pdf_stamper.context import StampContext
from pdf_stamper.stamping.canvas import PageCanvas
from pdf_stamper.stamping.regions import register_region_filler

from .layout import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_HEIGHT,
    break_lines,
    line_text,
    lines_that_fit,
    parse_color,
    remaining_words,
    tokenize,
    words_to_text,
)

logger = logging.getLogger(__name__)

ALIGNMENTS = ("left", "center", "right")


@register_region_filler("text")
def fill_text(
    document: fitz.Document,
    canvas: PageCanvas,
    data: Dict[str, Any],
    context: StampContext,
) -> Optional[Dict[str, Any]]:
    """
    Draw wrapped text into a region.

    Returns:
        {"contents": {..., "text": rest}} when not all lines fit, else None
    """
    contents = data.get("contents") or {}
    text = contents.get("text")
    if text is None or text == "":
        return None

    style = data.get("style", "regular")
    size = float(data.get("size", DEFAULT_FONT_SIZE))
    align = data.get("align", "left")
    if align not in ALIGNMENTS:
        raise ValueError(f"Region {data['name']!r}: unknown align {align!r}")
    font_name = context.font_name(data.get("font", DEFAULT_FONT_FAMILY), style)

    def measure(value: str, _style: str) -> float:
        return pdfmetrics.stringWidth(value, font_name, size)

    width = float(data["width"])
    lines = break_lines(tokenize([(str(text), style)]), measure, width)
    leading = size * float(data.get("line_height", DEFAULT_LINE_HEIGHT))
    fitting = lines_that_fit(float(data["height"]), leading, len(lines))

    surface = canvas.surface
    surface.saveState()
    surface.setFont(font_name, size)
    surface.setFillColor(parse_color(data.get("color")))

    x = float(data["x"])
    top = float(data["y"]) + float(data["height"])
    for index, line in enumerate(lines[:fitting]):
        if not line.words:
            continue
        baseline = top - index * leading - size
        value = line_text(line)
        if align == "center":
            surface.drawCentredString(x + width / 2, baseline, value)
        elif align == "right":
            surface.drawRightString(x + width, baseline, value)
        else:
            surface.drawString(x, baseline, value)
    surface.restoreState()

    rest = remaining_words(lines[fitting:])
    if not rest:
        return None
    logger.debug(f"Text region {data['name']!r}: {len(lines) - fitting} of {len(lines)} lines overflow")
    return {"contents": {**contents, "text": words_to_text(rest)}}
