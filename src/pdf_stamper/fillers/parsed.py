"""
Module: fillers.parsed

Purpose:
    Rich text regions ("text-parsed"). Paragraph nodes are laid out top-down
    with per-run bold/italic fonts, scaled headings and hanging list
    markers. When the region is full, the remaining nodes (the current one
    split at the last line that fit) are returned as overflow.

Region Fields:
    - font: Font family (default "helvetica"); all four styles are used
    - size: Body font size in points (default 10)
    - line_height: Line spacing as a multiple of size (default 1.2)
    - paragraph_spacing: Extra space between nodes (default size / 2)
    - list_indent: Indent per list level in points (default 14)
    - color: Color name, "#rrggbb" or RGB triple

Contents:
    {"text": markup string | paragraph nodes}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import fitz
from reportlab.pdfbase import pdfmetrics

from pdf_stamper.context import StampContext, style_for
from pdf_stamper.stamping.canvas import PageCanvas
from pdf_stamper.stamping.regions import register_region_filler

from .layout import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_HEIGHT,
    Word,
    break_lines,
    parse_color,
    remaining_words,
    tokenize,
)
from .markup import HEADING, NUMBERED, ParagraphNode, TextRun, coerce_nodes

logger = logging.getLogger(__name__)

DEFAULT_LIST_INDENT = 14.0
HEADING_SCALE = {1: 1.6, 2: 1.3, 3: 1.15}
BULLET_MARKER = "•"

_STYLE_FLAGS = {
    "regular": (False, False),
    "bold": (True, False),
    "italic": (False, True),
    "bold-italic": (True, True),
}


def _node_words(node: ParagraphNode) -> List[Word]:
    heading = node.kind == HEADING
    return tokenize((run.text, style_for(run.bold or heading, run.italic)) for run in node.runs)


def _split_node(node: ParagraphNode, words: Sequence[Word]) -> ParagraphNode:
    """The part of ``node`` made of ``words``, marked as continued."""
    runs: List[TextRun] = []
    for index, word in enumerate(words):
        prefix = ""
        if index > 0:
            prefix = "\n" * word.breaks if word.breaks else (" " if word.space_before else "")
        bold, italic = _STYLE_FLAGS[word.style]
        if runs and (runs[-1].bold, runs[-1].italic) == (bold, italic):
            runs[-1] = TextRun(runs[-1].text + prefix + word.text, bold, italic)
        else:
            runs.append(TextRun(prefix + word.text, bold, italic))
    return ParagraphNode(node.kind, tuple(runs), node.level, node.number, continued=True)


@register_region_filler("text-parsed")
def fill_text_parsed(
    document: fitz.Document,
    canvas: PageCanvas,
    data: Dict[str, Any],
    context: StampContext,
) -> Optional[Dict[str, Any]]:
    """
    Draw paragraph nodes into a region.

    Returns:
        {"contents": {..., "text": [remaining nodes]}} on overflow, else None
    """
    contents = data.get("contents") or {}
    nodes = coerce_nodes(contents.get("text"))
    if not nodes:
        return None

    family = data.get("font", DEFAULT_FONT_FAMILY)
    size = float(data.get("size", DEFAULT_FONT_SIZE))
    line_height = float(data.get("line_height", DEFAULT_LINE_HEIGHT))
    paragraph_spacing = float(data.get("paragraph_spacing", size / 2))
    list_indent = float(data.get("list_indent", DEFAULT_LIST_INDENT))

    fonts: Dict[str, str] = {}

    def font_for(style: str) -> str:
        if style not in fonts:
            fonts[style] = context.font_name(family, style)
        return fonts[style]

    left = float(data["x"])
    width = float(data["width"])
    bottom = float(data["y"])
    cursor = bottom + float(data["height"])

    surface = canvas.surface
    surface.saveState()
    surface.setFillColor(parse_color(data.get("color")))
    try:
        for index, node in enumerate(nodes):
            node_size = size * HEADING_SCALE.get(node.level, 1.0) if node.kind == HEADING else size
            leading = node_size * line_height
            indent = node.level * list_indent if node.is_list_item else 0.0

            def measure(value: str, style: str) -> float:
                return pdfmetrics.stringWidth(value, font_for(style), node_size)

            lines = break_lines(_node_words(node), measure, max(width - indent, 1.0))
            if index > 0:
                cursor -= paragraph_spacing

            for line_index, line in enumerate(lines):
                if cursor - leading < bottom - 1e-6:
                    rest: List[Any] = list(nodes[index + 1:])
                    if line_index == 0:
                        rest.insert(0, node)
                    else:
                        rest.insert(0, _split_node(node, remaining_words(lines[line_index:])))
                    logger.debug(f"Parsed text region {data['name']!r}: {len(rest)} node(s) overflow")
                    return {"contents": {**contents, "text": rest}}

                baseline = cursor - node_size
                if line_index == 0 and node.is_list_item and not node.continued:
                    marker = f"{node.number}." if node.kind == NUMBERED else BULLET_MARKER
                    surface.setFont(font_for("regular"), node_size)
                    surface.drawString(left + indent - list_indent, baseline, marker)

                x = left + indent
                for word_index, word in enumerate(line.words):
                    if word_index > 0 and word.space_before:
                        x += measure(" ", word.style)
                    surface.setFont(font_for(word.style), node_size)
                    surface.drawString(x, baseline, word.text)
                    x += measure(word.text, word.style)
                cursor -= leading
    finally:
        surface.restoreState()

    return None
