"""
Module: fillers

Purpose:
    Built-in region types. Importing this package registers them with the
    region filler dispatch.

Region Types:
    - "text": Wrapped plain text, overflows by line
    - "text-parsed": Rich text from markup, overflows by paragraph node
    - "image": Scaled image, never overflows
"""

from .images import fill_image, load_image
from .markup import ParagraphNode, TextRun, coerce_nodes, parse_markup
from .parsed import fill_text_parsed
from .text import fill_text

__all__ = [
    "fill_image",
    "load_image",
    "ParagraphNode",
    "TextRun",
    "coerce_nodes",
    "parse_markup",
    "fill_text_parsed",
    "fill_text",
]
