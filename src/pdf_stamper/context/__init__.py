"""
Module: context

Purpose:
    Template and font registry consulted while stamping. Built once, then
    used read-only during assembly.

Key Functions:
    - base_context(): Context with the PDF standard fonts
    - embed_font(): Embed a pending font
    - load_template_file(): Load a template description from JSON

Key Classes:
    - StampContext: The registry
    - FontSpec: A TrueType font to embed
"""

from .fonts import FONT_STYLES, FontSpec, style_for
from .registry import (
    ContextFrozenError,
    StampContext,
    UnknownFontError,
    UnknownTemplateError,
    base_context,
    embed_font,
    open_source,
)
from .loading import load_template_file, register_templates

__all__ = [
    "FONT_STYLES",
    "FontSpec",
    "style_for",
    "ContextFrozenError",
    "StampContext",
    "UnknownFontError",
    "UnknownTemplateError",
    "base_context",
    "embed_font",
    "open_source",
    "load_template_file",
    "register_templates",
]
