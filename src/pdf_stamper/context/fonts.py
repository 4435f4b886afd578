"""
Module: context.fonts

Purpose:
    Font descriptions and reportlab font registration. Text regions refer
    to fonts by (family, style); the context maps each pair to the name a
    reportlab canvas draws with.

Key Classes:
    - FontSpec: A TrueType font waiting to be embedded

Key Functions:
    - register_ttf(): Register a TrueType font with reportlab

Dependencies:
    - reportlab.pdfbase: Font metrics and TrueType embedding
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

logger = logging.getLogger(__name__)

FONT_STYLES = ("regular", "bold", "italic", "bold-italic")

# The PDF standard fonts need no embedding
STANDARD_FONTS: dict[tuple[str, str], str] = {
    ("helvetica", "regular"): "Helvetica",
    ("helvetica", "bold"): "Helvetica-Bold",
    ("helvetica", "italic"): "Helvetica-Oblique",
    ("helvetica", "bold-italic"): "Helvetica-BoldOblique",
    ("times", "regular"): "Times-Roman",
    ("times", "bold"): "Times-Bold",
    ("times", "italic"): "Times-Italic",
    ("times", "bold-italic"): "Times-BoldItalic",
    ("courier", "regular"): "Courier",
    ("courier", "bold"): "Courier-Bold",
    ("courier", "italic"): "Courier-Oblique",
    ("courier", "bold-italic"): "Courier-BoldOblique",
}


def style_for(bold: bool, italic: bool) -> str:
    """Style name for a bold/italic combination."""
    if bold and italic:
        return "bold-italic"
    if bold:
        return "bold"
    if italic:
        return "italic"
    return "regular"


@dataclass(frozen=True)
class FontSpec:
    """
    A TrueType font to embed (immutable).

    Attributes:
        path: Path to the .ttf file
        family: Family name used by regions (case-insensitive)
        style: One of FONT_STYLES
    """

    path: Path
    family: str
    style: str = "regular"

    def __post_init__(self) -> None:
        if self.style not in FONT_STYLES:
            raise ValueError(f"Unknown font style {self.style!r}, expected one of {FONT_STYLES}")
        object.__setattr__(self, "family", self.family.lower())
        object.__setattr__(self, "path", Path(self.path))

    @property
    def key(self) -> tuple[str, str]:
        return (self.family, self.style)

    @property
    def registered_name(self) -> str:
        """Name the font is registered under with reportlab."""
        return f"{self.family}-{self.style}"


def register_ttf(font: FontSpec) -> str:
    """
    Register a TrueType font with reportlab.

    reportlab subsets and embeds registered TTF fonts into every canvas
    that draws with them.

    Returns:
        The registered font name

    Raises:
        FileNotFoundError: If the font file does not exist
    """
    if not font.path.exists():
        raise FileNotFoundError(f"Font file not found: {font.path}")
    name = font.registered_name
    pdfmetrics.registerFont(TTFont(name, str(font.path)))
    logger.debug(f"Registered font {name} from {font.path}")
    return name
