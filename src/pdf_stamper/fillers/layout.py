"""
Module: fillers.layout

Purpose:
    Line breaking shared by the text fillers. Text is tokenized into styled
    words, broken greedily into lines that fit a width, and whatever did
    not fit can be turned back into text for a continuation page.

Key Classes:
    - Word: One styled word with its preceding whitespace
    - Line: Words that fit on one line

Key Functions:
    - tokenize(): Styled text pieces -> words
    - break_lines(): Words -> lines within a width
    - lines_that_fit(): How many lines fit a height
    - words_to_text(): Words -> plain text
    - parse_color(): Region color field -> reportlab color

Dependencies:
    - reportlab.lib.colors: Color parsing
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Sequence, Tuple

from reportlab.lib import colors

DEFAULT_FONT_FAMILY = "helvetica"
DEFAULT_FONT_SIZE = 10.0
DEFAULT_LINE_HEIGHT = 1.2  # Multiple of font size

_TOKEN_RE = re.compile(r"(\n|[^\S\n]+)")
_EPSILON = 1e-6

# measure(text, style) -> width in points
Measure = Callable[[str, str], float]


@dataclass(frozen=True)
class Word:
    """
    A word in a font style.

    Attributes:
        text: The word, never containing whitespace
        style: Font style ("regular", "bold", ...)
        space_before: Whitespace separated it from the previous word
        breaks: Forced line breaks before this word
    """

    text: str
    style: str = "regular"
    space_before: bool = False
    breaks: int = 0


@dataclass
class Line:
    words: List[Word] = field(default_factory=list)
    width: float = 0.0


def tokenize(pieces: Iterable[Tuple[str, str]]) -> List[Word]:
    """
    Split styled text pieces into words.

    Whitespace carries over between pieces, so "Hello " + "world" gives
    two words while "bold" + "," glues the comma to the word before.

    Example:
        >>> [w.text for w in tokenize([("Hello  big\\nworld", "regular")])]
        ['Hello', 'big', 'world']
    """
    words: List[Word] = []
    space = False
    breaks = 0
    for text, style in pieces:
        for token in _TOKEN_RE.split(text):
            if not token:
                continue
            if token == "\n":
                breaks += 1
                space = False
            elif token.isspace():
                space = breaks == 0
            else:
                words.append(Word(token, style, space_before=space and bool(words), breaks=breaks))
                space = False
                breaks = 0
    return words


def break_lines(words: Sequence[Word], measure: Measure, max_width: float) -> List[Line]:
    """
    Break words into lines no wider than ``max_width``.

    A word wider than the line gets a line of its own. Forced breaks end
    the current line; n breaks leave n - 1 empty lines.
    """
    lines: List[Line] = []
    current = Line()
    for word in words:
        if word.breaks:
            lines.append(current)
            lines.extend(Line() for _ in range(word.breaks - 1))
            current = Line()

        word_width = measure(word.text, word.style)
        gap = measure(" ", word.style) if current.words and word.space_before else 0.0
        if current.words and current.width + gap + word_width > max_width + _EPSILON:
            lines.append(current)
            current = Line()
            gap = 0.0
        current.words.append(word)
        current.width += gap + word_width

    if current.words:
        lines.append(current)
    return lines


def lines_that_fit(height: float, leading: float, line_count: int) -> int:
    """Number of lines with the given leading that fit in ``height``."""
    if leading <= 0:
        raise ValueError(f"Line leading must be positive: {leading}")
    return min(line_count, int(height / leading + _EPSILON))


def remaining_words(lines: Sequence[Line]) -> List[Word]:
    return [word for line in lines for word in line.words]


def words_to_text(words: Sequence[Word]) -> str:
    """Rebuild text from words; leading breaks and spaces are dropped."""
    parts = []
    for index, word in enumerate(words):
        if index > 0:
            if word.breaks:
                parts.append("\n" * word.breaks)
            elif word.space_before:
                parts.append(" ")
        parts.append(word.text)
    return "".join(parts)


def line_text(line: Line) -> str:
    return words_to_text(line.words)


def parse_color(value: Any) -> colors.Color:
    """
    Region color: a name or "#rrggbb" string, or an RGB triple in 0-255
    (or 0-1) components. None is black.
    """
    if value is None:
        return colors.black
    if isinstance(value, str):
        return colors.toColor(value)
    red, green, blue = (float(c) for c in value)
    if max(red, green, blue) > 1:
        red, green, blue = red / 255, green / 255, blue / 255
    return colors.Color(red, green, blue)
