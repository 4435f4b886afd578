"""
Module: fillers.markup

Purpose:
    Parse a small HTML subset into paragraph nodes for "text-parsed"
    regions. Parsing happens once; overflow hands the remaining nodes to
    the continuation page as-is.

Supported Tags:
    p, h1-h3, ul, ol, li, b/strong, i/em, br

Key Classes:
    - TextRun: Styled run of text
    - ParagraphNode: Paragraph, heading or list item

Key Functions:
    - parse_markup(): Markup string -> paragraph nodes
    - coerce_nodes(): Markup, node dicts or nodes -> paragraph nodes
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Any, List, Mapping, Optional, Tuple

PARAGRAPH = "paragraph"
HEADING = "heading"
BULLET = "bullet"
NUMBERED = "numbered"

NODE_KINDS = (PARAGRAPH, HEADING, BULLET, NUMBERED)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True)
class ParagraphNode:
    """
    One block of rich text.

    Attributes:
        kind: "paragraph", "heading", "bullet" or "numbered"
        runs: Styled text runs; "\\n" runs are line breaks
        level: Heading level (1-3) or list nesting depth (1-based)
        number: Item number for numbered list items
        continued: Rest of a node split across pages; no list marker
    """

    kind: str
    runs: Tuple[TextRun, ...]
    level: int = 0
    number: Optional[int] = None
    continued: bool = False

    def __post_init__(self) -> None:
        if self.kind not in NODE_KINDS:
            raise ValueError(f"Unknown paragraph kind {self.kind!r}")
        object.__setattr__(self, "runs", tuple(self.runs))

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_list_item(self) -> bool:
        return self.kind in (BULLET, NUMBERED)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParagraphNode":
        runs = data.get("runs")
        if runs is None:
            runs = [{"text": data.get("text", "")}]
        return cls(
            kind=data.get("kind", PARAGRAPH),
            runs=tuple(
                TextRun(r["text"], bool(r.get("bold", False)), bool(r.get("italic", False)))
                for r in runs
            ),
            level=data.get("level", 0),
            number=data.get("number"),
            continued=bool(data.get("continued", False)),
        )


class _MarkupParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.nodes: List[ParagraphNode] = []
        self._runs: List[TextRun] = []
        self._block: Tuple[str, int, Optional[int]] = (PARAGRAPH, 0, None)
        self._bold = 0
        self._italic = 0
        self._lists: List[List[Any]] = []  # [kind, items so far]

    def handle_starttag(self, tag, attrs):
        if tag in ("b", "strong"):
            self._bold += 1
        elif tag in ("i", "em"):
            self._italic += 1
        elif tag == "br":
            self._runs.append(TextRun("\n", self._bold > 0, self._italic > 0))
        elif tag in ("ul", "ol"):
            self._flush()
            self._lists.append([BULLET if tag == "ul" else NUMBERED, 0])
        elif tag == "p":
            self._flush()
        elif tag in ("h1", "h2", "h3"):
            self._flush()
            self._block = (HEADING, int(tag[1]), None)
        elif tag == "li":
            self._flush()
            if not self._lists:
                self._block = (BULLET, 1, None)
            else:
                current = self._lists[-1]
                current[1] += 1
                number = current[1] if current[0] == NUMBERED else None
                self._block = (current[0], len(self._lists), number)

    def handle_endtag(self, tag):
        if tag in ("b", "strong"):
            self._bold = max(0, self._bold - 1)
        elif tag in ("i", "em"):
            self._italic = max(0, self._italic - 1)
        elif tag in ("p", "h1", "h2", "h3", "li"):
            self._flush()
        elif tag in ("ul", "ol"):
            self._flush()
            if self._lists:
                self._lists.pop()

    def handle_data(self, data):
        text = _WHITESPACE_RE.sub(" ", data)
        if not text.strip() and not self._runs:
            return
        self._runs.append(TextRun(text, self._bold > 0, self._italic > 0))

    def _flush(self) -> None:
        runs, self._runs = self._runs, []
        kind, level, number = self._block
        self._block = (PARAGRAPH, 0, None)
        if any(run.text.strip() for run in runs):
            self.nodes.append(ParagraphNode(kind, tuple(runs), level, number))

    def close(self) -> None:
        super().close()
        self._flush()


def parse_markup(markup: str) -> Tuple[ParagraphNode, ...]:
    """
    Parse markup into paragraph nodes.

    Text outside any block tag becomes a plain paragraph.

    Example:
        >>> nodes = parse_markup("<h1>Title</h1><p>Some <b>bold</b> text</p>")
        >>> [(n.kind, n.text) for n in nodes]
        [('heading', 'Title'), ('paragraph', 'Some bold text')]
    """
    parser = _MarkupParser()
    parser.feed(markup)
    parser.close()
    return tuple(parser.nodes)


def coerce_nodes(value: Any) -> Tuple[ParagraphNode, ...]:
    """Accept a markup string, a sequence of nodes or node dicts, or None."""
    if value is None:
        return ()
    if isinstance(value, str):
        return parse_markup(value)
    return tuple(
        node if isinstance(node, ParagraphNode) else ParagraphNode.from_dict(node)
        for node in value
    )
