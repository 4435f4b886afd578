"""
Unit tests for markup parsing into paragraph nodes.
"""

import pytest

from pdf_stamper.fillers.markup import ParagraphNode, TextRun, coerce_nodes, parse_markup


class TestParseMarkup:

    def test_when_blocks_then_one_node_each(self):
        nodes = parse_markup("<h1>Title</h1><p>First</p><p>Second</p>")

        assert [(n.kind, n.level, n.text) for n in nodes] == [
            ("heading", 1, "Title"),
            ("paragraph", 0, "First"),
            ("paragraph", 0, "Second"),
        ]

    def test_when_inline_styles_then_runs_carry_flags(self):
        (node,) = parse_markup("<p>Some <b>bold <i>both</i></b> and <em>italic</em></p>")

        assert node.runs == (
            TextRun("Some "),
            TextRun("bold ", bold=True),
            TextRun("both", bold=True, italic=True),
            TextRun(" and "),
            TextRun("italic", italic=True),
        )

    def test_when_numbered_list_with_nested_bullets_then_levels_and_numbers(self):
        nodes = parse_markup("<ol><li>one<ul><li>sub</li></ul></li><li>two</li></ol>")

        assert [(n.kind, n.level, n.number, n.text) for n in nodes] == [
            ("numbered", 1, 1, "one"),
            ("bullet", 2, None, "sub"),
            ("numbered", 1, 2, "two"),
        ]

    def test_when_br_then_newline_run(self):
        (node,) = parse_markup("<p>line one<br>line two</p>")

        assert node.text == "line one\nline two"

    def test_when_text_outside_blocks_then_plain_paragraph(self):
        nodes = parse_markup("Just text")

        assert nodes == (ParagraphNode("paragraph", (TextRun("Just text"),)),)

    def test_when_whitespace_between_blocks_then_ignored(self):
        nodes = parse_markup("<p>a</p>\n   \n<p>b</p>")

        assert [n.text for n in nodes] == ["a", "b"]

    def test_entities_decoded(self):
        (node,) = parse_markup("<p>Fish &amp; chips</p>")

        assert node.text == "Fish & chips"


class TestCoerceNodes:

    def test_when_none_then_empty(self):
        assert coerce_nodes(None) == ()

    def test_when_dicts_then_nodes(self):
        nodes = coerce_nodes([
            {"kind": "heading", "level": 2, "text": "Intro"},
            {"runs": [{"text": "Hi ", "bold": True}, {"text": "there"}]},
        ])

        assert nodes[0] == ParagraphNode("heading", (TextRun("Intro"),), level=2)
        assert nodes[1].runs[0].bold
        assert nodes[1].kind == "paragraph"

    def test_when_nodes_then_passed_through(self):
        node = ParagraphNode("bullet", (TextRun("x"),), level=1, continued=True)

        assert coerce_nodes([node]) == (node,)

    def test_when_kind_unknown_then_raises(self):
        with pytest.raises(ValueError, match="Unknown paragraph kind"):
            coerce_nodes([{"kind": "table", "text": "x"}])
