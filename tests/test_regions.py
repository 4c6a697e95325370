"""Tests for the protected-region tokenizer.

Coverage:
- src/linkweave/parser/regions.py - span classification and precedence

Philosophy: Test what ends up protected, not regex internals.
"""

from __future__ import annotations

import pytest

from linkweave.parser.regions import Span, mask_regions, tokenize


def protected(text: str) -> list[tuple[str, str]]:
    return [(span.kind, span.text) for span in tokenize(text) if span.protected]


# ─────────────────────────────────────────────────────────────────────────────
# Lossless tokenization
# ─────────────────────────────────────────────────────────────────────────────


class TestTokenizeRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "plain text only",
            "```\ncode\n```\nafter",
            "a `b` c $d$ e $$\nf\n$$ g",
            "```python\nunterminated",
            "$$ never closed\nstill math",
            "costs $5 and $10",
        ],
    )
    def test_spans_join_back_to_input(self, text):
        assert "".join(span.text for span in tokenize(text)) == text

    def test_empty_text_has_no_spans(self):
        assert tokenize("") == []

    def test_plain_text_is_one_literal(self):
        assert tokenize("hello [[world]]") == [Span("hello [[world]]")]


# ─────────────────────────────────────────────────────────────────────────────
# Code
# ─────────────────────────────────────────────────────────────────────────────


class TestCodeRegions:
    def test_fenced_block(self):
        text = "before\n```js\nlet a = [[x]];\n```\nafter"
        assert protected(text) == [("code", "```js\nlet a = [[x]];\n```")]

    def test_tilde_fence(self):
        text = "~~~\n$x$\n~~~\n"
        assert protected(text) == [("code", "~~~\n$x$\n~~~")]

    def test_longer_closing_fence(self):
        text = "````\ninner ``` line\n`````\nafter"
        assert protected(text) == [("code", "````\ninner ``` line\n`````")]

    def test_unterminated_fence_runs_to_end(self):
        text = "intro\n```\n[[a]]\nstill code"
        assert protected(text) == [("code", "```\n[[a]]\nstill code")]

    def test_inline_code(self):
        assert protected("use `[[not a link]]` here") == [("code", "`[[not a link]]`")]

    def test_double_backtick_inline_code(self):
        assert protected("x ``a`b`` y") == [("code", "``a`b``")]

    def test_inline_code_does_not_cross_lines(self):
        assert protected("a `b\nc` d") == []

    def test_dollar_inside_code_is_not_math(self):
        assert protected("`$x$`") == [("code", "`$x$`")]


# ─────────────────────────────────────────────────────────────────────────────
# Math
# ─────────────────────────────────────────────────────────────────────────────


class TestMathRegions:
    def test_inline_math_with_pipe(self):
        assert protected("value $a|b$ here") == [("math", "$a|b$")]

    def test_display_math_multiline(self):
        text = "$$\n\\left| x \\right|\n$$"
        assert protected(text) == [("math", text)]

    def test_bracket_display_math(self):
        assert protected("\\[\na|b\n\\]") == [("math", "\\[\na|b\n\\]")]

    def test_paren_inline_math(self):
        assert protected("so \\(x|y\\) ok") == [("math", "\\(x|y\\)")]

    def test_double_dollar_not_read_as_two_inline(self):
        assert protected("$$a$$") == [("math", "$$a$$")]

    def test_unterminated_display_math_runs_to_end(self):
        assert protected("x $$ y\nz") == [("math", "$$ y\nz")]

    def test_dollar_pair_on_one_line_is_math(self):
        assert protected("costs $5 and $10") == [("math", "$5 and $")]

    def test_spaces_inside_delimiters_allowed(self):
        assert protected("| $ x|y $ | z |") == [("math", "$ x|y $")]

    def test_escaped_dollar_is_not_math(self):
        assert protected("a \\$b$ c") == []

    def test_inline_math_does_not_cross_lines(self):
        assert protected("$a\nb$") == []


class TestMaskRegions:
    def test_removes_code_and_math(self):
        text = "a `[[b]]` c $[[d]]$ e\n```\n[[f]]\n```\n[[g]]"
        masked = mask_regions(text)
        assert "[[b]]" not in masked
        assert "[[d]]" not in masked
        assert "[[f]]" not in masked
        assert "[[g]]" in masked
