from __future__ import annotations

import pytest

from adapters.reply_formatting import format_reply


def test_html_keeps_markup_and_escapes_the_rest() -> None:
    text = "<b>Opt</b> {U} · Instant · Scry 1. <i>(x < y & z)</i>"
    assert format_reply(text, "html") == "<b>Opt</b> {U} · Instant · Scry 1. <i>(x &lt; y &amp; z)</i>"


def test_markdown_converts_tags_and_escapes_specials() -> None:
    assert format_reply("<b>702.2a.</b> a*b_c", "markdown") == "**702.2a.** a\\*b\\_c"


def test_plain_strips_tags() -> None:
    assert format_reply("<b>Opt</b> {U}", "plain") == "Opt {U}"


def test_unknown_mode() -> None:
    with pytest.raises(ValueError):
        format_reply("Opt", "bbcode")
    with pytest.raises(ValueError):
        format_reply("Opt", "irc")
