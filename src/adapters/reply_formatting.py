"""Shared reply formatting helpers.

Resolvers mark up replies with <b> and <i> only. Keeping the conversion
here prevents drift between transports and keeps replies consistent
regardless of delivery channel.
"""

from __future__ import annotations

import html
import re

_TAG = re.compile(r"</?[bi]>")

_MARKDOWN = {"<b>": "**", "</b>": "**", "<i>": "__", "</i>": "__"}


def _format_html(text: str) -> str:
    # Escape everything, then bring back the two tags Telegram HTML allows.
    escaped = html.escape(text, quote=False)
    for tag in ("b", "i"):
        escaped = escaped.replace(f"&lt;{tag}&gt;", f"<{tag}>")
        escaped = escaped.replace(f"&lt;/{tag}&gt;", f"</{tag}>")
    return escaped


def _format_markdown(text: str) -> str:
    def escape_md(value: str) -> str:
        for ch in r"*_`[":
            value = value.replace(ch, f"\\{ch}")
        return value

    parts = _TAG.split(text)
    tags = _TAG.findall(text)
    out = [escape_md(parts[0])]
    for tag, part in zip(tags, parts[1:]):
        out.append(_MARKDOWN[tag])
        out.append(escape_md(part))
    return "".join(out)


def format_reply(text: str, mode: str = "html") -> str:
    """Convert reply markup for the given transport mode."""

    if mode == "html":
        return _format_html(text)
    if mode == "markdown":
        return _format_markdown(text)
    if mode == "plain":
        return _TAG.sub("", text)
    raise ValueError(f"Unsupported parse mode: {mode}")
