"""Reply line wrapping (core domain)."""

from __future__ import annotations

from collections import deque
from typing import List, Optional

CONTINUATION_MARKER = " [...]"


def _break_line(current: str, limit: int) -> tuple[str, str]:
    """Split ``current`` so the kept part plus the marker fits ``limit``.

    Returns the kept head and the words carried to the next line. The head
    always keeps at least one word.
    """

    head = current
    carried: List[str] = []
    while len(head) + len(CONTINUATION_MARKER) > limit and " " in head:
        head, last = head.rsplit(" ", 1)
        carried.insert(0, last)
    return head, " ".join(carried)


def word_wrap(text: str, width: int, first_width: Optional[int] = None) -> List[str]:
    """Greedy word wrap that never splits a word.

    A line only breaks when the next word does not fit. The broken line then
    ends with the continuation marker, and words are moved down until the
    marker fits too. A single word longer than the width gets a line of its
    own.
    """

    words = deque(text.split())
    if not words:
        return []

    limit = first_width if first_width is not None else width
    lines: List[str] = []
    current = words.popleft()
    while words:
        word = words[0]
        if len(current) + 1 + len(word) <= limit:
            current = f"{current} {word}"
            words.popleft()
            continue
        head, carried = _break_line(current, limit)
        lines.append(head + CONTINUATION_MARKER)
        limit = width
        current = carried or words.popleft()
    lines.append(current)
    return lines


def chunk_reply(reply: str, width: int, prefix: str = "") -> List[str]:
    """Split a reply into physical lines, addressing only the first one."""

    physical: List[str] = []
    for semantic_line in reply.split("\n"):
        semantic_line = semantic_line.strip()
        if not semantic_line:
            continue
        if not physical:
            wrapped = word_wrap(semantic_line, width, first_width=width - len(prefix))
            wrapped[0] = f"{prefix}{wrapped[0]}"
        else:
            wrapped = word_wrap(semantic_line, width)
        physical.extend(wrapped)
    return physical
