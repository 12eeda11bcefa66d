"""Command extraction from raw chat lines (core domain).

A chat line may carry several commands: ``!name`` / ``&name`` runs and
``[[name]]`` brackets. Extraction is a small scanner followed by named
filters and normalization steps, each usable on its own.
"""

from __future__ import annotations

import re
from typing import List, Optional

from core.models import Candidate

MARKERS = "!&"
# Characters that end a marker run.
RUN_STOP = "!&?[)"
# Characters that may not open a marker run.
RUN_START_STOP = RUN_STOP + "="
BRACKET_OPEN = "[["
BRACKET_CLOSE = "]]"
QUOTES = "\"'"
NAME_KEYWORD = "card "

_GREETING = re.compile(r"(?i)^h(ello|i)( *)(\!|\.|\?)*( *)$")


def is_greeting(text: str) -> bool:
    """Return True for a bare hi/hello, optionally punctuated."""

    return bool(_GREETING.match(text))


def has_marker(text: str) -> bool:
    return any(marker in text for marker in MARKERS) or BRACKET_OPEN in text


def _scan_marker_run(text: str, start: int) -> Optional[int]:
    """Return the end of the marker run starting at ``start``, if any.

    A run needs at least two characters after the marker. When the run
    contains a sentence break (". "), it ends after the last one.
    """

    body_start = start + 1
    if body_start >= len(text) or text[body_start] in RUN_START_STOP:
        return None
    end = body_start
    while end < len(text) and text[end] not in RUN_STOP:
        end += 1
    if end - body_start < 2:
        return None

    for dot in range(end - 2, body_start + 1, -1):
        if text[dot] == "." and text[dot + 1].isspace():
            return dot + 2
    return end


def extract_raw_commands(text: str) -> List[str]:
    """Return raw command captures (marker or brackets included) in order."""

    captures: List[str] = []
    pos = 0
    while pos < len(text):
        if text.startswith(BRACKET_OPEN, pos):
            close = text.find(BRACKET_CLOSE, pos + len(BRACKET_OPEN))
            if close != -1:
                end = close + len(BRACKET_CLOSE)
                captures.append(text[pos:end])
                pos = end
                continue
        elif text[pos] in MARKERS:
            end = _scan_marker_run(text, pos)
            if end is not None:
                captures.append(text[pos:end])
                pos = end
                continue
        pos += 1
    return captures


def is_pure_punctuation(capture: str) -> bool:
    """Reject captures with no word characters at all."""

    return not re.search(r"\w", capture)


def is_degenerate_marker(capture: str) -> bool:
    """Reject a marker immediately followed by whitespace ("! what")."""

    return len(capture) > 1 and capture[0] in MARKERS and capture[1].isspace()


def is_sentence_punctuation(capture: str) -> bool:
    """Reject a bang that closes quoted speech ('wow!' she said) or spans lines."""

    if "\n" in capture:
        return True
    return (
        len(capture) > 2
        and capture[0] in MARKERS
        and capture[1] in QUOTES
        and capture[2].isspace()
    )


def is_quoted_empty(capture: str) -> bool:
    """Reject empty quoted forms like !"" or [['']]."""

    inner = strip_marker(capture.strip())
    return len(inner) == 2 and inner[0] == inner[1] and inner[0] in QUOTES


REJECT_FILTERS = (
    is_pure_punctuation,
    is_degenerate_marker,
    is_sentence_punctuation,
    is_quoted_empty,
)


def strip_marker(capture: str) -> str:
    if capture.startswith(BRACKET_OPEN) and capture.endswith(BRACKET_CLOSE):
        return capture[len(BRACKET_OPEN):-len(BRACKET_CLOSE)]
    if capture[:1] in MARKERS:
        return capture[1:]
    return capture


def unwrap_quotes(command: str) -> str:
    """Remove one layer of matching quotes around the whole command."""

    if len(command) > 2 and command[0] in QUOTES and command[-1] == command[0]:
        inner = command[1:-1]
        if command[0] not in inner:
            return inner
    return command


def strip_name_keyword(command: str) -> str:
    if command.lower().startswith(NAME_KEYWORD):
        return command[len(NAME_KEYWORD):].lstrip()
    return command


def normalize(capture: str, max_length: int) -> str:
    command = strip_marker(capture.strip()).strip()
    command = unwrap_quotes(command).strip()
    command = strip_name_keyword(command)
    # Real lookups are short phrases; long captures are usually chat prose.
    return command[:max_length].strip()


def tokenize(text: str, implicit_command: bool, max_length: int) -> List[Candidate]:
    """Split a chat line into ordered command candidates.

    ``implicit_command`` is set for private conversations, where a line
    without any marker is treated as one command.
    """

    if implicit_command and not has_marker(text):
        text = MARKERS[0] + text

    candidates: List[Candidate] = []
    for capture in extract_raw_commands(text):
        if any(reject(capture) for reject in REJECT_FILTERS):
            continue
        command = normalize(capture, max_length)
        if not command:
            continue
        candidates.append(Candidate(text=command, index=len(candidates)))
    return candidates
