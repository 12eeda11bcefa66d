from __future__ import annotations

from core.chunker import CONTINUATION_MARKER, chunk_reply, word_wrap


def _strip_marker(line: str) -> str:
    return line[: -len(CONTINUATION_MARKER)] if line.endswith(CONTINUATION_MARKER) else line


def test_short_reply_is_one_line_with_prefix() -> None:
    assert chunk_reply("Opt {U}", 390, "@ana: ") == ["@ana: Opt {U}"]


def test_wrap_never_splits_words_and_fits_width() -> None:
    text = " ".join(f"word{i}" for i in range(60))
    lines = word_wrap(text, 40)

    assert len(lines) > 1
    assert all(len(line) <= 40 for line in lines)
    assert all(line.endswith(CONTINUATION_MARKER) for line in lines[:-1])
    words = " ".join(_strip_marker(line) for line in lines).split()
    assert words == text.split()


def test_only_first_physical_line_is_prefixed() -> None:
    text = " ".join(["alpha"] * 30)
    lines = chunk_reply(text + "\nsecond line", 50, "@ana: ")

    assert lines[0].startswith("@ana: ")
    assert len(lines[0]) <= 50
    assert not any(line.startswith("@ana: ") for line in lines[1:])
    assert lines[-1] == "second line"


def test_semantic_lines_wrap_independently_and_blank_lines_drop() -> None:
    lines = chunk_reply("first\n\n   \nsecond", 390, "")
    assert lines == ["first", "second"]


def test_long_single_word_gets_own_line() -> None:
    lines = word_wrap("a " + "x" * 30 + " b", 10)
    assert lines == ["a" + CONTINUATION_MARKER, "x" * 30 + CONTINUATION_MARKER, "b"]


def test_chunking_is_deterministic() -> None:
    text = "The quick brown fox jumps over the lazy dog " * 10
    assert chunk_reply(text, 60, "x: ") == chunk_reply(text, 60, "x: ")


def test_empty_reply_yields_nothing() -> None:
    assert chunk_reply("  \n ", 390, "@ana: ") == []


def test_line_that_fits_exactly_is_not_broken() -> None:
    assert word_wrap("aaaa bbbb cccc dddd", 19) == ["aaaa bbbb cccc dddd"]
    assert word_wrap("aaaa bbbb cccc dddd", 20) == ["aaaa bbbb cccc dddd"]


def test_words_move_down_to_make_room_for_marker() -> None:
    lines = word_wrap("aaaa bbbb cccc dddd eeee", 20)

    assert lines == ["aaaa bbbb cccc" + CONTINUATION_MARKER, "dddd eeee"]
    assert all(len(line) <= 20 for line in lines)


def test_prefixed_first_line_uses_its_full_room() -> None:
    text = "x" * 30 + " yy"
    assert chunk_reply(text, 40, "@ana: ") == ["@ana: " + text]


def test_prefixed_first_line_never_exceeds_width_when_wrapping() -> None:
    text = " ".join(["word"] * 40)
    lines = chunk_reply(text, 40, "@ana: ")

    assert len(lines) > 1
    assert all(len(line) <= 40 for line in lines)
    assert lines[0].endswith(CONTINUATION_MARKER)
