from __future__ import annotations

from core.tokenizer import (
    extract_raw_commands,
    is_degenerate_marker,
    is_greeting,
    is_pure_punctuation,
    is_quoted_empty,
    is_sentence_punctuation,
    normalize,
    tokenize,
)

MAX = 41


def _texts(line: str, implicit: bool = False) -> list[str]:
    return [candidate.text for candidate in tokenize(line, implicit_command=implicit, max_length=MAX)]


def test_bracket_pairs_in_order() -> None:
    assert _texts("[[Foo]] [[Bar]]") == ["Foo", "Bar"]


def test_bang_alone_yields_nothing() -> None:
    assert _texts("Hello!") == []
    assert _texts("Hello! ") == []
    assert _texts("Test!") == []
    assert _texts("'Test!'") == []
    assert _texts("!  ") == []


def test_chat_prose_is_not_a_command() -> None:
    assert _texts("<Bird12> Just making sure, thank you!!!!") == []
    assert _texts("Hi!! Quick question: Does Sundial of the Infinite bypass Psychic Vortex?") == []


def test_commands_inside_prose() -> None:
    line = "Hi!! Quick question: Does !Sundial of the Infinite work with !Psychic Vortex?"
    assert _texts(line) == ["Sundial of the Infinite work with", "Psychic Vortex"]


def test_both_markers_and_doubled_bang() -> None:
    assert _texts("<MW> !!fract ident &treas nabb") == ["fract ident", "treas nabb"]
    assert _texts("!100.1a !!hi") == ["100.1a", "hi"]


def test_sentence_break_ends_command() -> None:
    assert _texts("!ponder. Then I cast it") == ["ponder."]


def test_candidate_indexes_follow_appearance() -> None:
    candidates = tokenize("!alpha !beta [[gamma]]", implicit_command=False, max_length=MAX)
    assert [candidate.index for candidate in candidates] == [0, 1, 2]
    assert [candidate.text for candidate in candidates] == ["alpha", "beta", "gamma"]


def test_private_line_without_marker_is_one_command() -> None:
    assert _texts("lightning bolt", implicit=True) == ["lightning bolt"]
    assert _texts("lightning bolt", implicit=False) == []


def test_private_line_with_marker_uses_markers() -> None:
    assert _texts("what about !opt and &ponder", implicit=True) == ["opt and", "ponder"]


def test_long_candidate_is_truncated() -> None:
    line = "!" + "a" * 60
    assert _texts(line) == ["a" * MAX]


def test_name_keyword_and_quotes_are_stripped() -> None:
    assert _texts("!card Opt") == ["Opt"]
    assert _texts("!'Ponder'") == ["Ponder"]
    assert _texts('[["Lightning Bolt"]]') == ["Lightning Bolt"]


def test_tokenize_is_repeatable() -> None:
    line = "!alpha [[beta]] &gamma delta"
    first = tokenize(line, implicit_command=False, max_length=MAX)
    second = tokenize(line, implicit_command=False, max_length=MAX)
    assert first == second


def test_unclosed_brackets_are_ignored() -> None:
    assert extract_raw_commands("[[Foo") == []


def test_filters() -> None:
    assert is_pure_punctuation("!?")
    assert not is_pure_punctuation("!opt")
    assert is_degenerate_marker("! what")
    assert not is_degenerate_marker("!what")
    assert is_sentence_punctuation("!' she said")
    assert is_sentence_punctuation("!opt\nmore")
    assert not is_sentence_punctuation("!opt")
    assert is_quoted_empty('!""')
    assert is_quoted_empty("[['']]")
    assert not is_quoted_empty("!'a'")


def test_normalize() -> None:
    assert normalize("  !opt  ", MAX) == "opt"
    assert normalize("[[card Opt]]", MAX) == "Opt"
    assert normalize("!" + "b" * 50, 10) == "b" * 10


def test_greeting() -> None:
    assert is_greeting("Hello!")
    assert is_greeting("Hello       ?")
    assert is_greeting("Hi??")
    assert not is_greeting("Hello! I have a question.")
    assert not is_greeting("Hi, I have a question.")
