from __future__ import annotations

import asyncio
import random

from core.resolvers import (
    DICE_USAGE,
    CoinResolver,
    DiceResolver,
    HelpResolver,
    PolicyResolver,
    reduce_card_sentence,
)


def _resolve(resolver, query: str):
    return asyncio.run(resolver.resolve(query))


def test_reduce_card_sentence_descends_from_full_phrase() -> None:
    assert reduce_card_sentence(["Jace,", "the", "Mind", "Sculptor"]) == [
        "Jace, the Mind Sculptor",
        "Jace, the Mind",
        "Jace, the",
        "Jace",
    ]


def test_reduce_card_sentence_skips_short_attempts() -> None:
    assert reduce_card_sentence(["Op", "is", "good?"]) == ["Op is good", "Op is"]


def test_help_lists_commands() -> None:
    text = _resolve(HelpResolver(), "help")
    assert "!ruling" in text
    assert "!define" in text


def test_policy_links() -> None:
    resolver = PolicyResolver()
    assert _resolve(resolver, "mtr") == "https://blogs.magicjudges.org/rules/mtr"
    assert _resolve(resolver, "mtr 4.8") == "https://blogs.magicjudges.org/rules/mtr4-8"
    assert _resolve(resolver, "ipg 2.1") == "https://blogs.magicjudges.org/rules/ipg2-1"
    assert _resolve(resolver, "jar 1") is None


def test_dice_rolls_within_bounds() -> None:
    resolver = DiceResolver(random.Random(7))
    for _ in range(20):
        reply = _resolve(resolver, "roll 3d6+2")
        assert reply.startswith("3 6-sided dice (+2): ")
        assert 5 <= int(reply.rsplit(": ", 1)[1]) <= 20


def test_dice_single_die_forms() -> None:
    resolver = DiceResolver(random.Random(1))
    assert _resolve(resolver, "roll d20").startswith("1 20-sided dice: ")
    assert _resolve(resolver, "roll 4").startswith("1 4-sided die: ")


def test_dice_rejects_malformed_rolls() -> None:
    resolver = DiceResolver(random.Random(1))
    assert _resolve(resolver, "roll") == DICE_USAGE
    assert _resolve(resolver, "roll banana") == DICE_USAGE
    assert _resolve(resolver, "roll 100d6") == "malformed roll (max dice is 99)"
    assert _resolve(resolver, "roll 2d101") == "malformed roll (max sides is 100)"
    assert _resolve(resolver, "roll 2d1") == "malformed roll (min sides is 2)"
    assert _resolve(resolver, "roll 2d6+1001") == "malformed roll (max operand is 1000)"


def test_coin_flips() -> None:
    resolver = CoinResolver(random.Random(3))
    assert _resolve(resolver, "flip") in ("Heads.", "Tails.")
    three = _resolve(resolver, "flip 3")
    assert len(three.rstrip(".").split(", ")) == 3
    many = _resolve(resolver, "flip 12")
    assert many.startswith("12 coins: ")
    assert len(many[len("12 coins: "):-1]) == 12
    assert _resolve(resolver, "flip 51") == "malformed coin toss (max count is 50)"
    assert _resolve(resolver, "flip 0") == "malformed coin toss (min count is 1)"
