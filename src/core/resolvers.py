"""Resolvers that need no network access (core domain).

Help text, tournament policy links, dice, and coin flips are answered
locally. Network-backed resolvers live in the adapters package.
"""

from __future__ import annotations

import random
import re
from typing import List, Optional

HELP_LINES = (
    "!cardname to bring up that card's rules text",
    "!reminder <cardname> to bring up that card's reminder text",
    "!ruling <cardname> [ruling number] to bring up Gatherer rulings",
    "!rule <rulename> to bring up a Comprehensive Rule entry",
    "!define <glossary> to bring up the definition of a term",
    "!mtr / !ipg [section] for tournament policy links",
    "!roll 2d6 / !flip for dice and coins",
)

MTR_URL = "https://blogs.magicjudges.org/rules/mtr"
IPG_URL = "https://blogs.magicjudges.org/rules/ipg"

_NON_DIGITS = re.compile(r"[^0-9]+")
_DICE = re.compile(r"^(\d*)(?:d(\d+))?(?:([+-])(\d+))?$")
_COINS = re.compile(r"^(\d+)?$")
_TRAILING_PUNCTUATION = re.compile(r"\W$")

DICE_USAGE = "Try something like '!roll d4', '!roll 3d8', '!roll 2d6+2'"
MAX_DICE = 99
MAX_SIDES = 100
MAX_MODIFIER = 1000
MAX_COINS = 50


def reduce_card_sentence(tokens: List[str]) -> List[str]:
    """Return lookup attempts from the full phrase down to its first word.

    Trailing punctuation is dropped from each attempt, and attempts of two
    characters or fewer are skipped because they match far too much.
    """

    attempts: List[str] = []
    for size in range(len(tokens), 0, -1):
        attempt = _TRAILING_PUNCTUATION.sub("", " ".join(tokens[:size]))
        if len(attempt) > 2:
            attempts.append(attempt)
    return attempts


class HelpResolver:
    async def resolve(self, query: str) -> Optional[str]:
        return " · ".join(HELP_LINES)


class PolicyResolver:
    """Links to the Magic Tournament Rules and Infraction Procedure Guide."""

    def __init__(self, mtr_url: str = MTR_URL, ipg_url: str = IPG_URL) -> None:
        self._urls = {"mtr": mtr_url, "ipg": ipg_url}

    async def resolve(self, query: str) -> Optional[str]:
        words = query.split()
        if not words:
            return None
        base = self._urls.get(words[0].lower())
        if base is None:
            return None
        if len(words) == 1:
            return base
        # "4.8" becomes "4-8" to match the blog's section slugs.
        return base + _NON_DIGITS.sub("-", words[1])


class DiceResolver:
    """Rolls ``NdS[+/-M]``; a bare number N rolls one N-sided die."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    async def resolve(self, query: str) -> Optional[str]:
        expr = re.sub(r"(?i)^roll", "", query).replace(" ", "").lower()
        match = _DICE.match(expr)
        if not expr or not match or not (match.group(1) or match.group(2)):
            return DICE_USAGE

        count_raw, sides_raw, operator, modifier_raw = match.groups()
        if sides_raw is None:
            if operator:
                return DICE_USAGE
            sides = int(count_raw)
            if sides < 2 or sides > MAX_SIDES:
                return "malformed roll (sides must be between 2 and 100)"
            return f"1 {sides}-sided die: {self._rng.randint(1, sides)}"

        count = int(count_raw) if count_raw else 1
        sides = int(sides_raw)
        if count < 1 or count > MAX_DICE:
            return "malformed roll (max dice is 99)"
        if sides > MAX_SIDES:
            return "malformed roll (max sides is 100)"
        if sides < 2:
            return "malformed roll (min sides is 2)"
        modifier = int(modifier_raw) if modifier_raw else 0
        if modifier > MAX_MODIFIER:
            return "malformed roll (max operand is 1000)"

        total = sum(self._rng.randint(1, sides) for _ in range(count))
        if modifier:
            total = total + modifier if operator == "+" else total - modifier
            return f"{count} {sides}-sided dice ({operator}{modifier}): {total}"
        return f"{count} {sides}-sided dice: {total}"


class CoinResolver:
    """Flips up to fifty coins; more than five are shown compactly."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    async def resolve(self, query: str) -> Optional[str]:
        words = query.split()
        match = _COINS.match(words[1] if len(words) > 1 else "")
        if not match:
            return "malformed coin toss"
        count = int(match.group(1)) if match.group(1) else 1
        if count > MAX_COINS:
            return "malformed coin toss (max count is 50)"
        if count < 1:
            return "malformed coin toss (min count is 1)"

        flips = [self._rng.randint(0, 1) for _ in range(count)]
        if count > 5:
            return f"{count} coins: " + "".join("HT"[flip] for flip in flips) + "."
        return ", ".join(("Heads", "Tails")[flip] for flip in flips) + "."
