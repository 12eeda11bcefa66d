"""Comprehensive Rules and glossary lookups (core domain).

The rules text is parsed once into a flat dictionary:
- "100.1a" -> rule text
- "ex100.1a" -> example lines attached to that rule
- "Deathtouch" -> glossary entry
"""

from __future__ import annotations

import difflib
import logging
import re
from typing import Dict, Iterable, List, Optional

LOGGER = logging.getLogger(__name__)

RULE_LINE = re.compile(r"^(?P<number>\d+\.\w{1,4})\.? (?P<text>.*)")
RULE_NUMBER = re.compile(r"(\d+\.\w{1,4})")
SEE_RULE = re.compile(r"See rule (\d+\.?\d*\w?)")
KEYWORD_RULE = re.compile(r"^70[12]\.\d+$")
EXAMPLE_PREFIX = "Example: "
DEFINE_KEYWORDS = ("def", "define", "rule", "r", "cr")
EXAMPLE_KEYWORDS = ("ex", "example")
FUZZY_CUTOFF = 0.8

_TYPOGRAPHY = {"“": '"', "”": '"', "’": "'"}


def _clean(line: str) -> str:
    for fancy, plain in _TYPOGRAPHY.items():
        line = line.replace(fancy, plain)
    return line.rstrip("\r\n")


def parse_rules(lines: Iterable[str]) -> Dict[str, List[str]]:
    """Parse Comprehensive Rules text into rule, example, and glossary entries.

    The table of contents names "Glossary" and "Credits" once; their second
    appearance starts the glossary and ends the document respectively.
    """

    rules: Dict[str, List[str]] = {}
    seen_glossary = False
    seen_credits = False
    rules_mode = True
    last_rule = ""
    last_term = ""

    for raw in lines:
        line = _clean(raw)
        if rules_mode and not line:
            continue
        if line == "Glossary":
            if seen_glossary:
                rules_mode = False
            seen_glossary = True
            continue
        if line == "Credits":
            if seen_credits:
                break
            seen_credits = True
            continue

        if rules_mode:
            match = RULE_LINE.match(line)
            if match:
                number = match.group("number")
                if number in rules:
                    LOGGER.warning("Duplicate rule %s: %s", number, line)
                rules.setdefault(number, []).append(match.group("text"))
                last_rule = number
            elif line.startswith(EXAMPLE_PREFIX):
                if last_rule:
                    rules.setdefault("ex" + last_rule, []).append(line)
                else:
                    LOGGER.warning("Example without a rule: %s", line)
        elif not line:
            last_term = ""
        elif last_term:
            rules.setdefault(last_term, []).append(f"<b>{last_term}</b>: {line}")
        else:
            last_term = line

    return rules


class RulesResolver:
    """Answers rule numbers, rule examples, and glossary definitions."""

    def __init__(self, rules: Dict[str, List[str]]) -> None:
        self._rules = rules
        self._terms = [key for key in rules if not RULE_NUMBER.match(key) and not key.startswith("ex")]
        self._terms_lower = {term.lower(): term for term in self._terms}

    async def resolve(self, query: str) -> Optional[str]:
        return self.lookup(query) or None

    def lookup(self, query: str) -> str:
        words = query.split(maxsplit=1)
        keyword = words[0].lower() if words else ""
        number_match = RULE_NUMBER.search(query)

        if number_match and (keyword in EXAMPLE_KEYWORDS or keyword.startswith("ex")):
            return self._example(number_match.group(1))
        if number_match:
            return self._rule(number_match.group(1))
        if keyword in DEFINE_KEYWORDS and len(words) > 1:
            return self._define(words[1].strip())
        return ""

    def _example(self, number: str) -> str:
        examples = self._rules.get("ex" + number)
        if not examples:
            return ""
        text = " ".join(line[len(EXAMPLE_PREFIX):] for line in examples)
        return f"<b>[{number}] Example:</b> {text}".strip()

    def _rule(self, number: str) -> str:
        number = number.rstrip(".")
        text = self._rules.get(number)
        if not text:
            return ""
        # Keyword actions and abilities: subrule "a" carries the meaning.
        if KEYWORD_RULE.match(number) and (number + "a") in self._rules:
            number = number + "a"
            text = self._rules[number]
        return f"<b>{number}.</b> {''.join(text)}"

    def _define(self, term: str) -> str:
        key = self._terms_lower.get(term.lower())
        if key is None:
            guesses = difflib.get_close_matches(term.lower(), list(self._terms_lower), n=1, cutoff=FUZZY_CUTOFF)
            if not guesses:
                LOGGER.debug("No glossary match for %r", term)
                return ""
            key = self._terms_lower[guesses[0]]
        definition = "\n".join(self._rules[key])
        return (definition + self._see_rule(definition)).strip()

    def _see_rule(self, definition: str) -> str:
        if "See rule" not in definition or "See rules" in definition or "and rule" in definition:
            return ""
        match = SEE_RULE.search(definition)
        if not match:
            return ""
        rule = self._rule(match.group(1))
        return "\n" + rule if rule else ""
