"""Resolver selection (core domain).

Routes are checked in order and the first whose predicate accepts the
candidate wins; the card lookup route is the fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Iterable, List, Mapping

from core.ports import ResolverPort

RULE_NUMBER = re.compile(r"(\d+\.\w{1,4})")
RULES_KEYWORDS = {"def", "define", "rule", "r", "cr"}
POLICY_KEYWORDS = {"mtr", "ipg"}
CARD_METADATA = re.compile(r"(?i)^(?:rulings?|reminder|flavou?r) ")
DICE = re.compile(r"(?i)^roll\b")
COIN = re.compile(r"(?i)^(?:flip|coin)\b")


@dataclass(frozen=True)
class Route:
    """A resolver plus the predicate that selects it and its fallback replies."""

    name: str
    matches: Callable[[str], bool]
    resolver: ResolverPort
    not_found_reply: str = ""
    failure_reply: str = ""


def _first_word(query: str) -> str:
    parts = query.split(maxsplit=1)
    return parts[0].lower() if parts else ""


def is_help_query(query: str) -> bool:
    return query.strip().lower() == "help"


def is_policy_query(query: str) -> bool:
    return _first_word(query) in POLICY_KEYWORDS


def is_rules_query(query: str) -> bool:
    if RULE_NUMBER.search(query):
        return True
    return _first_word(query) in RULES_KEYWORDS and len(query.split()) > 1


def is_card_metadata_query(query: str) -> bool:
    return bool(CARD_METADATA.match(query))


def is_random_query(query: str) -> bool:
    return query.strip().lower() == "random"


def is_dice_query(query: str) -> bool:
    return bool(DICE.match(query))


def is_coin_query(query: str) -> bool:
    return bool(COIN.match(query))


def _always(query: str) -> bool:
    return True


# Order matters: rules numbers must win over card names, metadata prefixes
# over plain card lookups.
ROUTE_PREDICATES = (
    ("help", is_help_query, "", ""),
    ("policy", is_policy_query, "Requested policy link not found.", ""),
    ("rules", is_rules_query, "Rule not found", ""),
    ("card_metadata", is_card_metadata_query, "Card not found", ""),
    ("random", is_random_query, "", "Error retrieving random card"),
    ("dice", is_dice_query, "", ""),
    ("coin", is_coin_query, "", ""),
    ("card", _always, "", ""),
)


def build_routes(resolvers: Mapping[str, ResolverPort]) -> List[Route]:
    """Pair the configured resolvers with their predicates.

    Resolver kinds missing from ``resolvers`` are skipped, so their queries
    fall through to later routes. The ``card`` resolver is required.
    """

    if "card" not in resolvers:
        raise ValueError("A card resolver is required as the fallback route")

    routes: List[Route] = []
    for name, predicate, not_found_reply, failure_reply in ROUTE_PREDICATES:
        resolver = resolvers.get(name)
        if resolver is None:
            continue
        routes.append(
            Route(
                name=name,
                matches=predicate,
                resolver=resolver,
                not_found_reply=not_found_reply,
                failure_reply=failure_reply,
            )
        )
    return routes


def select_route(query: str, routes: Iterable[Route]) -> Route:
    """Return the first route accepting ``query``."""

    routes = list(routes)
    for route in routes:
        if route.matches(query):
            return route
    # Without a catch-all, fall back to the last configured route.
    return routes[-1]
