"""Scryfall card lookup adapter.

Implements the card, random card, and card metadata resolvers on top of
the Scryfall REST API.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
import urllib.error
import urllib.parse
import urllib.request
from typing import Dict, List, Optional

from core.ports import ResolverError
from core.resolvers import reduce_card_sentence

LOGGER = logging.getLogger(__name__)

SCRYFALL_API = "https://api.scryfall.com"
USER_AGENT = "judgebot/0.1"

_REMINDER = re.compile(r"\((.*?)\)")
_RULING_QUERY = re.compile(r"^(?:(?P<start>\d+) ?(?P<name>.+)|(?P<name2>.*?) ?(?P<end>\d+).*?|(?P<name3>.+))$")


def normalize_card_name(name: str) -> str:
    """Lowercase and drop everything but letters and digits."""

    return re.sub(r"\W+", "", name).lower()


class ScryfallClient:
    """Blocking Scryfall client with an in-memory name cache.

    Concurrent lookups of the same name may both hit the API; the cache is
    last-write-wins.
    """

    def __init__(self, base_url: str = SCRYFALL_API, timeout: float = 10) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._cache: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def _get_json(self, url: str) -> Optional[dict]:
        request = urllib.request.Request(url, method="GET")
        request.add_header("Accept", "application/json")
        request.add_header("User-Agent", USER_AGENT)
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                return json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return None
            body = e.read().decode("utf-8", errors="replace")
            raise ResolverError(f"Scryfall error {e.code}: {body}") from e
        except (urllib.error.URLError, TimeoutError, ValueError) as e:
            raise ResolverError(f"Scryfall request failed: {e}") from e

    def named(self, name: str) -> Optional[dict]:
        """Return the card best matching ``name``, or None."""

        key = normalize_card_name(name)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        query = urllib.parse.urlencode({"fuzzy": name})
        card = self._get_json(f"{self._base_url}/cards/named?{query}")
        if card is not None:
            with self._lock:
                self._cache[key] = card
                self._cache[normalize_card_name(card.get("name", ""))] = card
        return card

    def random(self) -> Optional[dict]:
        return self._get_json(f"{self._base_url}/cards/random")

    def rulings(self, card: dict) -> List[dict]:
        uri = card.get("rulings_uri")
        if not uri:
            return []
        payload = self._get_json(uri) or {}
        return payload.get("data", [])


def _format_face(face: dict) -> List[str]:
    parts = [f"<b>{face.get('name', '')}</b>"]
    if face.get("mana_cost"):
        parts.append(face["mana_cost"])
    parts.append(f"· {face.get('type_line', '')} ·")
    if face.get("power") is not None:
        parts.append(f"{face['power']}/{face.get('toughness', '')} ·")
    if face.get("loyalty"):
        parts.append(f"[{face['loyalty']}]")
    if face.get("oracle_text"):
        oracle = face["oracle_text"].replace("\n", " \\ ")
        parts.append(_REMINDER.sub(lambda m: f"<i>{m.group(0)}</i>", oracle))
    return parts


def format_card(card: dict) -> str:
    """Format a Scryfall card as one reply line per face."""

    faces = card.get("card_faces") or [card]
    lines = []
    for face in faces:
        parts = _format_face(face)
        if face is card or face.get("mana_cost"):
            parts.append(f"· {card.get('set', '').upper()}-{card.get('rarity', '')[:1].upper()} ·")
        lines.append(" ".join(parts))
    return "\n".join(lines)


def _oracle_text(card: dict) -> str:
    faces = card.get("card_faces") or [card]
    return " ".join(face.get("oracle_text", "") for face in faces)


def _flavor_text(card: dict) -> str:
    faces = card.get("card_faces") or [card]
    return " ".join(face.get("flavor_text", "") for face in faces if face.get("flavor_text"))


class CardResolver:
    """Default lookup: tries the whole phrase, then shorter prefixes of it."""

    def __init__(self, client: ScryfallClient) -> None:
        self._client = client

    async def find(self, tokens: List[str]) -> Optional[dict]:
        for attempt in reduce_card_sentence(tokens):
            card = await asyncio.to_thread(self._client.named, attempt)
            if card is not None:
                LOGGER.debug("Found card %s for %r", card.get("name"), attempt)
                return card
        return None

    async def resolve(self, query: str) -> Optional[str]:
        card = await self.find(query.split())
        return format_card(card) if card is not None else None


class RandomCardResolver:
    def __init__(self, client: ScryfallClient) -> None:
        self._client = client

    async def resolve(self, query: str) -> Optional[str]:
        card = await asyncio.to_thread(self._client.random)
        if card is None:
            raise ResolverError("Scryfall returned no random card")
        return format_card(card)


class CardMetadataResolver:
    """Reminder text, flavour text, and Gatherer rulings for a card."""

    def __init__(self, client: ScryfallClient) -> None:
        self._client = client
        self._cards = CardResolver(client)

    async def resolve(self, query: str) -> Optional[str]:
        command, _, rest = query.partition(" ")
        command = command.lower()
        rest = rest.strip()
        if command == "reminder":
            card = await self._cards.find(rest.split())
            if card is None:
                return None
            reminders = _REMINDER.findall(_oracle_text(card))
            return "\n".join(reminders) if reminders else "No reminder text."
        if command in ("flavor", "flavour"):
            card = await self._cards.find(rest.split())
            if card is None:
                return None
            return _flavor_text(card) or "No flavour text."
        return await self._rulings(rest)

    async def _rulings(self, rest: str) -> Optional[str]:
        match = _RULING_QUERY.match(rest)
        if not match:
            return None
        name = match.group("name") or match.group("name2") or match.group("name3") or ""
        number_raw = match.group("start") or match.group("end")
        card = await self._cards.find(name.split())
        if card is None:
            return None

        rulings = await asyncio.to_thread(self._client.rulings, card)
        if not rulings:
            return f"No rulings for {card.get('name', name)}."
        if number_raw:
            number = int(number_raw)
            if number < 1 or number > len(rulings):
                return "Ruling not found"
            rulings = [rulings[number - 1]]
        return "\n".join(
            f"{ruling.get('published_at', '')}: {ruling.get('comment', '')}" for ruling in rulings
        )
