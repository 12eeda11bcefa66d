"""Core message processing pipeline.

This module is integration-agnostic. It only talks to the outside world
through the ports in core.ports.
"""

from __future__ import annotations

import logging
from typing import List

from core.chunker import chunk_reply
from core.config import RouterConfig
from core.dedup import Deduplicator
from core.dispatcher import Dispatcher
from core.models import MessageContext
from core.ports import ReplySinkPort
from core.tokenizer import is_greeting, tokenize

LOGGER = logging.getLogger(__name__)

WITHHELD_NOTICE = "Duplicate response withheld. ({preview} ...)"


def unique_replies(replies: List[str]) -> List[str]:
    """Drop empty replies and repeats, keeping first occurrences in order."""

    seen: set[str] = set()
    kept: List[str] = []
    for reply in replies:
        if not reply or reply in seen:
            continue
        seen.add(reply)
        kept.append(reply)
    return kept


class MessageProcessor:
    """Turns one chat line into the reply lines handed to the sink."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        deduplicator: Deduplicator,
        sink: ReplySinkPort,
        config: RouterConfig,
    ) -> None:
        self._dispatcher = dispatcher
        self._dedup = deduplicator
        self._sink = sink
        self._config = config

    async def handle(self, context: MessageContext) -> List[str]:
        """Process one chat line and return the physical lines that were sent."""

        text = context.text.strip()
        if not text:
            return []

        prefix = context.address_prefix
        candidates = tokenize(
            text,
            implicit_command=context.is_private,
            max_length=self._config.candidate_max_length,
        )
        if not candidates:
            return []
        LOGGER.debug("Found %s candidates in %s", len(candidates), context.destination)

        replies = await self._dispatcher.dispatch(candidates)

        sent: List[str] = []
        for reply in unique_replies(replies):
            decision = self._dedup.check(context.destination, reply, context.is_private)
            if not decision.allowed:
                lines = [prefix + WITHHELD_NOTICE.format(preview=decision.preview)]
            else:
                lines = chunk_reply(reply, self._config.max_line_width, prefix)
            for line in lines:
                await self._sink.send(context, line)
            sent.extend(lines)
        return sent


class GreetingResponder:
    """Answers a bare greeting, separately from command processing."""

    def __init__(self, sink: ReplySinkPort, greeting: str) -> None:
        self._sink = sink
        self._greeting = greeting

    async def handle(self, context: MessageContext) -> List[str]:
        if not is_greeting(context.text.strip()):
            return []
        line = f"{context.address_prefix}{self._greeting}"
        await self._sink.send(context, line)
        return [line]
