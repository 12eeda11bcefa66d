"""Console adapter for trying the pipeline without a chat transport."""

from __future__ import annotations

from typing import Callable, List

from adapters.reply_formatting import format_reply
from core.models import MessageContext


class ConsoleReplySink:
    """Sink adapter that prints plain-text lines and remembers them."""

    def __init__(self, write: Callable[[str], None] = print) -> None:
        self._write = write
        self.lines: List[str] = []

    async def send(self, context: MessageContext, line: str) -> None:
        text = format_reply(line, "plain")
        self.lines.append(text)
        self._write(f"[{context.destination}] {text}")


def console_context(text: str, *, public: bool, sender: str = "you") -> MessageContext:
    """Build the context for one typed console line."""

    return MessageContext(
        destination="#console" if public else "console",
        chat_id=None,
        sender=sender,
        text=text,
        is_private=not public,
    )
