"""Telegram reply delivery adapter.

Formats each physical line for the configured parse mode and sends it to
the chat the command came from.
"""

from __future__ import annotations

from adapters.reply_formatting import format_reply
from core.models import MessageContext

# Telethon parse_mode names for each reply formatting mode.
_PARSE_MODES = {"html": "html", "markdown": "md", "plain": None}


class TelegramReplySink:
    """Sink adapter that replies through a Telethon client."""

    def __init__(self, client, parse_mode: str = "html") -> None:
        if parse_mode not in _PARSE_MODES:
            raise ValueError(f"Unsupported parse mode: {parse_mode}")
        self._client = client
        self._mode = parse_mode

    async def send(self, context: MessageContext, line: str) -> None:
        """Send one formatted line to the originating chat."""

        entity = context.chat_id if context.chat_id is not None else context.destination
        await self._client.send_message(
            entity,
            format_reply(line, self._mode),
            parse_mode=_PARSE_MODES[self._mode],
            link_preview=False,
        )
