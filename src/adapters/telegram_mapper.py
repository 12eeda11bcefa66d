"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from telethon.tl.custom import Message

from core.models import MessageContext


def destination_from_message(message: Message) -> str:
    """Normalize a destination key using a single rule enforced across the app."""

    chat = getattr(message, "chat", None)
    username = getattr(chat, "username", None)

    if isinstance(username, str) and username:
        return f"@{username.lower()}"

    # Fallback: always stable and universal
    return f"chat_id:{message.chat_id}"


def sender_label(sender) -> str:
    """Return how the sender is addressed in public replies."""

    if sender is None:
        return ""
    username = getattr(sender, "username", None)
    if isinstance(username, str) and username:
        return f"@{username}"
    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)
    title = getattr(sender, "title", None)
    return str(title) if title else ""


async def build_context(event) -> MessageContext:
    """Build a core MessageContext from a Telethon NewMessage event."""

    message = event.message
    sender = await event.get_sender()
    # Captures spanning lines are rejected by the tokenizer; fold them first.
    text = (message.raw_text or "").replace("\n", " ")

    return MessageContext(
        destination=destination_from_message(message),
        chat_id=message.chat_id,
        sender=sender_label(sender),
        text=text,
        is_private=bool(event.is_private),
    )
