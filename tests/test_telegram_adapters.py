from __future__ import annotations

import asyncio

from adapters.telegram_mapper import build_context, destination_from_message, sender_label
from adapters.telegram_sink import TelegramReplySink
from core.models import MessageContext


class DummyChat:
    def __init__(self, username: "str | None" = None) -> None:
        self.username = username


class DummyUser:
    def __init__(self, username=None, first_name=None, last_name=None) -> None:
        self.username = username
        self.first_name = first_name
        self.last_name = last_name


class DummyMessage:
    def __init__(self, *, chat_id: int, text: str, chat: "DummyChat | None" = None) -> None:
        self.chat_id = chat_id
        self.raw_text = text
        self.chat = chat


class DummyEvent:
    def __init__(self, message: DummyMessage, sender, is_private: bool) -> None:
        self.message = message
        self._sender = sender
        self.is_private = is_private

    async def get_sender(self):
        return self._sender


class DummyClient:
    def __init__(self) -> None:
        self.sent: list[tuple] = []

    async def send_message(self, entity, message, parse_mode=None, link_preview=True) -> None:
        self.sent.append((entity, message, parse_mode, link_preview))


def test_destination_prefers_username() -> None:
    assert destination_from_message(DummyMessage(chat_id=-100123, text="", chat=DummyChat("Judges"))) == "@judges"
    assert destination_from_message(DummyMessage(chat_id=-100123, text="", chat=None)) == "chat_id:-100123"


def test_sender_label() -> None:
    assert sender_label(DummyUser(username="ana")) == "@ana"
    assert sender_label(DummyUser(first_name="Ana", last_name="Lee")) == "Ana Lee"
    assert sender_label(None) == ""


def test_build_context_for_group_message() -> None:
    event = DummyEvent(
        DummyMessage(chat_id=-100123, text="!opt\n!ponder", chat=DummyChat("judges")),
        DummyUser(username="ana"),
        is_private=False,
    )
    context = asyncio.run(build_context(event))

    assert context.destination == "@judges"
    assert context.chat_id == -100123
    assert context.text == "!opt !ponder"
    assert not context.is_private
    assert context.address_prefix == "@ana: "


def test_build_context_for_private_message() -> None:
    event = DummyEvent(DummyMessage(chat_id=42, text="opt"), DummyUser(username="ana"), is_private=True)
    context = asyncio.run(build_context(event))

    assert context.is_private
    assert context.address_prefix == ""


def test_sink_formats_and_sends_to_chat() -> None:
    client = DummyClient()
    sink = TelegramReplySink(client, parse_mode="html")
    context = MessageContext(destination="@judges", chat_id=-100123, sender="@ana", text="", is_private=False)

    asyncio.run(sink.send(context, "@ana: <b>Opt</b> x < y"))

    assert client.sent == [(-100123, "@ana: <b>Opt</b> x &lt; y", "html", False)]
