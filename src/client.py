"""Telegram client factory for judgebot.

We explicitly manage the client's lifecycle (start/run_until_disconnected)
so it is obvious when the bot session is created and when it ends.
"""

from __future__ import annotations

import logging
import os
from typing import Tuple

from dotenv import load_dotenv
from telethon import TelegramClient


def build_client() -> Tuple[TelegramClient, str]:
    """Create a Telethon client and return it with the bot token.

    We read API_ID/API_HASH/BOT_TOKEN via python-dotenv to keep secrets out
    of the repo. The session name defaults to "judgebot".
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    bot_token = os.getenv("BOT_TOKEN")
    session_name = os.getenv("SESSION_NAME", "judgebot")

    # Fail fast on missing credentials to avoid an ambiguous login prompt.
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")
    if not bot_token:
        raise RuntimeError("Missing BOT_TOKEN in environment")

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(session_name, int(api_id), api_hash), bot_token
