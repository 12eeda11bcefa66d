"""Adapters connecting the core pipeline to Telegram, Scryfall, and local files."""
