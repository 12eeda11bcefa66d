"""Static configuration for judgebot.

All user-editable settings (wrapping, dedup, resolvers, transport, logging)
live in a single JSON file for quick edits without touching Python.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# CONFIG_PATH may be overridden from the environment for deployments.
CONFIG_PATH = os.getenv("JUDGEBOT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _project_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Command extraction and line wrapping.
# - MAX_LINE_WIDTH: physical line limit, addressing prefix included
# - CANDIDATE_MAX_LENGTH: longer captures are truncated before lookup
_router = _CONFIG.get("router", {})
MAX_LINE_WIDTH = int(_router.get("max_line_width", 390))
CANDIDATE_MAX_LENGTH = int(_router.get("candidate_max_length", 41))
GREETING = _router.get(
    "greeting",
    "Hello! If you have a question about Magic rules, please go ahead and ask.",
)

# Recent-reply suppression for public chats.
# - DEDUP_WINDOW_SECONDS: how long an identical reply is withheld
# - DEDUP_PREVIEW_CHARS: how much of a withheld reply is quoted back
# - DEDUP_EXEMPT_PHRASES: failure replies containing these are never withheld
_dedup = _CONFIG.get("dedup", {})
DEDUP_WINDOW_SECONDS = float(_dedup.get("window_seconds", 30))
DEDUP_PREVIEW_CHARS = int(_dedup.get("preview_chars", 23))
DEDUP_SWEEP_INTERVAL_SECONDS = float(_dedup.get("sweep_interval_seconds", 60))
DEDUP_EXEMPT_PHRASES = tuple(_dedup.get("exempt_phrases", ["not found"]))

# Resolver data sources.
_resolvers = _CONFIG.get("resolvers", {})
RULES_PATH = _project_path(_resolvers.get("rules_path", "data/CR.txt"))
SCRYFALL_URL = _resolvers.get("scryfall_url", "https://api.scryfall.com")
SCRYFALL_TIMEOUT = float(_resolvers.get("scryfall_timeout", 10))
MTR_URL = _resolvers.get("mtr_url", "https://blogs.magicjudges.org/rules/mtr")
IPG_URL = _resolvers.get("ipg_url", "https://blogs.magicjudges.org/rules/ipg")

# Transport formatting: "html", "markdown", or "plain".
_transport = _CONFIG.get("transport", {})
PARSE_MODE = _transport.get("parse_mode", "html")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
