"""Core domain package for judgebot.

Core contains tokenizing, routing, dispatch, deduplication, and line
wrapping without any Telegram or HTTP-specific code, keeping the command
pipeline portable across transports.
"""
