"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Candidate:
    """A normalized command extracted from a chat line, with its position."""

    text: str
    index: int


@dataclass(frozen=True)
class MessageContext:
    """Minimal message context used by the core processing pipeline."""

    destination: str
    chat_id: Optional[int]
    sender: str
    text: str
    is_private: bool

    @property
    def address_prefix(self) -> str:
        """Prefix used to address the sender on public destinations."""

        if self.is_private or not self.sender:
            return ""
        return f"{self.sender}: "


@dataclass(frozen=True)
class DedupDecision:
    """Outcome of a dedup check for one reply."""

    allowed: bool
    preview: str = ""
