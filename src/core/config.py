"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class RouterConfig:
    """Tokenizing and line-wrapping settings for the core pipeline."""

    max_line_width: int = 390
    candidate_max_length: int = 41
    greeting: str = "Hello! If you have a question about Magic rules, please go ahead and ask."


@dataclass(frozen=True)
class DedupConfig:
    """Recent-reply suppression settings for public destinations."""

    window_seconds: float = 30.0
    preview_chars: int = 23
    exempt_phrases: Tuple[str, ...] = field(default_factory=lambda: ("not found",))
