"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for resolvers, reply delivery, and error
reporting so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import MessageContext


class ResolverError(Exception):
    """A resolver could not reach or parse its data source."""


class ResolverPort(Protocol):
    """Turns one candidate into reply text, or None when nothing matched."""

    async def resolve(self, query: str) -> Optional[str]:
        ...


class ReplySinkPort(Protocol):
    """Delivery of physical reply lines to a destination."""

    async def send(self, context: MessageContext, line: str) -> None:
        ...


class ErrorReporterPort(Protocol):
    """Receives faults caught at dispatch unit boundaries."""

    def report(self, error: BaseException, query: str) -> None:
        ...
