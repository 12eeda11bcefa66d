"""Concurrent candidate resolution (core domain).

Every candidate of a message is resolved in its own task. Each task writes
into a pre-sized slot list so replies come back in candidate order no
matter which resolver finishes first.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Sequence

from core.models import Candidate
from core.ports import ErrorReporterPort, ResolverError
from core.routing import Route

LOGGER = logging.getLogger(__name__)


class Dispatcher:
    """Fans candidates out to their resolvers and joins the replies in order."""

    def __init__(
        self,
        select: Callable[[str], Route],
        reporter: ErrorReporterPort,
    ) -> None:
        self._select = select
        self._reporter = reporter

    async def dispatch(self, candidates: Sequence[Candidate]) -> List[str]:
        """Resolve all candidates, returning one reply per candidate.

        Empty strings mark candidates with nothing to say; callers drop them.
        """

        replies = [""] * len(candidates)
        await asyncio.gather(
            *(self._run_unit(candidate, replies, slot) for slot, candidate in enumerate(candidates))
        )
        return replies

    async def _run_unit(self, candidate: Candidate, replies: List[str], slot: int) -> None:
        # Faults stay inside the unit: siblings and the join are unaffected.
        route = None
        try:
            route = self._select(candidate.text)
            LOGGER.debug("Dispatching %r to %s (slot %s)", candidate.text, route.name, slot)
            reply = await route.resolver.resolve(candidate.text)
            replies[slot] = route.not_found_reply if reply is None else reply
        except ResolverError as exc:
            LOGGER.warning("Resolver failed for %r: %s", candidate.text, exc)
            self._reporter.report(exc, candidate.text)
            replies[slot] = route.failure_reply if route else ""
        except Exception as exc:
            LOGGER.error("Unexpected fault resolving %r", candidate.text)
            self._reporter.report(exc, candidate.text)
            replies[slot] = ""
