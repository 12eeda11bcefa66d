"""Error reporting adapter.

Implements the core ErrorReporterPort by logging the fault with its
traceback, so dispatch faults end up wherever logging is configured.
"""

from __future__ import annotations

import logging
from typing import Optional


class LoggingErrorReporter:
    """Reporter that writes caught faults to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def report(self, error: BaseException, query: str) -> None:
        self._logger.error(
            "Lookup fault for %r: %s",
            query,
            error,
            exc_info=(type(error), error, error.__traceback__),
        )
