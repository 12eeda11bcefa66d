"""Comprehensive Rules file loading adapter."""

from __future__ import annotations

import logging
import os
from typing import Dict, List

from core.rules import parse_rules

LOGGER = logging.getLogger(__name__)


def load_rules_file(path: str) -> Dict[str, List[str]]:
    """Parse the rules file at ``path``; a missing file yields no rules."""

    if not os.path.exists(path):
        LOGGER.warning("Rules file not found at %s; rules lookups are disabled", path)
        return {}

    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        rules = parse_rules(handle)
    LOGGER.info("Loaded %s rules and glossary entries", len(rules))
    return rules
