"""Filter service — parsing and applying the client's category selection."""
from __future__ import annotations

import json
import logging
from typing import Optional
from urllib.parse import unquote

from app.models.xtream import LiveStream

logger = logging.getLogger(__name__)


def parse_category_filter(raw: Optional[str]) -> Optional[set[str]]:
    """Parse the ``cats`` query value into a set of category ids.

    ``raw`` is a (possibly still percent-encoded) JSON array.  Anything that
    does not parse to an array yields ``None`` (no filtering) and a warning.
    An empty array also means no filtering.
    """
    if not raw:
        return None
    try:
        parsed = json.loads(unquote(raw))
    except ValueError as e:
        logger.warning(f"Failed to parse categories: {e}")
        return None
    if not isinstance(parsed, list):
        logger.warning(f"Failed to parse categories: expected a JSON array, got {type(parsed).__name__}")
        return None

    selected = {str(item) for item in parsed if item is not None}
    return selected or None


def should_include(stream: LiveStream, selected: Optional[set[str]]) -> bool:
    """Determine if a stream passes the category selection."""
    if not selected:
        return True
    return stream.category_id in selected


def filter_streams(streams: list[LiveStream], selected: Optional[set[str]]) -> list[LiveStream]:
    """Keep streams whose category is selected, preserving provider order."""
    if not selected:
        return list(streams)
    return [s for s in streams if should_include(s, selected)]
