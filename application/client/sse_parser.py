"""Incremental parser for `data: {json}` Server-Sent Events."""

import json
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

EVENT_SEPARATOR = "\n\n"
DATA_PREFIX = "data: "


class SSEEventParser:
    """
    Turn arbitrarily split text chunks into decoded event payloads.

    A network read can end anywhere, including inside a JSON payload, so the
    trailing partial event is kept until its separator arrives.

    Example:
        >>> parser = SSEEventParser()
        >>> parser.feed('data: {"cont')
        []
        >>> parser.feed('ent": "hi"}\\n\\n')
        [{'content': 'hi'}]
    """

    def __init__(self):
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by an event separator."""
        return self._buffer

    def feed(self, chunk: str) -> List[Dict[str, Any]]:
        self._buffer += chunk
        *complete, self._buffer = self._buffer.split(EVENT_SEPARATOR)

        events = []
        for raw_event in complete:
            for line in raw_event.split("\n"):
                if not line.startswith(DATA_PREFIX):
                    continue
                try:
                    payload = json.loads(line[len(DATA_PREFIX):])
                except json.JSONDecodeError as e:
                    logger.warning(f"Skipping malformed SSE payload: {e}")
                    continue
                if not isinstance(payload, dict):
                    logger.warning(f"Skipping non-object SSE payload: {payload!r}")
                    continue
                events.append(payload)
        return events
