"""SSE event representation and formatting."""

import json
from typing import Any, Dict


class StreamEvent:
    """Represents a streaming event to send to the client.

    Events are data-only: the payload keys tell the client what arrived
    (``content``, ``imageUrl``, ``done`` or ``error``).
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    @classmethod
    def content(cls, fragment: str) -> "StreamEvent":
        return cls({"content": fragment})

    @classmethod
    def image(cls, image_url: str) -> "StreamEvent":
        return cls({"imageUrl": image_url})

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls({"done": True})

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls({"error": message})

    def to_sse(self) -> str:
        """Convert event to SSE format.

        Returns:
            A single ``data:`` line terminated by a blank line
        """
        return f"data: {json.dumps(self.data)}\n\n"

    def __repr__(self) -> str:
        return f"StreamEvent({self.data!r})"
