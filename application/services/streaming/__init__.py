"""Streaming module relaying model output to clients via SSE."""

from application.services.streaming.events import StreamEvent
from application.services.streaming.image_trigger import extract_image_prompt
from application.services.streaming.relay import RelayState, StreamRelay

__all__ = ["RelayState", "StreamEvent", "StreamRelay", "extract_image_prompt"]
