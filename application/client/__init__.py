"""
Python client for the Zak Chat HTTP API.

Includes the incremental SSE parser used to consume streamed replies.
"""

from application.client.chat_client import ChatClient, ChatClientError, ChatStream
from application.client.sse_parser import SSEEventParser

__all__ = ["ChatClient", "ChatClientError", "ChatStream", "SSEEventParser"]
