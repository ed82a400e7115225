"""Protocol interfaces for dependency injection.

The client depends on these protocols rather than on a concrete transport,
so tests can substitute fakes for the secure channel.
"""
from __future__ import annotations

from .channel import (
    CODE_CHANGED,
    CODE_CONTENT,
    CODE_CREATED,
    CODE_DELETED,
    ChannelConnector,
    Method,
    Response,
    SecureChannel,
)

__all__ = [
    "CODE_CHANGED",
    "CODE_CONTENT",
    "CODE_CREATED",
    "CODE_DELETED",
    "ChannelConnector",
    "Method",
    "Response",
    "SecureChannel",
]
