"""Conversation-scoped session state."""

from .store import SessionData

__all__ = [
    "SessionData",
]
