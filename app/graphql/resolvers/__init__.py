"""Export resolvers for easy combination in the main schema."""

from .system import echo, ping

__all__ = ["echo", "ping"]
