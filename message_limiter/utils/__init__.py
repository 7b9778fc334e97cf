"""Utility helpers for message limiting."""

from .message_formatter import MessageFormatter

__all__ = ["MessageFormatter"]
