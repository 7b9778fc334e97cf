"""
MessageLimiter: fit chat conversations into a model's token window.

This package counts tokens with model-specific encodings, reserves room for
tool definitions and system prompts, and drops the oldest conversation turns
that no longer fit before a request is sent to a chat-completion endpoint.
"""

__version__ = "0.1.0"
__author__ = "MessageLimiter Team"

from .core.errors import TokenLimitError, ToolsTooLarge, InsufficientSystemBudget
from .core.tokenizer_service import TokenizerService, encode, resolve_encoding
from .core.model_limits import ModelLimitTable, max_tokens_for_model
from .core.message_limiter import (
    Message,
    MessageLimiter,
    Role,
    ToolDefinition,
    limit_messages_to_token_count,
)
from .config.settings import LimiterConfig

__all__ = [
    "MessageLimiter",
    "TokenizerService",
    "ModelLimitTable",
    "LimiterConfig",
    "Message",
    "Role",
    "ToolDefinition",
    "TokenLimitError",
    "ToolsTooLarge",
    "InsufficientSystemBudget",
    "encode",
    "resolve_encoding",
    "limit_messages_to_token_count",
    "max_tokens_for_model",
]
