"""Fit a conversation and its tool definitions into a model's token window."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .errors import InsufficientSystemBudget, ToolsTooLarge
from .model_limits import DEFAULT_LIMITS, ModelLimitTable
from .tokenizer_service import TokenizerService, get_default_service

logger = logging.getLogger(__name__)


class Role(Enum):
    """Roles a chat message can carry."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """A single chat message."""
    role: Role
    content: Optional[str] = None
    name: Optional[str] = None
    tool_call_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class ToolDefinition:
    """A callable exposed to the model, in chat-completion function form."""
    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


MessageLike = Union[Message, Mapping[str, Any]]


def message_role(message: MessageLike) -> str:
    """Role of a Message or a role-tagged dict, as its string value."""
    if isinstance(message, Message):
        return message.role.value
    return message.get("role")


def message_content(message: MessageLike) -> Optional[str]:
    """Text content of a message; only plain strings or None can be counted."""
    if isinstance(message, Message):
        return message.content
    content = message.get("content")
    if content is not None and not isinstance(content, str):
        raise ValueError(f"Message content must be a string or null, got {type(content).__name__}")
    return content


def _tool_to_json(tool: Any) -> Any:
    if isinstance(tool, ToolDefinition):
        return tool.to_dict()
    raise TypeError(f"Tool definition of type {type(tool).__name__} is not JSON serializable")


def serialize_tools(tools: Iterable[Any]) -> str:
    """Serialize the whole tool collection into one compact JSON document."""
    return json.dumps(list(tools), default=_tool_to_json, ensure_ascii=False, separators=(",", ":"))


class MessageLimiter:
    """Trims conversation history to fit a model's context window."""

    def __init__(self,
                 tokenizer: Optional[TokenizerService] = None,
                 limits: Optional[ModelLimitTable] = None):
        """
        Initialize message limiter.

        Args:
            tokenizer: TokenizerService used for counting; the shared tiktoken service by default
            limits: Model limit table used when no explicit budget is given
        """
        self.tokenizer = tokenizer or get_default_service()
        self.limits = limits or DEFAULT_LIMITS

    @classmethod
    def from_config(cls, config) -> "MessageLimiter":
        """Build a limiter from a LimiterConfig."""
        issues = config.validate()
        if issues:
            raise ValueError(f"Invalid limiter configuration: {'; '.join(issues)}")

        if config.tokenizer_backend == "tiktoken":
            tokenizer = TokenizerService("tiktoken", fallback_model=config.fallback_model)
        else:
            tokenizer = TokenizerService(config.tokenizer_backend)
        limits = DEFAULT_LIMITS.with_overrides(config.model_limits, default=config.default_max_tokens)
        return cls(tokenizer, limits)

    def count_tools_tokens(self, tools: Sequence[Any], model: str) -> int:
        """Token cost of the tool collection, counted as a single blob."""
        if not tools:
            return 0
        return self.tokenizer.encode(model, serialize_tools(tools))

    def count_message_tokens(self, message: MessageLike, model: str) -> int:
        """Token cost of a message's content."""
        return self.tokenizer.encode(model, message_content(message))

    def limit(self,
              messages: Sequence[MessageLike],
              tools: Sequence[Any],
              model: str,
              max_tokens: Optional[int] = None) -> List[MessageLike]:
        """
        Drop the oldest non-system messages until everything fits.

        Every system message is kept. Non-system messages are kept from the
        newest backwards until the first one that does not fit; it and
        everything older are dropped.

        Args:
            messages: Conversation history in chronological order
            tools: Tool definitions sent alongside the messages
            model: Model identifier, used for the tokenizer and the default budget
            max_tokens: Explicit budget overriding the model's limit

        Returns:
            The retained messages, in their original order

        Raises:
            ToolsTooLarge: The tools alone exceed the budget
            InsufficientSystemBudget: The system messages do not fit next to the tools
        """
        if max_tokens is None:
            budget = self.limits.limit_for(model)
        elif max_tokens < 0:
            raise ValueError(f"max_tokens must be non-negative, got {max_tokens}")
        else:
            budget = max_tokens
        total_budget = budget

        tools = list(tools or [])
        tools_tokens = self.count_tools_tokens(tools, model)
        if tools_tokens > budget:
            raise ToolsTooLarge(tools_tokens, budget)
        budget -= tools_tokens

        system_tokens = 0
        for message in messages:
            if message_role(message) == Role.SYSTEM.value:
                num_tokens = self.count_message_tokens(message, model)
                system_tokens += num_tokens
                budget -= num_tokens
                if budget < 0:
                    raise InsufficientSystemBudget(system_tokens, total_budget - tools_tokens)

        logger.debug(
            "Budget for %s: %d total, %d for tools, %d for system messages, %d remaining",
            model, total_budget, tools_tokens, system_tokens, budget,
        )

        result: List[MessageLike] = []
        cutoff = False
        for message in reversed(messages):
            if message_role(message) == Role.SYSTEM.value:
                result.append(message)
                continue
            if cutoff:
                continue
            num_tokens = self.count_message_tokens(message, model)
            if num_tokens > budget:
                cutoff = True
                continue
            result.append(message)
            budget -= num_tokens

        result.reverse()

        dropped = len(messages) - len(result)
        if dropped:
            logger.info("Dropped %d of %d messages to fit %s within %d tokens",
                        dropped, len(messages), model, total_budget)
        return result


def limit_messages_to_token_count(messages: Sequence[MessageLike],
                                  tools: Sequence[Any],
                                  model: str,
                                  max_tokens: Optional[int] = None) -> List[MessageLike]:
    """Trim ``messages`` with the default tokenizer and model limits."""
    return MessageLimiter().limit(messages, tools, model, max_tokens)
