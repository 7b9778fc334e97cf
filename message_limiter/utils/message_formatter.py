"""
Message formatter for converting between OpenAI-style dicts and Message objects.
"""

from typing import List, Dict, Any, Optional, Sequence

from ..core.message_limiter import Message, MessageLike, Role, ToolDefinition, message_content, message_role
from ..core.tokenizer_service import TokenizerService


class MessageFormatter:
    """Converts chat-completion payloads to and from Message objects."""

    def __init__(self):
        """Initialize message formatter."""
        # Roles sent by older clients, mapped onto the supported ones
        self.default_role_mapping = {
            "system": "system",
            "developer": "system",
            "user": "user",
            "assistant": "assistant",
            "tool": "tool",
            "function": "tool",
        }

    def from_openai_messages(
        self,
        messages: Sequence[Dict[str, Any]],
        role_mapping: Optional[Dict[str, str]] = None
    ) -> List[Message]:
        """
        Convert OpenAI-format message dicts into Message objects.

        Args:
            messages: Message dicts with at least a ``role`` key
            role_mapping: Custom incoming-role to role mapping

        Returns:
            Messages in the same order
        """
        mapping = role_mapping or self.default_role_mapping

        converted = []
        for index, raw in enumerate(messages):
            raw_role = raw.get("role")
            role = mapping.get(raw_role)
            if role is None:
                raise ValueError(f"Unsupported role {raw_role!r} in message {index}")

            content = raw.get("content")
            if content is not None and not isinstance(content, str):
                raise ValueError(f"Message {index} content must be a string or null")

            converted.append(Message(
                role=Role(role),
                content=content,
                name=raw.get("name"),
                tool_call_id=raw.get("tool_call_id"),
            ))

        return converted

    def to_openai_messages(self, messages: Sequence[MessageLike]) -> List[Dict[str, Any]]:
        """
        Convert messages into OpenAI-format dicts.

        Optional fields are emitted only when set; dict messages pass through.
        """
        result = []
        for message in messages:
            if not isinstance(message, Message):
                result.append(dict(message))
                continue

            payload: Dict[str, Any] = {
                "role": message.role.value,
                "content": message.content,
            }
            if message.name is not None:
                payload["name"] = message.name
            if message.tool_call_id is not None:
                payload["tool_call_id"] = message.tool_call_id
            result.append(payload)

        return result

    def to_openai_tools(self, tools: Sequence[Any]) -> List[Any]:
        """Render tool definitions as the JSON values sent to the endpoint."""
        return [tool.to_dict() if isinstance(tool, ToolDefinition) else tool for tool in tools]

    def get_role_summary(
        self,
        messages: Sequence[MessageLike],
        tokenizer: TokenizerService,
        model: str
    ) -> Dict[str, Any]:
        """
        Summarize message and token counts per role.

        Args:
            messages: Messages to summarize
            tokenizer: Tokenizer used for the counts
            model: Model whose encoding is used

        Returns:
            Summary with totals and a per-role breakdown
        """
        summary = {
            "total_messages": len(messages),
            "total_tokens": 0,
            "roles": {}
        }

        for message in messages:
            role = message_role(message)
            tokens = tokenizer.encode(model, message_content(message))
            stats = summary["roles"].setdefault(role, {"messages": 0, "tokens": 0})
            stats["messages"] += 1
            stats["tokens"] += tokens
            summary["total_tokens"] += tokens

        return summary
